import pytest
from unittest.mock import MagicMock

from quizpilot.layers.action.executor import ActionExecutor, DEFAULT_SCROLL_AMOUNT


def test_click_missing_element_reports_error(make_document):
    executor = ActionExecutor(make_document("<p>x</p>"))
    result = executor.click("#missing")
    assert not result.success
    assert result.error == "Element not found: #missing"
    assert result.action == "click"


def test_click_by_xpath(make_document):
    doc = make_document("<div><button>a</button><button>b</button></div>")
    result = ActionExecutor(doc).click("/html/body/div[1]/button[2]")
    assert result.success
    assert doc.events == [("activate", doc.query_all("button")[1])]


def test_type_event_sequence(make_document):
    doc = make_document('<input id="q" value="old">')
    result = ActionExecutor(doc).type_text("#q", "quiz")
    assert result.success
    assert result.metadata == {"text": "quiz"}
    assert doc.resolve("#q").value == "quiz"
    assert [kind for kind, _ in doc.events] == ["focus", "input", "change"]


@pytest.mark.parametrize("direction,amount,expected", [
    ("down", None, DEFAULT_SCROLL_AMOUNT),
    ("down", 120, 120),
    ("up", 120, -120),
    ("left", 120, None),
])
def test_scroll(direction, amount, expected):
    document = MagicMock()
    result = ActionExecutor(document).scroll(direction, amount)
    assert result.success
    if expected is None:
        document.scroll_by.assert_not_called()
    else:
        document.scroll_by.assert_called_once_with(expected)


def test_activate_checkbox_forces_checked(make_document):
    doc = make_document('<input type="checkbox" id="c" checked>')
    box = doc.resolve("#c")
    # native click unchecks an already-checked box; activation re-checks it
    ActionExecutor(doc).activate(box)
    assert box.checked
    assert [kind for kind, _ in doc.events] == ["activate", "click", "change"]


def test_submit(make_document):
    doc = make_document('<div class="submit-btn">Done</div>')
    assert ActionExecutor(doc).submit() is True
    assert doc.events[0][0] == "activate"

    assert ActionExecutor(make_document("<button>Next</button>")).submit() is False
