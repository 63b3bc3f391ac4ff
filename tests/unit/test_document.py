import lxml.html
import pytest

from quizpilot.layers.sense.document import HtmlDocument, is_xpath, xpath_literal


def test_xpath_literal_quoting():
    assert xpath_literal("Paris") == "'Paris'"
    assert xpath_literal("It's") == '"It\'s"'
    assert xpath_literal("It's \"quoted\"") == "concat('It', \"'\", 's \"quoted\"')"


def test_is_xpath():
    assert is_xpath("/html/body/div[1]")
    assert is_xpath('//*[@id="main"]/p[2]')
    assert not is_xpath("#main")
    assert not is_xpath("button.primary")


def test_resolve_css_and_xpath(make_document):
    doc = make_document('<div id="main"><p>one</p><p class="two">two</p></div>')
    assert doc.resolve("#main").tag_name == "div"
    assert doc.resolve("p.two").text_content == "two"
    assert doc.resolve('//*[@id="main"]/p[1]').text_content == "one"
    assert doc.resolve("/html/body/div[1]/p[2]") == doc.resolve("p.two")
    assert doc.resolve("#missing") is None


def test_find_by_text_handles_quotes(make_document):
    doc = make_document("<p>Don't panic</p><span>Panic</span><div>other</div>")
    matches = doc.find_by_text("Don't")
    assert [m.tag_name for m in matches] == ["p"]


def test_title_body_and_text(make_document):
    doc = make_document(
        "<html><head><title> My Page </title></head>"
        "<body><p>Hello <b>world</b></p><script>ignored()</script>"
        "<p hidden>secret</p></body></html>"
    )
    assert doc.title == "My Page"
    assert doc.body.tag_name == "body"
    assert doc.body_text() == "Hello world"
    assert "<b>world</b>" in doc.body_html()


class TestVisibility:
    """Static visibility approximates computed display/visibility."""

    def test_display_none_is_inherited(self, make_document):
        doc = make_document('<div style="display: none"><span id="inner">x</span></div><span id="shown">y</span>')
        assert not doc.resolve("#inner").is_visible()
        assert doc.resolve("#shown").is_visible()

    def test_hidden_attribute_and_hidden_input(self, make_document):
        doc = make_document('<p id="a" hidden>a</p><input id="b" type="hidden"><input id="c">')
        assert not doc.resolve("#a").is_visible()
        assert not doc.resolve("#b").is_visible()
        assert doc.resolve("#c").is_visible()

    def test_nearest_visibility_declaration_wins(self, make_document):
        doc = make_document(
            '<div style="visibility:hidden">'
            '<span id="a">a</span><span id="b" style="visibility: visible">b</span>'
            "</div>"
        )
        assert not doc.resolve("#a").is_visible()
        assert doc.resolve("#b").is_visible()

    def test_root_and_body_have_no_containing_block(self, make_document):
        doc = make_document("<p>x</p>")
        assert not doc.resolve("html").is_visible()
        assert not doc.body.is_visible()


class TestInteractions:

    def test_radio_click_unchecks_same_name(self, make_document):
        doc = make_document(
            '<input type="radio" name="q" id="a" checked>'
            '<input type="radio" name="q" id="b">'
            '<input type="radio" name="other" id="c" checked>'
        )
        doc.resolve("#b").click()
        assert not doc.resolve("#a").checked
        assert doc.resolve("#b").checked
        assert doc.resolve("#c").checked

    def test_checkbox_click_toggles(self, make_document):
        doc = make_document('<input type="checkbox" id="box">')
        box = doc.resolve("#box")
        box.click()
        assert box.checked
        box.click()
        assert not box.checked

    def test_label_click_activates_control(self, make_document):
        doc = make_document(
            '<label for="opt">Option</label><input type="radio" id="opt">'
            '<label id="wrap"><input type="checkbox" id="inner"> Wrapped</label>'
        )
        doc.resolve("label").click()
        doc.resolve("#wrap").click()
        assert doc.resolve("#opt").checked
        assert doc.resolve("#inner").checked
        assert [kind for kind, _ in doc.events] == ["activate"] * 4

    def test_set_value_on_input_and_textarea(self, make_document):
        doc = make_document('<input id="name" value="old"><textarea id="bio">old text</textarea>')
        doc.resolve("#name").set_value("new")
        doc.resolve("#bio").set_value("new text")
        assert doc.resolve("#name").value == "new"
        assert doc.resolve("#bio").value == "new text"

    def test_scroll_is_clamped_at_top(self, make_document):
        doc = make_document("<p>x</p>")
        doc.scroll_by(300)
        doc.scroll_by(-500)
        assert doc.viewport() == {"width": 1280, "height": 720, "scrollX": 0, "scrollY": 0}


def test_form_values(make_document):
    doc = make_document(
        '<input type="radio" id="r"><input id="t">'
        '<select id="s"><option value="a">A</option><option value="b" selected>B</option></select>'
        '<button id="btn">Go</button><div id="d">div</div>'
    )
    assert doc.resolve("#r").value == "on"
    assert doc.resolve("#t").value == ""
    assert doc.resolve("#s").value == "b"
    assert doc.resolve("#btn").value == ""
    assert doc.resolve("#d").value is None


def test_element_identity(make_document):
    doc = make_document('<p id="x">x</p>')
    assert doc.resolve("#x") == doc.query("p")
    assert len({doc.resolve("#x"), doc.query("p")}) == 1


def test_query_all_is_scoped_to_descendants(make_document):
    doc = make_document('<div class="box"><div class="box"><span>a</span></div></div>')
    outer = doc.query("div.box")
    assert len(outer.query_all("div.box")) == 1
    assert len(doc.query_all("div.box")) == 2


def test_from_file(tmp_path):
    page = tmp_path / "quiz.html"
    page.write_text("<html><head><title>Saved</title></head><body><a href='next.html'>Next</a></body></html>")
    doc = HtmlDocument.from_file(str(page))
    assert doc.title == "Saved"
    assert doc.url == f"file://{page}"
    assert doc.absolute_url("next.html") == f"file://{tmp_path}/next.html"


def test_detached_node_has_no_parent():
    doc = HtmlDocument(lxml.html.document_fromstring("<p>x</p>"))
    root = doc.resolve("html")
    assert root.parent is None
    assert root.children[-1].tag_name == "body"
