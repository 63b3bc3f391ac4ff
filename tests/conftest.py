import pytest

from quizpilot.layers.sense import HtmlDocument

QUIZ_URL = "https://quiz.example/geography/1"

QUIZ_HTML = """
<html>
<head><title>Geography Quiz</title><script>var tracking = true;</script></head>
<body>
  <h1>Geography</h1>
  <form id="quiz" action="/submit" method="POST">
    <div class="q-block">
      <h3>Round one</h3>
      <p class="question">What is the capital of France?</p>
      <label><input type="radio" name="q1" value="London"></label>
      <label><input type="radio" name="q1" value="Paris"></label>
      <label><input type="radio" name="q1" value="Berlin"></label>
    </div>
    <div class="q-block">
      <h3>Round two</h3>
      <p class="question">What is 2 + 2?</p>
      <button type="button" class="option">3</button>
      <button type="button" class="option">4</button>
      <button type="button" class="option">5</button>
    </div>
    <div class="q-block">
      <h3>Round three</h3>
      <p class="question">Which is the largest ocean?</p>
      <label><input type="checkbox" name="q3" value="Atlantic Ocean"></label>
      <label><input type="checkbox" name="q3" value="Pacific Ocean"></label>
    </div>
    <button type="submit">Submit answers</button>
  </form>
</body>
</html>
"""


@pytest.fixture
def quiz_document():
    """Three-question quiz: radios, option buttons, checkboxes."""
    return HtmlDocument.from_html(QUIZ_HTML, url=QUIZ_URL)


@pytest.fixture
def make_document():
    """Build an ``HtmlDocument`` from inline markup."""
    def _make(html, url="https://page.example/index.html"):
        return HtmlDocument.from_html(html, url=url)
    return _make


@pytest.fixture
def events_of():
    """Elements of a document that received a given event type, in order."""
    def _events(document, event_type):
        return [element for kind, element in document.events if kind == event_type]
    return _events


@pytest.fixture
def quiz_html():
    return QUIZ_HTML
