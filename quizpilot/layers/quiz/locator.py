"""
Group Locator - finds quiz questions and their answer options.

Nothing is known about the page up front, so discovery runs ordered
cascades of CSS patterns. Each pattern carries its own acceptance test
on the match count and the first pattern that passes wins outright;
results from different patterns are never merged.

Options are searched inside the question's parent container. On pages
with a lot of unrelated interactive content that container can pull in
controls that belong elsewhere; this is a known limitation of the
heuristic.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple
import logging

from quizpilot.layers.sense.document import Document, Element

logger = logging.getLogger(__name__)

MAX_OPTIONS = 20
QUESTION_TEXT_MIN = 10
QUESTION_TEXT_MAX = 500


@dataclass(frozen=True)
class Pattern:
    """A CSS pattern and the match count it needs to be accepted."""
    selector: str
    accept: Callable[[int], bool]


def any_match(count: int) -> bool:
    return count > 0


def plausible_option_count(max_options: int = MAX_OPTIONS) -> Callable[[int], bool]:
    """More than one option, and fewer than ``max_options``."""
    return lambda count: 1 < count < max_options


def first_satisfying(
    patterns: Sequence[Pattern],
    query: Callable[[str], List[Element]],
) -> Tuple[Optional[Pattern], List[Element]]:
    """Run ``query`` per pattern and return the first accepted pattern and its matches."""
    for pattern in patterns:
        matches = query(pattern.selector)
        if pattern.accept(len(matches)):
            return pattern, matches
    return None, []


QUESTION_PATTERNS: Tuple[Pattern, ...] = tuple(
    Pattern(selector, any_match)
    for selector in (
        ".question",
        ".quiz-question",
        "[data-question]",
        "h3",
        "h4",
        ".question-text",
        ".q-text",
        ".quiz-item",
        '[role="group"]',
    )
)

QUESTION_FALLBACK_SELECTOR = "p, div, h1, h2, h3, h4"

OPTION_SELECTORS: Tuple[str, ...] = (
    'input[type="radio"], input[type="checkbox"]',
    "button.answer-option, button.option",
    ".answer-option, .option, .choice",
    '[role="radio"], [role="checkbox"]',
    "label",
    "li",
)

OPTION_FALLBACK_SELECTOR = "button, input, label, div[onclick]"


def option_text(element: Element) -> str:
    """First non-empty of rendered text, raw text content and form value."""
    return (element.inner_text or element.text_content or element.value or "").strip()


def option_kind(element: Element) -> str:
    kind = element.input_type or (element.get_attribute("role") or "").lower()
    if kind in ("radio", "checkbox"):
        return kind
    return "generic"


@dataclass
class OptionNode:
    """A selectable answer candidate."""
    element: Element
    text: str
    kind: str  # "radio", "checkbox" or "generic"

    @classmethod
    def from_element(cls, element: Element) -> "OptionNode":
        return cls(element=element, text=option_text(element), kind=option_kind(element))


@dataclass
class QuestionGroup:
    """A located question and the options found for it."""
    question: Element
    question_text: str
    options: List[OptionNode] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "question": self.question_text,
            "options": [o.text for o in self.options],
        }


class GroupLocator:
    """
    Locates question/option groupings without page-specific configuration.

    Example:
        >>> locator = GroupLocator(document)
        >>> for group in locator.locate():
        ...     print(group.question_text, [o.text for o in group.options])
    """

    def __init__(
        self,
        document: Document,
        max_options: int = MAX_OPTIONS,
        question_patterns: Sequence[Pattern] = QUESTION_PATTERNS,
    ):
        self.document = document
        self.question_patterns = tuple(question_patterns)
        self.option_patterns = tuple(
            Pattern(selector, plausible_option_count(max_options))
            for selector in OPTION_SELECTORS
        )

    def find_questions(self) -> List[Element]:
        """Question elements in document order, possibly empty."""
        pattern, questions = first_satisfying(self.question_patterns, self.document.query_all)
        if pattern is not None:
            logger.info("Found %d questions using selector: %s", len(questions), pattern.selector)
            return questions

        questions = [
            element
            for element in self.document.query_all(QUESTION_FALLBACK_SELECTOR)
            if self._looks_like_question(element.text_content.strip())
        ]
        if questions:
            logger.info("Found %d questions by pattern matching", len(questions))
        return questions

    def find_options(self, question: Element) -> List[OptionNode]:
        """Options inside the question's parent container."""
        container = question.parent
        if container is None:
            return []

        pattern, options = first_satisfying(self.option_patterns, container.query_all)
        if pattern is not None:
            logger.info("Found %d options using: %s", len(options), pattern.selector)
        else:
            options = container.query_all(OPTION_FALLBACK_SELECTOR)
            logger.debug("Falling back to %d clickable elements", len(options))
        return [OptionNode.from_element(o) for o in options]

    def locate(self) -> List[QuestionGroup]:
        """Build fresh question groups for the current page state."""
        return [
            QuestionGroup(
                question=question,
                question_text=question.text_content.strip(),
                options=self.find_options(question),
            )
            for question in self.find_questions()
        ]

    @staticmethod
    def _looks_like_question(text: str) -> bool:
        return text.endswith("?") and QUESTION_TEXT_MIN < len(text) < QUESTION_TEXT_MAX
