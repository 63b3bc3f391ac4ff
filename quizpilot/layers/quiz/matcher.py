"""
Answer Matcher - picks the option that best fits a free-text answer.

Three tiers are tried in order and the first option that satisfies a
tier wins, even if a later option would fit better:

1. exact    - case-insensitive equality
2. partial  - case-insensitive containment in either direction
3. fuzzy    - at least half (rounded up) of the answer's words longer
              than two characters appear in the option text
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, TYPE_CHECKING
import logging
import math

if TYPE_CHECKING:
    from quizpilot.layers.action.executor import ActionExecutor
    from quizpilot.layers.quiz.locator import OptionNode

logger = logging.getLogger(__name__)

MIN_FUZZY_WORD_LENGTH = 3
FUZZY_THRESHOLD = 0.5


class MatchTier(Enum):
    EXACT = "exact"
    PARTIAL = "partial"
    FUZZY = "fuzzy"
    NONE = "none"


@dataclass
class MatchResult:
    """Outcome of matching one answer against a question's options."""
    matched: bool
    tier: MatchTier
    option_index: int = -1
    option_text: Optional[str] = None
    answer: str = ""

    @classmethod
    def no_match(cls, answer: str = "") -> "MatchResult":
        return cls(matched=False, tier=MatchTier.NONE, answer=answer)

    def to_dict(self) -> dict:
        return {
            "matched": self.matched,
            "tier": self.tier.value,
            "optionIndex": self.option_index,
            "optionText": self.option_text,
            "answer": self.answer,
        }


def answer_words(answer: str) -> List[str]:
    """Lower-cased answer words long enough to count for fuzzy matching."""
    return [w for w in answer.lower().split() if len(w) >= MIN_FUZZY_WORD_LENGTH]


def match_answer(texts: Sequence[str], answer: str) -> MatchResult:
    """
    Choose an option index for ``answer`` without touching the page.

    An empty option text is contained in every answer, so it wins the
    partial tier; an answer with no word longer than two characters needs
    zero word hits, so the first option wins the fuzzy tier.
    """
    wanted = answer.lower()

    for index, text in enumerate(texts):
        if text.strip().lower() == wanted:
            return MatchResult(True, MatchTier.EXACT, index, text, answer)

    for index, text in enumerate(texts):
        candidate = text.strip().lower()
        if wanted in candidate or candidate in wanted:
            return MatchResult(True, MatchTier.PARTIAL, index, text, answer)

    words = answer_words(answer)
    needed = math.ceil(len(words) * FUZZY_THRESHOLD)
    for index, text in enumerate(texts):
        candidate = text.lower()
        hits = sum(1 for word in words if word in candidate)
        if hits >= needed:
            logger.debug("Fuzzy match (%d/%d words) on option %d", hits, len(words), index)
            return MatchResult(True, MatchTier.FUZZY, index, text, answer)

    return MatchResult.no_match(answer)


class AnswerMatcher:
    """
    Matches an answer to an option and activates it.

    Example:
        >>> matcher = AnswerMatcher(ActionExecutor(document))
        >>> result = matcher.select_answer(group.options, "Paris")
        >>> result.tier
        <MatchTier.EXACT: 'exact'>
    """

    def __init__(self, executor: "ActionExecutor"):
        self.executor = executor

    def select_answer(self, options: Sequence["OptionNode"], answer: str) -> MatchResult:
        """Match ``answer`` and activate the winning option, if any."""
        if not options:
            logger.warning("No options provided to click")
            return MatchResult.no_match(answer)

        logger.info("Searching for answer: %r", answer)
        result = match_answer([o.text for o in options], answer)
        if not result.matched:
            logger.warning("Could not find matching answer for %r", answer)
            return result

        logger.info("%s match - clicking %r", result.tier.value.upper(), result.option_text)
        self.executor.activate(options[result.option_index].element)
        return result
