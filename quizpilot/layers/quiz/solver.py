"""
Quiz Solver - the ordered question-by-question answering pass.

The pass re-locates questions on every call, answers each one that has
an answer at the same index, and waits on an advance-readiness policy
between questions so pages that reveal the next question asynchronously
have time to settle.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, TYPE_CHECKING
import logging
import time

from quizpilot.layers.quiz.locator import GroupLocator, QuestionGroup
from quizpilot.layers.quiz.matcher import AnswerMatcher, MatchResult

if TYPE_CHECKING:
    from quizpilot.layers.action.executor import ActionExecutor
    from quizpilot.layers.intelligence.providers import AnswerProvider
    from quizpilot.layers.sense.document import Document
    from quizpilot.reporters.flight_recorder import FlightRecorder

logger = logging.getLogger(__name__)

DEFAULT_SETTLE_DELAY = 1.5
NO_QUESTIONS_ERROR = "No questions found on page"


class AdvanceReadiness(ABC):
    """Decides when the page is ready for the next question."""

    def prepare(self, document: "Document") -> None:
        """Called before the question is answered."""

    @abstractmethod
    def wait(self, document: "Document") -> None:
        pass


class FixedDelay(AdvanceReadiness):
    """Sleep a constant interval regardless of page state."""

    def __init__(self, seconds: float = DEFAULT_SETTLE_DELAY, sleep: Callable[[float], None] = time.sleep):
        self.seconds = seconds
        self._sleep = sleep

    def wait(self, document: "Document") -> None:
        if self.seconds > 0:
            self._sleep(self.seconds)


class QuestionChangeReadiness(AdvanceReadiness):
    """
    Poll until the located question set differs from the one seen before
    the answer was clicked, or the timeout elapses.

    Pages that keep every question on screen never change, so this policy
    always costs the full timeout there; use it for one-question-at-a-time
    quizzes.
    """

    def __init__(self, timeout: float = 5.0, interval: float = 0.1, locator: Optional[GroupLocator] = None):
        self.timeout = timeout
        self.interval = interval
        self.locator = locator
        self._before: Optional[List[str]] = None

    def prepare(self, document: "Document") -> None:
        self._before = self._fingerprint(document)

    def wait(self, document: "Document") -> None:
        before = self._before if self._before is not None else self._fingerprint(document)
        self._before = None
        end_time = time.time() + self.timeout
        while time.time() < end_time:
            time.sleep(self.interval)
            if self._fingerprint(document) != before:
                return
        logger.debug("Question set unchanged after %.1fs", self.timeout)

    def _fingerprint(self, document: "Document") -> List[str]:
        locator = self.locator or GroupLocator(document)
        return [q.text_content.strip() for q in locator.find_questions()]


@dataclass
class SolveResult:
    """Outcome of one solving pass."""
    success: bool
    questions_answered: int = 0
    matches: List[MatchResult] = field(default_factory=list)
    submitted: bool = False
    error: Optional[str] = None

    def to_response(self) -> Dict[str, Any]:
        if not self.success:
            return {"success": False, "error": self.error}
        return {"success": True, "questionsAnswered": self.questions_answered}


class QuizSolver:
    """
    Answers every located question from an ordered answer list.

    Example:
        >>> solver = QuizSolver(document, locator, matcher, executor)
        >>> result = solver.solve(["Paris", "4"])
        >>> result.questions_answered
        2
    """

    def __init__(
        self,
        document: "Document",
        locator: GroupLocator,
        matcher: AnswerMatcher,
        executor: "ActionExecutor",
        readiness: Optional[AdvanceReadiness] = None,
        auto_submit: bool = True,
        recorder: Optional["FlightRecorder"] = None,
    ):
        self.document = document
        self.locator = locator
        self.matcher = matcher
        self.executor = executor
        self.readiness = readiness or FixedDelay()
        self.auto_submit = auto_submit
        self.recorder = recorder

    def analyze(self) -> List[QuestionGroup]:
        return self.locator.locate()

    def quiz_data(self) -> List[Dict[str, Any]]:
        """Question/option text in the shape sent to the answer provider."""
        return [group.to_dict() for group in self.analyze()]

    def solve(self, answers: Sequence[str]) -> SolveResult:
        """
        Run one pass over the current questions.

        Questions beyond the end of ``answers`` are left alone and surplus
        answers are ignored. ``questions_answered`` counts questions
        iterated, not answers applied.
        """
        try:
            questions = self.locator.find_questions()
            logger.info("Found %d questions", len(questions))
            matches: List[MatchResult] = []

            for index, question in enumerate(questions):
                self.readiness.prepare(self.document)
                options = self.locator.find_options(question)
                if self.recorder:
                    self.recorder.log_question(index, question.text_content.strip(), len(options))

                if index < len(answers):
                    result = self.matcher.select_answer(options, answers[index])
                    matches.append(result)
                    if self.recorder:
                        self.recorder.log_match(index, result)
                    if result.matched:
                        logger.info("Q%d: Selected %r", index + 1, answers[index])
                    else:
                        logger.info("Q%d: Could not find %r", index + 1, answers[index])
                else:
                    logger.info("Q%d: No answer supplied, skipping", index + 1)

                self.readiness.wait(self.document)

            submitted = self.executor.submit() if self.auto_submit else False
            return SolveResult(
                success=True,
                questions_answered=len(questions),
                matches=matches,
                submitted=submitted,
            )
        except Exception as e:
            logger.error("Error solving quiz: %s", e)
            if self.recorder:
                self.recorder.log_error("Error solving quiz", e)
            return SolveResult(success=False, error=str(e))

    def auto_solve(self, provider: "AnswerProvider") -> SolveResult:
        """Extract the quiz, ask ``provider`` for every answer, then solve."""
        quiz_data = self.quiz_data()
        if not quiz_data:
            return SolveResult(success=False, error=NO_QUESTIONS_ERROR)

        logger.info("Found %d questions - requesting answers", len(quiz_data))
        try:
            answers = provider.get_answers(quiz_data)
        except Exception as e:
            logger.error("Failed to get answers: %s", e)
            if self.recorder:
                self.recorder.log_error("Answer provider failed", e)
            return SolveResult(success=False, error=str(e))

        logger.info("Got %d answers - starting automatic solving", len(answers))
        return self.solve(answers)
