"""Quiz Layer - question discovery, answer matching and the solving pass."""

from quizpilot.layers.quiz.locator import GroupLocator, OptionNode, Pattern, QuestionGroup
from quizpilot.layers.quiz.matcher import AnswerMatcher, MatchResult, MatchTier, match_answer
from quizpilot.layers.quiz.solver import (
    AdvanceReadiness,
    FixedDelay,
    QuestionChangeReadiness,
    QuizSolver,
    SolveResult,
)

__all__ = [
    "AdvanceReadiness",
    "AnswerMatcher",
    "FixedDelay",
    "GroupLocator",
    "MatchResult",
    "MatchTier",
    "OptionNode",
    "Pattern",
    "QuestionChangeReadiness",
    "QuestionGroup",
    "QuizSolver",
    "SolveResult",
    "match_answer",
]
