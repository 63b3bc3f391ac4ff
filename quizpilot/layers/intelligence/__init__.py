"""Intelligence Layer - external answer providers."""

from quizpilot.layers.intelligence.providers import (
    AnswerProvider,
    CloudAnswerProvider,
    StaticAnswerProvider,
    parse_answers,
)

__all__ = ["AnswerProvider", "CloudAnswerProvider", "StaticAnswerProvider", "parse_answers"]
