from .base import AnswerProvider, StaticAnswerProvider, build_quiz_prompt, parse_answers
from .cloud_provider import CloudAnswerProvider

__all__ = [
    "AnswerProvider",
    "CloudAnswerProvider",
    "StaticAnswerProvider",
    "build_quiz_prompt",
    "parse_answers",
]
