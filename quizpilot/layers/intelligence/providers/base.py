from abc import ABC, abstractmethod
from typing import Any, Dict, List, Sequence
import json
import re

from quizpilot.exceptions import AnswerProviderError

_JSON_ARRAY = re.compile(r"\[.*\]", re.DOTALL)


def build_quiz_prompt(quiz_data: Sequence[Dict[str, Any]]) -> str:
    """Prompt asking for one answer per question as a bare JSON array."""
    return f"""You are a quiz solver. Analyze these quiz questions and provide the correct answer for each.

Quiz Questions:
{json.dumps(list(quiz_data), indent=2)}

Provide your response as a JSON array of correct answers, one for each question. Example: ["answer1", "answer2", "answer3"]
IMPORTANT: Return ONLY the JSON array, no other text."""


def parse_answers(text: str) -> List[str]:
    """
    Parse a model reply into an answer list.

    Tries the whole reply as JSON first, then the first ``[...]`` span in it.
    """
    try:
        parsed = json.loads(text.strip())
    except ValueError:
        match = _JSON_ARRAY.search(text)
        if not match:
            raise AnswerProviderError("Could not parse AI response")
        try:
            parsed = json.loads(match.group(0))
        except ValueError:
            raise AnswerProviderError("Could not parse AI response")

    if not isinstance(parsed, list):
        raise AnswerProviderError(f"Expected a JSON array of answers, got {type(parsed).__name__}")
    return [item if isinstance(item, str) else str(item) for item in parsed]


class AnswerProvider(ABC):
    """Abstract source of quiz answers."""

    @abstractmethod
    def get_answers(self, quiz_data: Sequence[Dict[str, Any]]) -> List[str]:
        """
        Answer every question.

        Args:
            quiz_data: ``[{"question": str, "options": [str, ...]}, ...]``

        Returns:
            Answers index-aligned with ``quiz_data``.
        """
        pass


class StaticAnswerProvider(AnswerProvider):
    """Returns a fixed answer list, whatever the quiz."""

    def __init__(self, answers: Sequence[str]):
        self.answers = list(answers)

    def get_answers(self, quiz_data: Sequence[Dict[str, Any]]) -> List[str]:
        return list(self.answers)
