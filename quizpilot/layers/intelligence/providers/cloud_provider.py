import os
import logging
from typing import Any, Dict, List, Optional, Sequence

from quizpilot.exceptions import AnswerProviderError
from .base import AnswerProvider, build_quiz_prompt, parse_answers

logger = logging.getLogger(__name__)


class CloudAnswerProvider(AnswerProvider):
    """
    Answers quizzes with a hosted LLM (OpenAI or Anthropic).

    Requires OPENAI_API_KEY or ANTHROPIC_API_KEY environment variables.
    Failures are raised to the caller; nothing is retried.
    """

    def __init__(self, provider: str = "auto", model: Optional[str] = None):
        self.provider = provider
        self.model = model
        self.client = None
        self._init_client()

    def _init_client(self):
        """Initialize the API client."""
        openai_key = os.environ.get("OPENAI_API_KEY")
        anthropic_key = os.environ.get("ANTHROPIC_API_KEY")

        # Auto-select provider if not specified
        if self.provider == "auto":
            if openai_key:
                self.provider = "openai"
            elif anthropic_key:
                self.provider = "anthropic"
            else:
                raise AnswerProviderError(
                    "No API keys found for CloudAnswerProvider. Set OPENAI_API_KEY or ANTHROPIC_API_KEY."
                )

        if self.provider == "openai":
            try:
                from openai import OpenAI
            except ImportError:
                raise ImportError("Please install openai: pip install openai")
            self.client = OpenAI(api_key=openai_key)
            self.model = self.model or "gpt-4-turbo-preview"

        elif self.provider == "anthropic":
            try:
                from anthropic import Anthropic
            except ImportError:
                raise ImportError("Please install anthropic: pip install anthropic")
            self.client = Anthropic(api_key=anthropic_key)
            self.model = self.model or "claude-3-opus-20240229"

        else:
            raise AnswerProviderError(f"Unknown provider '{self.provider}'")

        logger.info(f"[CloudAnswerProvider] Initialized using {self.provider} ({self.model})")

    def get_answers(self, quiz_data: Sequence[Dict[str, Any]]) -> List[str]:
        prompt = build_quiz_prompt(quiz_data)
        reply = self.complete(prompt)
        answers = parse_answers(reply)
        logger.info(f"[CloudAnswerProvider] Got {len(answers)} answers for {len(quiz_data)} questions")
        return answers

    def complete(self, prompt: str) -> str:
        """Send a single user prompt and return the reply text."""
        if self.provider == "openai":
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
            )
            return response.choices[0].message.content or ""

        message = self.client.messages.create(
            model=self.model,
            max_tokens=1024,
            messages=[{"role": "user", "content": prompt}],
        )
        return message.content[0].text
