"""Core module - Page agent, protocol requests and driver management."""

from quizpilot.core.agent import AgentConfig, PageAgent
from quizpilot.core.requests import parse_request

__all__ = ["AgentConfig", "PageAgent", "parse_request"]
