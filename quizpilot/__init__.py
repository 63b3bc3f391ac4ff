"""
QuizPilot - DOM mining and quiz answering for uncontrolled web pages.

Builds heuristic accessibility snapshots for an external reasoning agent
and locates quiz questions and options so supplied answers can be
clicked.
"""

__version__ = "0.1.0"

from quizpilot.core.agent import AgentConfig, PageAgent

__all__ = [
    "AgentConfig",
    "PageAgent",
    "__version__",
]
