"""Action Layer - DOM interaction components."""

from quizpilot.layers.action.executor import ActionExecutor, ActionResult

__all__ = ["ActionExecutor", "ActionResult"]
