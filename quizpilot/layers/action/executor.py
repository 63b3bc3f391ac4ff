"""
Action Executor - DOM interactions issued on behalf of the agent.

Every interaction fires the same signals a real user would produce so
that pages listening on clicks, inputs or change events all react.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional
import logging
import time

from quizpilot.layers.sense.document import Document, Element

logger = logging.getLogger(__name__)

CHECKABLE_INPUT_TYPES = ("radio", "checkbox")
SUBMIT_SELECTOR = 'button[type="submit"], .submit-btn, input[type="submit"]'
DEFAULT_SCROLL_AMOUNT = 500


@dataclass
class ActionResult:
    """Result of an action execution."""
    success: bool
    action: str
    target: str
    duration_ms: float
    error: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


class ActionExecutor:
    """
    Execute actions against a document.

    Selectors that resolve to nothing produce a failed ``ActionResult``
    rather than an exception.

    Example:
        >>> executor = ActionExecutor(document)
        >>> result = executor.click("#start")
        >>> if result.success:
        ...     print("Clicked!")
    """

    def __init__(self, document: Document):
        self.document = document

    def click(self, selector: str) -> ActionResult:
        """Resolve ``selector`` and invoke the element's native activation."""
        start_time = time.time()
        element = self.document.resolve(selector)
        if element is None:
            return self._not_found("click", selector, start_time)

        element.click()
        return ActionResult(
            success=True,
            action="click",
            target=selector,
            duration_ms=(time.time() - start_time) * 1000,
        )

    def type_text(self, selector: str, text: str) -> ActionResult:
        """Focus the element, set its value and fire input and change events."""
        start_time = time.time()
        element = self.document.resolve(selector)
        if element is None:
            return self._not_found("type", selector, start_time)

        element.focus()
        element.set_value(text)
        element.dispatch_event("input")
        element.dispatch_event("change")
        return ActionResult(
            success=True,
            action="type",
            target=selector,
            duration_ms=(time.time() - start_time) * 1000,
            metadata={"text": text},
        )

    def scroll(self, direction: str, amount: Optional[int] = None) -> ActionResult:
        """Scroll the viewport up or down; other directions leave it in place."""
        start_time = time.time()
        amount = DEFAULT_SCROLL_AMOUNT if amount is None else amount
        if direction == "down":
            self.document.scroll_by(amount)
        elif direction == "up":
            self.document.scroll_by(-amount)
        return ActionResult(
            success=True,
            action="scroll",
            target=direction,
            duration_ms=(time.time() - start_time) * 1000,
            metadata={"amount": amount},
        )

    def activate(self, element: Element) -> None:
        """
        Select a quiz option.

        Calls the native activation and dispatches a bubbling click so
        listeners bound either way fire. Radio and checkbox inputs are then
        forced checked and a change event is sent for frameworks that only
        observe ``change``.
        """
        element.click()
        element.dispatch_event("click")
        if element.input_type in CHECKABLE_INPUT_TYPES:
            element.set_checked(True)
            element.dispatch_event("change")

    def submit(self) -> bool:
        """Click the page's submit control, if it has one."""
        button = self.document.query(SUBMIT_SELECTOR)
        if button is None:
            return False
        button.click()
        logger.info("Submitted via %r", button)
        return True

    def _not_found(self, action: str, selector: str, start_time: float) -> ActionResult:
        return ActionResult(
            success=False,
            action=action,
            target=selector,
            duration_ms=(time.time() - start_time) * 1000,
            error=f"Element not found: {selector}",
        )
