"""Sense Layer - Document access, selectors and page snapshots."""

from quizpilot.layers.sense.document import (
    Document,
    Element,
    HtmlDocument,
    SeleniumDocument,
)
from quizpilot.layers.sense.selectors import generate_selector
from quizpilot.layers.sense.snapshot import ElementDescriptor, SnapshotBuilder

__all__ = [
    "Document",
    "Element",
    "ElementDescriptor",
    "HtmlDocument",
    "SeleniumDocument",
    "SnapshotBuilder",
    "generate_selector",
]
