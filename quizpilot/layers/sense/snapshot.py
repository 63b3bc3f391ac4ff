"""
Snapshot Builder - heuristic accessibility snapshot of a page.

Walks the whole document once and keeps the elements an agent can act
on: clickable nodes, text-entry controls and anything carrying an
``aria-label``. Also hosts the other read-only page inspections
(page dump, links, forms, text search, extraction).
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import logging

from quizpilot.layers.sense.document import Document, Element
from quizpilot.layers.sense.selectors import generate_selector

logger = logging.getLogger(__name__)

CLICKABLE_TAGS = ("button", "a")
TEXT_ENTRY_TAGS = ("input", "textarea")
FORM_FIELD_SELECTOR = "input, textarea, select"


@dataclass
class ElementDescriptor:
    """
    One interactive or labelled element in the snapshot.

    ``selector`` is the only durable handle; position in the snapshot is
    traversal order and carries no identity.
    """
    selector: str
    role: str
    label: str
    aria_label: str
    is_clickable: bool
    is_input: bool
    input_type: Optional[str]
    visible: bool

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the protocol's camelCase dictionary."""
        return {
            "selector": self.selector,
            "role": self.role,
            "label": self.label,
            "ariaLabel": self.aria_label,
            "isClickable": self.is_clickable,
            "isInput": self.is_input,
            "inputType": self.input_type,
            "visible": self.visible,
        }

    def __str__(self) -> str:
        """Compact one-line form for LLM prompts."""
        flags = []
        if self.is_clickable:
            flags.append("clickable")
        if self.is_input:
            flags.append(f"input:{self.input_type}")
        if not self.visible:
            flags.append("hidden")
        return f"[{self.role}] {self.label!r} ({self.selector}) {' '.join(flags)}".rstrip()


def derive_input_type(element: Element) -> Optional[str]:
    """Mirror of the DOM ``type`` property for form controls."""
    tag = element.tag_name
    if tag == "input":
        return element.input_type
    if tag == "textarea":
        return "textarea"
    if tag == "button":
        return (element.get_attribute("type") or "submit").lower()
    if tag == "select":
        return "select-multiple" if element.has_attribute("multiple") else "select-one"
    return None


class SnapshotBuilder:
    """
    Builds the accessibility snapshot and other page read-outs.

    Example:
        >>> builder = SnapshotBuilder(document)
        >>> for descriptor in builder.build_snapshot():
        ...     print(descriptor)
    """

    def __init__(self, document: Document, label_limit: int = 50, html_limit: int = 10000):
        """
        Args:
            document: Page to inspect
            label_limit: Maximum characters of text content used as a label
            html_limit: Maximum characters of body HTML in ``read_page``
        """
        self.document = document
        self.label_limit = label_limit
        self.html_limit = html_limit

    def build_snapshot(self) -> List[ElementDescriptor]:
        """Describe every interactive or labelled element in document order."""
        descriptors = []
        for element in self.document.all_elements():
            descriptor = self.describe(element)
            if descriptor is not None:
                descriptors.append(descriptor)
        logger.debug("Snapshot holds %d elements", len(descriptors))
        return descriptors

    def describe(self, element: Element) -> Optional[ElementDescriptor]:
        """Return a descriptor, or None when the element fails the filter."""
        tag = element.tag_name
        aria_label = element.get_attribute("aria-label") or ""
        is_clickable = (
            tag in CLICKABLE_TAGS
            or element.has_click_handler
            or element.has_attribute("tabindex")
        )
        is_input = tag in TEXT_ENTRY_TAGS

        if not (is_clickable or is_input or aria_label):
            return None

        label = aria_label or element.text_content.strip()[:self.label_limit]
        return ElementDescriptor(
            selector=generate_selector(element),
            role=element.get_attribute("role") or tag,
            label=label,
            aria_label=aria_label,
            is_clickable=is_clickable,
            is_input=is_input,
            input_type=derive_input_type(element),
            visible=element.is_visible(),
        )

    def read_page(self) -> Dict[str, Any]:
        """Full page dump for the reasoning agent."""
        return {
            "url": self.document.url,
            "title": self.document.title,
            "text": self.document.body_text(),
            "html": self.document.body_html()[:self.html_limit],
            "accessibilityTree": [d.to_dict() for d in self.build_snapshot()],
        }

    def find_by_text(self, text: str) -> List[Dict[str, str]]:
        return [
            {
                "selector": generate_selector(element),
                "text": element.text_content.strip(),
                "tag": element.tag_name.upper(),
            }
            for element in self.document.find_by_text(text)
        ]

    def get_links(self) -> List[Dict[str, str]]:
        return [
            {
                "href": self._href(a),
                "text": a.text_content.strip(),
                "selector": generate_selector(a),
            }
            for a in self.document.query_all("a")
        ]

    def get_forms(self) -> List[Dict[str, Any]]:
        forms = []
        for form in self.document.query_all("form"):
            fields = [
                {
                    "name": field.get_attribute("name") or "",
                    "type": derive_input_type(field),
                    "id": field.get_attribute("id") or "",
                    "selector": generate_selector(field),
                    "placeholder": field.get_attribute("placeholder") or "",
                }
                for field in form.query_all(FORM_FIELD_SELECTOR)
            ]
            forms.append({
                "action": self.document.absolute_url(form.get_attribute("action") or ""),
                "method": (form.get_attribute("method") or "get").lower(),
                "fields": fields,
            })
        return forms

    def extract(self, selector: str) -> List[Dict[str, Any]]:
        """Text, inner HTML and attributes of every element matching ``selector``."""
        return [
            {
                "text": element.text_content.strip(),
                "html": element.inner_html,
                "attributes": element.attributes,
            }
            for element in self.document.query_all(selector)
        ]

    def _href(self, anchor: Element) -> str:
        href = anchor.get_attribute("href")
        return self.document.absolute_url(href) if href is not None else ""
