"""
Selector Generator - short, re-resolvable locators for elements.

Priority: ``#id``, then ``tag.class1.class2``, then a positional XPath
anchored at the nearest ancestor with an id or at ``/html/body``.
Identifiers and class names are used verbatim, without escaping, so
unusual characters can produce a selector that does not resolve.
"""

from typing import List

from quizpilot.exceptions import SelectorError
from quizpilot.layers.sense.document import Element

MAX_SELECTOR_CLASSES = 2


def generate_selector(element: Element) -> str:
    """
    Build a locator that ``Document.resolve`` maps back to ``element``.

    The class branch is a readability heuristic: several elements may share
    a tag and their first two classes, in which case the selector resolves
    to the first of them.
    """
    ident = element.get_attribute("id")
    if ident:
        return f"#{ident}"

    classes = _class_tokens(element)[:MAX_SELECTOR_CLASSES]
    if classes:
        return f"{element.tag_name}.{'.'.join(classes)}"

    return positional_path(element)


def positional_path(element: Element) -> str:
    """XPath built from tag names and 1-based same-tag sibling positions."""
    ident = element.get_attribute("id")
    if ident:
        return f'//*[@id="{ident}"]'
    if element.tag_name == "body":
        return "/html/body"

    parent = element.parent
    if parent is None:
        if element.tag_name == "html":
            return "/html"
        raise SelectorError(f"Cannot build a path for detached element {element!r}")

    index = 1
    for sibling in parent.children:
        if sibling == element:
            break
        if sibling.tag_name == element.tag_name:
            index += 1
    return f"{positional_path(parent)}/{element.tag_name}[{index}]"


def _class_tokens(element: Element) -> List[str]:
    return [c for c in (element.get_attribute("class") or "").split() if c]
