"""
Document Context - the page tree every component reads and writes.

All sense, quiz and action components receive a ``Document`` instead of
reaching for a global page, so the same heuristics run against a live
Selenium session or a static lxml tree parsed from saved HTML.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple, TYPE_CHECKING
from urllib.parse import urljoin
import re

import lxml.html

if TYPE_CHECKING:
    from selenium.webdriver.remote.webdriver import WebDriver
    from selenium.webdriver.remote.webelement import WebElement


FIND_BY_TEXT_XPATH = "//*[contains(text(), {literal})]"


def xpath_literal(text: str) -> str:
    """Quote ``text`` as an XPath 1.0 string literal."""
    if "'" not in text:
        return f"'{text}'"
    if '"' not in text:
        return f'"{text}"'
    parts = text.split("'")
    return "concat(" + ", \"'\", ".join(f"'{part}'" for part in parts) + ")"


def is_xpath(selector: str) -> bool:
    """Positional paths and id anchors are XPath, everything else is CSS."""
    return selector.startswith("/")


class Element(ABC):
    """A single element node inside a ``Document``."""

    @property
    @abstractmethod
    def tag_name(self) -> str:
        """Lower-cased tag name."""

    @abstractmethod
    def get_attribute(self, name: str) -> Optional[str]:
        """Return the raw attribute value, or None when absent."""

    @property
    @abstractmethod
    def attributes(self) -> Dict[str, str]:
        pass

    @property
    @abstractmethod
    def parent(self) -> Optional["Element"]:
        """The parent element, or None for the root or a detached node."""

    @property
    @abstractmethod
    def children(self) -> List["Element"]:
        """Element children in document order (text and comments skipped)."""

    @property
    @abstractmethod
    def inner_text(self) -> str:
        pass

    @property
    @abstractmethod
    def text_content(self) -> str:
        pass

    @property
    @abstractmethod
    def value(self) -> Optional[str]:
        """Form value, or None for elements without one."""

    @property
    @abstractmethod
    def inner_html(self) -> str:
        pass

    @property
    @abstractmethod
    def has_click_handler(self) -> bool:
        pass

    @abstractmethod
    def is_visible(self) -> bool:
        """Laid out and not hidden by display or visibility."""

    @abstractmethod
    def query_all(self, css: str) -> List["Element"]:
        """Descendants matching ``css`` in document order."""

    @abstractmethod
    def click(self) -> None:
        """Invoke the element's native activation."""

    @abstractmethod
    def dispatch_event(self, event_type: str) -> None:
        """Dispatch a bubbling event (a cancelable pointer event for clicks)."""

    @abstractmethod
    def focus(self) -> None:
        pass

    @abstractmethod
    def set_value(self, text: str) -> None:
        pass

    @abstractmethod
    def set_checked(self, checked: bool) -> None:
        pass

    def has_attribute(self, name: str) -> bool:
        return self.get_attribute(name) is not None

    @property
    def input_type(self) -> Optional[str]:
        """The ``type`` of an input element, lower-cased, or None."""
        if self.tag_name != "input":
            return None
        return (self.get_attribute("type") or "text").strip().lower()

    def __repr__(self) -> str:
        ident = self.get_attribute("id")
        suffix = f"#{ident}" if ident else ""
        return f"<{type(self).__name__} {self.tag_name}{suffix}>"


class Document(ABC):
    """
    A page whose element tree can be inspected and manipulated.

    Example:
        >>> doc = HtmlDocument.from_html("<button id='go'>Go</button>")
        >>> doc.resolve("#go").inner_text
        'Go'
    """

    @property
    @abstractmethod
    def url(self) -> str:
        pass

    @property
    @abstractmethod
    def title(self) -> str:
        pass

    @property
    @abstractmethod
    def body(self) -> Optional[Element]:
        pass

    @abstractmethod
    def all_elements(self) -> List[Element]:
        """Every element in document order, the root included."""

    @abstractmethod
    def query_all(self, css: str) -> List[Element]:
        pass

    @abstractmethod
    def xpath_all(self, xpath: str) -> List[Element]:
        pass

    @abstractmethod
    def body_text(self) -> str:
        pass

    @abstractmethod
    def body_html(self) -> str:
        pass

    @abstractmethod
    def viewport(self) -> Dict[str, float]:
        """Viewport metrics: width, height, scrollX, scrollY."""

    @abstractmethod
    def scroll_by(self, dy: int) -> None:
        pass

    def query(self, css: str) -> Optional[Element]:
        matches = self.query_all(css)
        return matches[0] if matches else None

    def resolve(self, selector: str) -> Optional[Element]:
        """
        Re-resolve a selector to the first matching element.

        Selectors starting with ``/`` are evaluated as XPath, anything else as
        CSS. Malformed selectors raise the backend's syntax error.
        """
        if is_xpath(selector):
            matches = self.xpath_all(selector)
        else:
            matches = self.query_all(selector)
        return matches[0] if matches else None

    def find_by_text(self, text: str) -> List[Element]:
        """Elements whose first text node contains ``text``, in document order."""
        return self.xpath_all(FIND_BY_TEXT_XPATH.format(literal=xpath_literal(text)))

    def absolute_url(self, href: str) -> str:
        return urljoin(self.url, href)


# ---------------------------------------------------------------------------
# Static documents (lxml)
# ---------------------------------------------------------------------------

_DISPLAY_NONE = re.compile(r"display\s*:\s*none", re.IGNORECASE)
_VISIBILITY = re.compile(r"visibility\s*:\s*(hidden|collapse|visible)", re.IGNORECASE)
_UNRENDERED_TAGS = {"head", "script", "style", "template", "noscript", "title", "meta", "link"}
_TEXT_SKIP_TAGS = {"script", "style", "template", "noscript"}


def _self_hidden(node: Any) -> bool:
    if node.get("hidden") is not None:
        return True
    if node.tag == "input" and (node.get("type") or "").lower() == "hidden":
        return True
    return bool(_DISPLAY_NONE.search(node.get("style") or ""))


def _collect_rendered_text(node: Any, parts: List[str]) -> None:
    if node.text:
        parts.append(node.text)
    for child in node:
        if isinstance(child.tag, str) and child.tag not in _TEXT_SKIP_TAGS and not _self_hidden(child):
            _collect_rendered_text(child, parts)
        if child.tail:
            parts.append(child.tail)


class HtmlElement(Element):
    """Element of an ``HtmlDocument``, wrapping an lxml node."""

    def __init__(self, document: "HtmlDocument", node: Any):
        self._document = document
        self._node = node

    @property
    def node(self) -> Any:
        return self._node

    @property
    def tag_name(self) -> str:
        return self._node.tag.lower()

    def get_attribute(self, name: str) -> Optional[str]:
        return self._node.get(name)

    @property
    def attributes(self) -> Dict[str, str]:
        return dict(self._node.attrib)

    @property
    def parent(self) -> Optional[Element]:
        parent = self._node.getparent()
        if parent is None:
            return None
        return self._document.wrap(parent)

    @property
    def children(self) -> List[Element]:
        return [self._document.wrap(c) for c in self._node if isinstance(c.tag, str)]

    @property
    def inner_text(self) -> str:
        parts: List[str] = []
        _collect_rendered_text(self._node, parts)
        return " ".join(" ".join(parts).split())

    @property
    def text_content(self) -> str:
        return self._node.text_content()

    @property
    def value(self) -> Optional[str]:
        tag = self.tag_name
        if tag == "input":
            value = self._node.get("value")
            if value is None and self.input_type in ("radio", "checkbox"):
                return "on"
            return value or ""
        if tag == "textarea":
            return self._node.text_content()
        if tag == "select":
            options = [o for o in self._node.iter("option")]
            selected = [o for o in options if o.get("selected") is not None]
            chosen = (selected or options or [None])[0]
            if chosen is None:
                return ""
            return chosen.get("value", chosen.text_content())
        if tag in ("button", "option"):
            return self._node.get("value", "" if tag == "button" else self._node.text_content())
        return None

    @property
    def inner_html(self) -> str:
        pieces = [self._node.text or ""]
        for child in self._node:
            pieces.append(lxml.html.tostring(child, encoding="unicode"))
        return "".join(pieces)

    @property
    def has_click_handler(self) -> bool:
        return self._node.get("onclick") is not None

    def is_visible(self) -> bool:
        if self.tag_name in ("html", "body"):
            return False
        if self.input_type == "hidden":
            return False
        visibility = None
        node = self._node
        while node is not None:
            if node.tag in _UNRENDERED_TAGS:
                return False
            if node.get("hidden") is not None:
                return False
            style = node.get("style") or ""
            if _DISPLAY_NONE.search(style):
                return False
            if visibility is None:
                match = _VISIBILITY.search(style)
                if match:
                    visibility = match.group(1).lower()
            node = node.getparent()
        return visibility not in ("hidden", "collapse")

    def query_all(self, css: str) -> List[Element]:
        return [
            self._document.wrap(n)
            for n in self._node.cssselect(css)
            if n is not self._node
        ]

    def click(self) -> None:
        self._document.record("activate", self)
        input_type = self.input_type
        if input_type == "radio":
            self._check_radio()
        elif input_type == "checkbox":
            self.set_checked(self._node.get("checked") is None)
        elif self.tag_name == "label":
            control = self._labelled_control()
            if control is not None:
                control.click()

    def dispatch_event(self, event_type: str) -> None:
        self._document.record(event_type, self)

    def focus(self) -> None:
        self._document.record("focus", self)

    def set_value(self, text: str) -> None:
        if self.tag_name == "textarea":
            for child in list(self._node):
                self._node.remove(child)
            self._node.text = text
        else:
            self._node.set("value", text)

    def set_checked(self, checked: bool) -> None:
        if checked:
            self._node.set("checked", "checked")
        elif "checked" in self._node.attrib:
            del self._node.attrib["checked"]

    @property
    def checked(self) -> bool:
        return self._node.get("checked") is not None

    def _check_radio(self) -> None:
        name = self._node.get("name")
        if name:
            for other in self._node.getroottree().iter("input"):
                if other is not self._node and other.get("name") == name and other.get("type", "").lower() == "radio":
                    other.attrib.pop("checked", None)
        self.set_checked(True)

    def _labelled_control(self) -> Optional[Element]:
        target = self._node.get("for")
        if target:
            matches = self._node.getroottree().xpath("//*[@id=$ident]", ident=target)
            return self._document.wrap(matches[0]) if matches else None
        for node in self._node.iter("input", "select", "textarea"):
            return self._document.wrap(node)
        return None

    def __eq__(self, other: object) -> bool:
        return isinstance(other, HtmlElement) and other._node is self._node

    def __hash__(self) -> int:
        return id(self._node)


class HtmlDocument(Document):
    """
    A static page parsed with lxml.

    Interactions mutate the tree and are appended to ``events`` as
    ``(event_type, element)`` pairs; a native activation is recorded as
    ``"activate"``.

    Example:
        >>> doc = HtmlDocument.from_html(html, url="https://quiz.example/1")
        >>> doc.query("input[type=radio]").click()
        >>> doc.events[-1][0]
        'activate'
    """

    def __init__(self, root: Any, url: str = "about:blank", width: int = 1280, height: int = 720):
        self._root = root
        self._url = url
        self._width = width
        self._height = height
        self._scroll_x = 0
        self._scroll_y = 0
        self.events: List[Tuple[str, Element]] = []

    @classmethod
    def from_html(cls, html: str, url: str = "about:blank") -> "HtmlDocument":
        return cls(lxml.html.document_fromstring(html), url=url)

    @classmethod
    def from_file(cls, path: str) -> "HtmlDocument":
        with open(path, "r", encoding="utf-8") as f:
            html = f.read()
        return cls.from_html(html, url=f"file://{path}")

    def wrap(self, node: Any) -> HtmlElement:
        return HtmlElement(self, node)

    def record(self, event_type: str, element: Element) -> None:
        self.events.append((event_type, element))

    @property
    def url(self) -> str:
        return self._url

    @property
    def title(self) -> str:
        title = self._root.find(".//title")
        return title.text_content().strip() if title is not None else ""

    @property
    def body(self) -> Optional[Element]:
        body = self._root.find("body")
        return self.wrap(body) if body is not None else None

    def all_elements(self) -> List[Element]:
        return [self.wrap(n) for n in self._root.iter() if isinstance(n.tag, str)]

    def query_all(self, css: str) -> List[Element]:
        return [self.wrap(n) for n in self._root.cssselect(css)]

    def xpath_all(self, xpath: str) -> List[Element]:
        results = self._root.getroottree().xpath(xpath)
        return [self.wrap(n) for n in results if hasattr(n, "tag") and isinstance(n.tag, str)]

    def body_text(self) -> str:
        body = self.body
        return body.inner_text if body is not None else ""

    def body_html(self) -> str:
        body = self.body
        return body.inner_html if body is not None else ""

    def viewport(self) -> Dict[str, float]:
        return {
            "width": self._width,
            "height": self._height,
            "scrollX": self._scroll_x,
            "scrollY": self._scroll_y,
        }

    def scroll_by(self, dy: int) -> None:
        self._scroll_y = max(0, self._scroll_y + dy)


# ---------------------------------------------------------------------------
# Live documents (Selenium)
# ---------------------------------------------------------------------------

_IS_VISIBLE_JS = """
const el = arguments[0];
const style = window.getComputedStyle(el);
return el.offsetParent !== null &&
       style.display !== 'none' &&
       style.visibility !== 'hidden';
"""

_DISPATCH_JS = """
const el = arguments[0];
const type = arguments[1];
const event = type === 'click'
    ? new MouseEvent('click', {bubbles: true, cancelable: true})
    : new Event(type, {bubbles: true});
el.dispatchEvent(event);
"""

_ATTRIBUTES_JS = """
return Array.from(arguments[0].attributes).reduce((acc, attr) => {
    acc[attr.name] = attr.value;
    return acc;
}, {});
"""


class SeleniumElement(Element):
    """Element of a ``SeleniumDocument``, wrapping a WebElement."""

    def __init__(self, document: "SeleniumDocument", web_element: "WebElement"):
        self._document = document
        self._el = web_element

    @property
    def web_element(self) -> "WebElement":
        return self._el

    def _script(self, script: str, *args: Any) -> Any:
        return self._document.driver.execute_script(script, self._el, *args)

    @property
    def tag_name(self) -> str:
        return self._el.tag_name.lower()

    def get_attribute(self, name: str) -> Optional[str]:
        return self._el.get_dom_attribute(name)

    @property
    def attributes(self) -> Dict[str, str]:
        return self._script(_ATTRIBUTES_JS) or {}

    @property
    def parent(self) -> Optional[Element]:
        parent = self._script("return arguments[0].parentElement;")
        return self._document.wrap(parent) if parent is not None else None

    @property
    def children(self) -> List[Element]:
        return [self._document.wrap(c) for c in self._script("return Array.from(arguments[0].children);")]

    @property
    def inner_text(self) -> str:
        return self._script("return arguments[0].innerText || '';") or ""

    @property
    def text_content(self) -> str:
        return self._script("return arguments[0].textContent || '';") or ""

    @property
    def value(self) -> Optional[str]:
        value = self._script("return arguments[0].value;")
        return None if value is None else str(value)

    @property
    def inner_html(self) -> str:
        return self._script("return arguments[0].innerHTML;") or ""

    @property
    def has_click_handler(self) -> bool:
        return bool(self._script("return arguments[0].onclick !== null;"))

    def is_visible(self) -> bool:
        return bool(self._script(_IS_VISIBLE_JS))

    def query_all(self, css: str) -> List[Element]:
        from selenium.webdriver.common.by import By

        return [self._document.wrap(e) for e in self._el.find_elements(By.CSS_SELECTOR, css)]

    def click(self) -> None:
        self._script("arguments[0].click();")

    def dispatch_event(self, event_type: str) -> None:
        self._script(_DISPATCH_JS, event_type)

    def focus(self) -> None:
        self._script("arguments[0].focus();")

    def set_value(self, text: str) -> None:
        self._script("arguments[0].value = arguments[1];", text)

    def set_checked(self, checked: bool) -> None:
        self._script("arguments[0].checked = arguments[1];", checked)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, SeleniumElement) and other._el == self._el

    def __hash__(self) -> int:
        return hash(self._el.id)


class SeleniumDocument(Document):
    """
    The page currently loaded in a Selenium WebDriver.

    Example:
        >>> driver = create_driver(headless=True)
        >>> driver.get("https://example.com/quiz")
        >>> doc = SeleniumDocument(driver)
        >>> len(doc.query_all("input[type=radio]"))
    """

    def __init__(self, driver: "WebDriver"):
        self.driver = driver

    def wrap(self, web_element: "WebElement") -> SeleniumElement:
        return SeleniumElement(self, web_element)

    @property
    def url(self) -> str:
        return self.driver.current_url

    @property
    def title(self) -> str:
        return self.driver.title

    @property
    def body(self) -> Optional[Element]:
        body = self.driver.execute_script("return document.body;")
        return self.wrap(body) if body is not None else None

    def all_elements(self) -> List[Element]:
        return self.query_all("*")

    def query_all(self, css: str) -> List[Element]:
        from selenium.webdriver.common.by import By

        return [self.wrap(e) for e in self.driver.find_elements(By.CSS_SELECTOR, css)]

    def xpath_all(self, xpath: str) -> List[Element]:
        from selenium.webdriver.common.by import By

        return [self.wrap(e) for e in self.driver.find_elements(By.XPATH, xpath)]

    def body_text(self) -> str:
        return self.driver.execute_script("return document.body ? document.body.innerText : '';") or ""

    def body_html(self) -> str:
        return self.driver.execute_script("return document.body ? document.body.innerHTML : '';") or ""

    def viewport(self) -> Dict[str, float]:
        return self.driver.execute_script(
            "return {width: window.innerWidth, height: window.innerHeight,"
            " scrollX: window.scrollX, scrollY: window.scrollY};"
        )

    def scroll_by(self, dy: int) -> None:
        self.driver.execute_script("window.scrollBy({top: arguments[0], behavior: 'smooth'});", dy)
