"""
Protocol requests - one immutable type per action.

Messages arrive as dictionaries, either ``{"action": ..., "params": {...}}``
or flat with the parameters beside ``action`` (the quiz messages use the
flat form). ``parse_request`` turns either into a typed request.
"""

from dataclasses import MISSING, dataclass, field, fields
from typing import Any, Dict, Mapping, Tuple, Union

from quizpilot.exceptions import UnknownActionError

DEFAULT_SCROLL_AMOUNT = 500


@dataclass(frozen=True)
class ReadPage:
    action = "readPage"


@dataclass(frozen=True)
class Click:
    selector: str
    action = "click"


@dataclass(frozen=True)
class Type:
    selector: str
    text: str
    action = "type"


@dataclass(frozen=True)
class Extract:
    selector: str
    action = "extract"


@dataclass(frozen=True)
class Scroll:
    direction: str
    amount: int = DEFAULT_SCROLL_AMOUNT
    action = "scroll"


@dataclass(frozen=True)
class Screenshot:
    action = "screenshot"


@dataclass(frozen=True)
class FindByText:
    text: str
    action = "findByText"


@dataclass(frozen=True)
class GetLinks:
    action = "getLinks"


@dataclass(frozen=True)
class GetForms:
    action = "getForms"


@dataclass(frozen=True)
class GetAccessibilityTree:
    action = "getAccessibilityTree"


@dataclass(frozen=True)
class AnalyzeQuiz:
    action = "analyzeQuiz"


@dataclass(frozen=True)
class SolveQuiz:
    answers: Tuple[str, ...] = field(default_factory=tuple)
    action = "solveQuiz"


@dataclass(frozen=True)
class AutoSolveQuiz:
    action = "autoSolveQuiz"


@dataclass(frozen=True)
class ClickAnswer:
    question_index: int
    answer: str
    action = "clickAnswer"


Request = Union[
    ReadPage, Click, Type, Extract, Scroll, Screenshot, FindByText, GetLinks,
    GetForms, GetAccessibilityTree, AnalyzeQuiz, SolveQuiz, AutoSolveQuiz, ClickAnswer,
]

REQUEST_TYPES: Tuple[type, ...] = (
    ReadPage, Click, Type, Extract, Scroll, Screenshot, FindByText, GetLinks,
    GetForms, GetAccessibilityTree, AnalyzeQuiz, SolveQuiz, AutoSolveQuiz, ClickAnswer,
)

ACTIONS: Dict[str, type] = {cls.action: cls for cls in REQUEST_TYPES}

# Wire names that differ from the field name.
_WIRE_NAMES = {"question_index": "questionIndex"}


def _message_params(message: Mapping[str, Any]) -> Dict[str, Any]:
    params = message.get("params")
    if isinstance(params, Mapping):
        return dict(params)
    return {k: v for k, v in message.items() if k not in ("action", "params")}


def _coerce(request_cls: type, name: str, value: Any) -> Any:
    if request_cls is SolveQuiz and name == "answers":
        if isinstance(value, str) or not hasattr(value, "__iter__"):
            raise ValueError("solveQuiz expects 'answers' to be a list of strings")
        return tuple(str(v) for v in value)
    if request_cls is Scroll and name == "amount":
        return DEFAULT_SCROLL_AMOUNT if value is None else int(value)
    if request_cls is ClickAnswer and name == "question_index":
        return int(value)
    return value


def parse_request(message: Mapping[str, Any]) -> Request:
    """
    Build a typed request from a protocol message.

    Raises:
        UnknownActionError: ``action`` names no known request
        ValueError: a required parameter is missing or malformed
    """
    if not isinstance(message, Mapping):
        raise ValueError(f"Message must be a mapping, got {type(message).__name__}")

    action = message.get("action")
    request_cls = ACTIONS.get(action)
    if request_cls is None:
        raise UnknownActionError(str(action))

    params = _message_params(message)
    kwargs = {}
    for f in fields(request_cls):
        wire_name = _WIRE_NAMES.get(f.name, f.name)
        if wire_name in params:
            kwargs[f.name] = _coerce(request_cls, f.name, params[wire_name])
        elif f.name in params:
            kwargs[f.name] = _coerce(request_cls, f.name, params[f.name])

    try:
        return request_cls(**kwargs)
    except TypeError:
        missing = [
            _WIRE_NAMES.get(f.name, f.name)
            for f in fields(request_cls)
            if f.name not in kwargs and f.default is MISSING and f.default_factory is MISSING
        ]
        raise ValueError(f"{action} is missing required parameter(s): {', '.join(missing)}")
