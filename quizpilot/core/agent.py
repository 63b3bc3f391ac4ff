"""
Page Agent - the message-protocol front door.

Receives ``{action, ...}`` messages, dispatches them to the sense, action
and quiz layers, and always answers with a JSON-ready value. Any failure
inside a handler is turned into ``{"error": message}`` here so callers
never lose a response to an exception.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, TYPE_CHECKING
import logging

from quizpilot.core.requests import (
    REQUEST_TYPES,
    AnalyzeQuiz,
    AutoSolveQuiz,
    Click,
    ClickAnswer,
    Extract,
    FindByText,
    GetAccessibilityTree,
    GetForms,
    GetLinks,
    ReadPage,
    Screenshot,
    Scroll,
    SolveQuiz,
    Type,
    parse_request,
)
from quizpilot.exceptions import AnswerProviderError
from quizpilot.layers.action import ActionExecutor
from quizpilot.layers.intelligence import AnswerProvider, CloudAnswerProvider
from quizpilot.layers.quiz import (
    AdvanceReadiness,
    AnswerMatcher,
    FixedDelay,
    GroupLocator,
    QuestionChangeReadiness,
    QuizSolver,
)
from quizpilot.layers.sense import Document, HtmlDocument, SeleniumDocument, SnapshotBuilder
from quizpilot.reporters import FlightRecorder

if TYPE_CHECKING:
    from selenium.webdriver.remote.webdriver import WebDriver

logger = logging.getLogger(__name__)

QUESTION_NOT_FOUND_ERROR = "Question not found"
READINESS_POLICIES = ("fixed", "question-change")


@dataclass
class AgentConfig:
    """Configuration for the page agent."""
    settle_delay: float = 1.5  # seconds between question activations
    readiness: str = "fixed"  # fixed, question-change
    readiness_timeout: float = 5.0
    html_limit: int = 10000
    label_limit: int = 50
    max_options: int = 20
    auto_submit: bool = True
    headless: bool = False
    timeout: int = 30
    report_dir: Optional[str] = None  # write flight_record.json on close when set
    provider: str = "auto"  # auto, openai, anthropic
    model: Optional[str] = None

    def build_readiness(self) -> AdvanceReadiness:
        if self.readiness == "fixed":
            return FixedDelay(self.settle_delay)
        if self.readiness == "question-change":
            return QuestionChangeReadiness(timeout=self.readiness_timeout)
        raise ValueError(f"Unknown readiness policy '{self.readiness}'")


class PageAgent:
    """
    Answers protocol messages against one page.

    Example:
        >>> with PageAgent.launch("https://example.com/quiz", AgentConfig(headless=True)) as agent:
        ...     agent.handle({"action": "analyzeQuiz"})
        ...     agent.handle({"action": "solveQuiz", "answers": ["Paris", "4"]})
    """

    def __init__(
        self,
        document: Document,
        config: Optional[AgentConfig] = None,
        provider: Optional[AnswerProvider] = None,
        recorder: Optional[FlightRecorder] = None,
        driver: Optional["WebDriver"] = None,
    ):
        """
        Args:
            document: Page the agent operates on
            config: Agent settings (defaults to ``AgentConfig()``)
            provider: Answer source for ``autoSolveQuiz``; a
                ``CloudAnswerProvider`` is created on first use when omitted
            recorder: Session record (a fresh one is created when omitted)
            driver: Browser owned by this agent, quit on ``close``
        """
        self.config = config or AgentConfig()
        self.document = document
        self.recorder = recorder or FlightRecorder(output_dir=self.config.report_dir or "./quizpilot_reports")
        self.report_path: Optional[str] = None
        self._provider = provider
        self._driver = driver

        self.snapshot = SnapshotBuilder(
            document,
            label_limit=self.config.label_limit,
            html_limit=self.config.html_limit,
        )
        self.executor = ActionExecutor(document)
        self.locator = GroupLocator(document, max_options=self.config.max_options)
        self.matcher = AnswerMatcher(self.executor)
        self.solver = QuizSolver(
            document,
            self.locator,
            self.matcher,
            self.executor,
            readiness=self.config.build_readiness(),
            auto_submit=self.config.auto_submit,
            recorder=self.recorder,
        )

        self._handlers: Dict[type, Callable[[Any], Any]] = {
            ReadPage: self._read_page,
            Click: self._click,
            Type: self._type,
            Extract: self._extract,
            Scroll: self._scroll,
            Screenshot: self._screenshot,
            FindByText: self._find_by_text,
            GetLinks: self._get_links,
            GetForms: self._get_forms,
            GetAccessibilityTree: self._get_accessibility_tree,
            AnalyzeQuiz: self._analyze_quiz,
            SolveQuiz: self._solve_quiz,
            AutoSolveQuiz: self._auto_solve_quiz,
            ClickAnswer: self._click_answer,
        }
        missing = set(REQUEST_TYPES) - set(self._handlers)
        assert not missing, f"No handler for {sorted(cls.__name__ for cls in missing)}"

    @classmethod
    def launch(
        cls,
        url: str,
        config: Optional[AgentConfig] = None,
        provider: Optional[AnswerProvider] = None,
    ) -> "PageAgent":
        """Start Chrome, open ``url`` and return an agent that owns the browser."""
        from quizpilot.core.driver_factory import create_driver

        config = config or AgentConfig()
        driver = create_driver(headless=config.headless, page_load_timeout=config.timeout)
        try:
            driver.get(url)
        except Exception:
            driver.quit()
            raise

        agent = cls(SeleniumDocument(driver), config=config, provider=provider, driver=driver)
        agent.recorder.log_navigation(url)
        return agent

    @classmethod
    def from_html(
        cls,
        html: str,
        url: str = "about:blank",
        config: Optional[AgentConfig] = None,
        provider: Optional[AnswerProvider] = None,
    ) -> "PageAgent":
        """Agent over a static HTML string (no browser, no scripts)."""
        return cls(HtmlDocument.from_html(html, url), config=config, provider=provider)

    @property
    def provider(self) -> AnswerProvider:
        if self._provider is None:
            self._provider = CloudAnswerProvider(provider=self.config.provider, model=self.config.model)
        return self._provider

    def handle(self, message: Mapping[str, Any]) -> Any:
        """
        Dispatch one protocol message.

        Returns:
            The action's response, or ``{"error": message}`` if anything
            went wrong (including an unknown action).
        """
        action = str(message.get("action")) if isinstance(message, Mapping) else "<invalid>"
        if isinstance(message, Mapping):
            self.recorder.log_request(action, {k: v for k, v in message.items() if k != "action"})

        try:
            request = parse_request(message)
            response = self._handlers[type(request)](request)
        except Exception as e:
            logger.error("Action %s failed: %s", action, e)
            self.recorder.log_error(f"Action {action} failed", e)
            response = {"error": str(e)}

        self.recorder.log_response(action, response)
        return response

    # Sense

    def _read_page(self, request: ReadPage) -> Dict[str, Any]:
        return self.snapshot.read_page()

    def _extract(self, request: Extract) -> List[Dict[str, Any]]:
        return self.snapshot.extract(request.selector)

    def _screenshot(self, request: Screenshot) -> Dict[str, int]:
        return self.document.viewport()

    def _find_by_text(self, request: FindByText) -> List[Dict[str, str]]:
        return self.snapshot.find_by_text(request.text)

    def _get_links(self, request: GetLinks) -> List[Dict[str, str]]:
        return self.snapshot.get_links()

    def _get_forms(self, request: GetForms) -> List[Dict[str, Any]]:
        return self.snapshot.get_forms()

    def _get_accessibility_tree(self, request: GetAccessibilityTree) -> List[Dict[str, Any]]:
        return [d.to_dict() for d in self.snapshot.build_snapshot()]

    # Action

    def _click(self, request: Click) -> Dict[str, Any]:
        result = self.executor.click(request.selector)
        if not result.success:
            return {"error": result.error}
        return {"success": True, "clicked": request.selector}

    def _type(self, request: Type) -> Dict[str, Any]:
        result = self.executor.type_text(request.selector, request.text)
        if not result.success:
            return {"error": result.error}
        return {"success": True, "typed": request.text}

    def _scroll(self, request: Scroll) -> Dict[str, Any]:
        self.executor.scroll(request.direction, request.amount)
        return {"success": True, "scrolled": request.direction}

    # Quiz

    def _analyze_quiz(self, request: AnalyzeQuiz) -> Dict[str, Any]:
        return {"success": True, "quizData": self.solver.quiz_data()}

    def _solve_quiz(self, request: SolveQuiz) -> Dict[str, Any]:
        return self.solver.solve(list(request.answers)).to_response()

    def _auto_solve_quiz(self, request: AutoSolveQuiz) -> Dict[str, Any]:
        try:
            provider = self.provider
        except (AnswerProviderError, ImportError) as e:
            self.recorder.log_error("Answer provider unavailable", e)
            return {"success": False, "error": str(e)}
        return self.solver.auto_solve(provider).to_response()

    def _click_answer(self, request: ClickAnswer) -> Dict[str, Any]:
        questions = self.locator.find_questions()
        if not 0 <= request.question_index < len(questions):
            return {"success": False, "error": QUESTION_NOT_FOUND_ERROR}

        options = self.locator.find_options(questions[request.question_index])
        result = self.matcher.select_answer(options, request.answer)
        self.recorder.log_match(request.question_index, result)
        return {"success": result.matched}

    # Lifecycle

    def close(self) -> None:
        """Write the flight record (when configured) and quit an owned browser."""
        if self.config.report_dir and self.report_path is None:
            self.report_path = self.recorder.generate_report()

        if self._driver is not None:
            try:
                self._driver.quit()
            except Exception as e:
                logger.warning("Failed to quit browser: %s", e)
            self._driver = None

    def __enter__(self) -> "PageAgent":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
