"""
Flight Recorder - structured record of an agent session.

Captures every protocol request and response, the questions the solver
located and how each answer was matched, so a run can be inspected
after the fact from ``flight_record.json``.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TYPE_CHECKING
from datetime import datetime
import json
import logging
import os

if TYPE_CHECKING:
    from quizpilot.layers.quiz.matcher import MatchResult

logger = logging.getLogger(__name__)

RECORD_FILENAME = "flight_record.json"


@dataclass
class LogEntry:
    """A single entry in the flight record."""
    timestamp: datetime
    step: int
    event_type: str  # 'request', 'response', 'question', 'match', 'info', 'warning', 'error'
    message: str
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "step": self.step,
            "event_type": self.event_type,
            "message": self.message,
            "data": self.data,
        }


class FlightRecorder:
    """
    Records what the agent was asked and what it did.

    Nothing touches the filesystem until ``generate_report`` is called.

    Example:
        >>> recorder = FlightRecorder(output_dir="./quizpilot_reports")
        >>> recorder.log_request("solveQuiz", {"answers": ["Paris"]})
        >>> path = recorder.generate_report()
    """

    def __init__(
        self,
        output_dir: str = "./quizpilot_reports",
        run_name: Optional[str] = None,
    ):
        """
        Args:
            output_dir: Directory that receives one sub-directory per run
            run_name: Optional name for this run (defaults to a timestamp)
        """
        self.output_dir = output_dir
        self.run_name = run_name or datetime.now().strftime("%Y%m%d_%H%M%S")
        self.run_dir = os.path.join(output_dir, self.run_name)
        self.entries: List[LogEntry] = []
        self.metadata: Dict[str, Any] = {
            "start_time": datetime.now().isoformat(),
            "run_name": self.run_name,
        }
        self._request_count = 0

    def _append(self, event_type: str, message: str, data: Optional[Dict[str, Any]] = None) -> None:
        self.entries.append(LogEntry(
            timestamp=datetime.now(),
            step=self._request_count,
            event_type=event_type,
            message=message,
            data=data or {},
        ))

    def log_navigation(self, url: str) -> None:
        self._append("info", f"Navigated to {url}", {"url": url})
        self.metadata["url"] = url

    def log_request(self, action: str, params: Dict[str, Any]) -> None:
        """Log an incoming protocol message."""
        self._request_count += 1
        self._append("request", f"Request: {action}", {"action": action, "params": params})

    def log_response(self, action: str, response: Any) -> None:
        """Log the result sent back for ``action``."""
        failed = isinstance(response, dict) and ("error" in response or response.get("success") is False)
        self._append(
            "response",
            f"Response: {action} ({'failed' if failed else 'ok'})",
            {"action": action, "failed": failed, "summary": _summarize(response)},
        )

    def log_question(self, index: int, text: str, option_count: int) -> None:
        self._append(
            "question",
            f"Q{index + 1}: {text[:60]}",
            {"index": index, "text": text, "option_count": option_count},
        )

    def log_match(self, index: int, result: "MatchResult") -> None:
        if result.matched:
            message = f"Q{index + 1}: {result.tier.value} match on {result.option_text!r}"
        else:
            message = f"Q{index + 1}: no option matched {result.answer!r}"
        self._append("match", message, dict(result.to_dict(), index=index))

    def log_info(self, message: str) -> None:
        """Log a general information message."""
        self._append("info", message)

    def log_warning(self, message: str) -> None:
        """Log a warning."""
        self._append("warning", message)

    def log_error(self, message: str, exception: Optional[Exception] = None) -> None:
        """Log an error."""
        self._append("error", message, {"exception": str(exception) if exception else None})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metadata": self.metadata,
            "entries": [e.to_dict() for e in self.entries],
        }

    def generate_report(self) -> str:
        """
        Write the record as JSON.

        Returns:
            Path to ``flight_record.json`` inside the run directory
        """
        self.metadata["end_time"] = datetime.now().isoformat()
        self.metadata["total_requests"] = self._request_count

        os.makedirs(self.run_dir, exist_ok=True)
        report_path = os.path.join(self.run_dir, RECORD_FILENAME)
        with open(report_path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, default=str)

        logger.info("Flight record written to %s", report_path)
        return report_path


def _summarize(response: Any) -> Any:
    # Page dumps are large; keep only their shape.
    if isinstance(response, list):
        return {"items": len(response)}
    if isinstance(response, dict):
        return {
            k: (f"<{len(v)} items>" if isinstance(v, (list, dict)) else v)
            for k, v in response.items()
            if not (isinstance(v, str) and len(v) > 200)
        }
    return response
