"""Step-by-step console trace for orchestrated workflows.

Each line carries the stage label, an icon and a color, followed by
``key=value`` fields, so one request can be followed through identity,
signature, payment, entitlement and credential steps in the terminal.
Set ``LOG_LEVEL_WORKFLOW`` to silence it.
"""

import logging
import time
from contextlib import contextmanager
from typing import Any, NamedTuple


RESET = "\033[0m"
BOLD = "\033[1m"
DIM = "\033[2m"
RED = "\033[91m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
BLUE = "\033[94m"
MAGENTA = "\033[95m"
CYAN = "\033[96m"
WHITE = "\033[97m"
GRAY = "\033[90m"


class Stage(NamedTuple):
    label: str
    color: str
    icon: str


class WorkflowStage:
    """Stages every workflow step logs under."""

    IDENTITY = Stage("IDENTITY", GREEN, "🪪")
    SIGNATURE = Stage("SIGNATURE", YELLOW, "🔏")
    PROFILE = Stage("PROFILE", GREEN, "👤")
    GATEWAY = Stage("GATEWAY", YELLOW, "🏦")
    PAYMENT = Stage("PAYMENT", MAGENTA, "💳")
    ENTITLEMENT = Stage("ENTITLEMENT", MAGENTA, "🎟️")
    LEARNING = Stage("LEARNING", BLUE, "📚")
    ASSESSMENT = Stage("ASSESSMENT", BLUE, "📝")
    CREDENTIAL = Stage("CREDENTIAL", CYAN, "🎓")
    WORKFLOW = Stage("WORKFLOW", WHITE, "⚙️")
    ERROR = Stage("ERROR", RED, "❌")
    COMPLETE = Stage("COMPLETE", GREEN, "✅")


def _fields(fields: dict[str, Any], error: BaseException | None = None) -> str:
    shown = {k: v for k, v in fields.items() if v is not None}
    parts = []
    if shown:
        parts.append(f" {GRAY}({' | '.join(f'{k}={v}' for k, v in shown.items())}){RESET}")
    if error is not None:
        parts.append(f" {DIM}→ {type(error).__name__}: {error}{RESET}")
    return "".join(parts)


class WorkflowLogger:
    """Color-coded logger for one workflow component.

    Lines go to ``learnpass.workflow.<component>``; ``None`` field values
    are left out.
    """

    def __init__(self, component: str):
        self.component = component
        self._logger = logging.getLogger(f"learnpass.workflow.{component}")

    def _emit(self, level: int, head: str, body: str, fields: dict[str, Any],
              error: BaseException | None = None) -> None:
        if self._logger.isEnabledFor(level):
            self._logger.log(level, f"{head}{RESET} {body}{RESET}{_fields(fields, error)}")

    def step_start(self, stage: Stage, message: str, **fields: Any) -> None:
        self._emit(logging.INFO, f"{stage.color}{BOLD}{stage.icon} [{stage.label}]",
                   f"{stage.color}{message}", fields)

    def step_complete(self, stage: Stage, message: str, **fields: Any) -> None:
        self._emit(logging.INFO, f"{stage.color}{stage.icon} [{stage.label}]",
                   f"{GREEN}✓ {message}", fields)

    def step_error(self, stage: Stage, message: str, error: BaseException | None = None,
                   **fields: Any) -> None:
        """A step that stops the workflow."""
        self._emit(logging.ERROR, f"{RED}{BOLD}❌ [{stage.label}]",
                   f"{RED}{message}", fields, error)

    def degraded(self, stage: Stage, message: str, error: BaseException | None = None,
                 **fields: Any) -> None:
        """A best-effort step that failed; the workflow carries on."""
        self._emit(logging.WARNING, f"{YELLOW}{stage.icon} [{stage.label}]",
                   f"{GRAY}⚠ {message}, continuing", fields, error)

    def detail(self, message: str, **fields: Any) -> None:
        self._emit(logging.INFO, f"   {GRAY}├─", f"{GRAY}{message}", fields)

    def separator(self, title: str = "") -> None:
        line = f"{'─' * 10} {title} {'─' * max(50 - len(title), 0)}" if title else "─" * 60
        self._logger.info(f"{GRAY}{line}{RESET}")

    @contextmanager
    def timed_step(self, stage: Stage, message: str, **fields: Any):
        """Log start and end of the wrapped block with its elapsed time."""
        self.step_start(stage, message, **fields)
        started = time.perf_counter()
        try:
            yield
        except Exception as exc:
            self.step_error(stage, f"{message} failed", error=exc,
                            elapsed=f"{time.perf_counter() - started:.2f}s")
            raise
        self.step_complete(stage, message, elapsed=f"{time.perf_counter() - started:.2f}s")
