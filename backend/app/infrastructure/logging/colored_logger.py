"""Colored operation logger — ANSI-colored console logging for tree-wide operations.

Cascades, restores and merges touch many rows in one request. This logger
tags each line with the operation stage so a multi-node operation can be
followed in the terminal, and times each step.

Color scheme:
    🔴 Red     — Cascade delete / errors
    🟢 Green   — Restore / completion
    🔵 Blue    — Merge
    🟣 Magenta — Reparent (path rewrites)
    🟡 Yellow  — Permanent delete
    ⚪ Gray    — Details / stats
"""

import logging
import time
from contextlib import contextmanager
from typing import Any


# ── ANSI Color Codes ─────────────────────────────────────────────────

class _Colors:
    """ANSI escape codes for terminal colors."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    MAGENTA = "\033[95m"
    GRAY = "\033[90m"


# ── Operation Stage Definitions ──────────────────────────────────────

class OperationStage:
    """Predefined operation stages with colors and icons."""

    CASCADE_DELETE = ("CASCADE_DELETE", _Colors.RED, "🗑️")
    RESTORE = ("RESTORE", _Colors.GREEN, "♻️")
    PERMANENT_DELETE = ("PURGE", _Colors.YELLOW, "⚠️")
    MERGE = ("MERGE", _Colors.BLUE, "🔀")
    REPARENT = ("REPARENT", _Colors.MAGENTA, "🌳")
    ERROR = ("ERROR", _Colors.RED, "❌")


# ── OperationLogger ──────────────────────────────────────────────────

class OperationLogger:
    """Color-coded logger for multi-node hierarchy operations.

    Usage:
        log = OperationLogger("CascadeEngine")
        with log.timed_step(OperationStage.CASCADE_DELETE, "Deleting article", id=article.id):
            count = await repository.soft_delete_subtree(...)
        log.stats(deleted=count)
    """

    def __init__(self, component_name: str):
        self._logger = logging.getLogger(component_name)
        self._component = component_name

    @staticmethod
    def _suffix(kwargs: dict[str, Any]) -> str:
        if not kwargs:
            return ""
        details = " | ".join(f"{k}={v}" for k, v in kwargs.items())
        return f" {_Colors.GRAY}({details}){_Colors.RESET}"

    def step_start(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        label, color, icon = stage
        formatted = (
            f"{color}{_Colors.BOLD}{icon} [{label}]{_Colors.RESET} "
            f"{color}{message}{_Colors.RESET}"
        )
        self._logger.info(formatted + self._suffix(kwargs))

    def step_complete(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        label, color, icon = stage
        formatted = (
            f"{color}{icon} [{label}]{_Colors.RESET} "
            f"{_Colors.GREEN}✓ {message}{_Colors.RESET}"
        )
        self._logger.info(formatted + self._suffix(kwargs))

    def step_error(self, stage: tuple[str, str, str], message: str, error: Exception | None = None) -> None:
        label, _, _ = stage
        formatted = (
            f"{_Colors.RED}{_Colors.BOLD}❌ [{label}]{_Colors.RESET} "
            f"{_Colors.RED}{message}{_Colors.RESET}"
        )
        if error:
            formatted += f" {_Colors.DIM}→ {type(error).__name__}: {error}{_Colors.RESET}"
        self._logger.error(formatted)

    def detail(self, message: str, **kwargs: Any) -> None:
        formatted = f"   {_Colors.GRAY}├─ {message}{_Colors.RESET}"
        self._logger.info(formatted + self._suffix(kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        formatted = f"   {_Colors.YELLOW}├─ {message}{_Colors.RESET}"
        self._logger.warning(formatted + self._suffix(kwargs))

    def stats(self, **kwargs: Any) -> None:
        parts = [f"{k}: {v}" for k, v in kwargs.items()]
        self._logger.info(f"   {_Colors.GRAY}📈 {' | '.join(parts)}{_Colors.RESET}")

    @contextmanager
    def timed_step(self, stage: tuple[str, str, str], message: str, **kwargs: Any):
        """Log start/end with elapsed time; a failure is logged and re-raised.

        A failure inside a cascade is not rolled back here: the operation is
        idempotent and is expected to be re-run by the caller.
        """
        self.step_start(stage, message, **kwargs)
        start = time.perf_counter()
        try:
            yield
        except Exception as e:
            elapsed = time.perf_counter() - start
            self.step_error(stage, f"{message} — failed after {elapsed:.2f}s", error=e)
            raise
        else:
            elapsed = time.perf_counter() - start
            self.step_complete(stage, f"{message} — {elapsed:.2f}s", **kwargs)
