"""Undo stack for multi-step operations spanning the object and relational stores."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from types import TracebackType
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


@dataclass(slots=True)
class Compensation:
    description: str
    action: Callable[[], Any]


@dataclass(slots=True)
class CompensationFailure:
    description: str
    error: Exception


class CompensationStack:
    """Collect inverse actions and run them newest-first when a step fails.

    Used as a context manager: if the block raises, every registered action is
    run (one failing does not stop the others) and the original exception keeps
    propagating. A clean exit discards the stack::

        with CompensationStack("books.create") as saga:
            key = store.put(data, "image/png", "covers")
            saga.push("delete cover", lambda: store.delete(key))
    """

    def __init__(self, operation: str = "operation") -> None:
        self.operation = operation
        self._actions: list[Compensation] = []
        self.failures: list[CompensationFailure] = []

    def __len__(self) -> int:
        return len(self._actions)

    def push(self, description: str, action: Callable[[], Any]) -> None:
        self._actions.append(Compensation(description, action))

    def unwind(self) -> list[CompensationFailure]:
        """Run all pending compensations in reverse order and return the failures."""
        failures: list[CompensationFailure] = []
        while self._actions:
            compensation = self._actions.pop()
            try:
                compensation.action()
            except Exception as exc:
                failures.append(CompensationFailure(compensation.description, exc))
                logger.error(
                    "compensation.failed",
                    operation=self.operation,
                    step=compensation.description,
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
            else:
                logger.info(
                    "compensation.done",
                    operation=self.operation,
                    step=compensation.description,
                )
        self.failures.extend(failures)
        return failures

    def discard(self) -> None:
        self._actions.clear()

    def __enter__(self) -> "CompensationStack":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        if exc is None:
            self.discard()
            return False
        logger.warning(
            "compensation.unwinding",
            operation=self.operation,
            pending=len(self._actions),
            error=str(exc),
            error_type=exc_type.__name__ if exc_type else None,
        )
        self.unwind()
        return False
