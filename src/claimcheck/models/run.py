# Copyright (c) Syntropy Systems
"""Run item lifecycle."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from claimcheck.exceptions import InvalidTransitionError

if TYPE_CHECKING:
    from .testcase import TestCase


class ItemStatus(str, Enum):
    """Lifecycle state of a test case within a run."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """Whether no further transitions are allowed."""
        return self in (ItemStatus.COMPLETED, ItemStatus.FAILED)


_TRANSITIONS: dict[ItemStatus, frozenset[ItemStatus]] = {
    ItemStatus.PENDING: frozenset({ItemStatus.RUNNING}),
    ItemStatus.RUNNING: frozenset({ItemStatus.COMPLETED, ItemStatus.FAILED}),
    ItemStatus.COMPLETED: frozenset(),
    ItemStatus.FAILED: frozenset(),
}


@dataclass
class RunItem:
    """A test case admitted into a run."""

    test_case: TestCase
    status: ItemStatus = ItemStatus.PENDING

    @property
    def key(self) -> str:
        """Identifier used to address the item within its run."""
        if self.test_case.id is not None:
            return str(self.test_case.id)
        return self.test_case.title

    def advance(self, status: ItemStatus) -> None:
        """Move to a new status, rejecting anything but a forward step."""
        if status not in _TRANSITIONS[self.status]:
            msg = (
                f"Cannot move '{self.key}' from {self.status.value} "
                f"to {status.value}"
            )
            raise InvalidTransitionError(msg)
        self.status = status
