# Copyright (c) Syntropy Systems
"""Outcome resolution for submitted claims."""
from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Protocol, Union

from claimcheck.models.results import RefreshResult
from claimcheck.outcomes import classify, extract_claim_state

if TYPE_CHECKING:
    from collections.abc import Callable

    from claimcheck.models.base import JSONValue
    from claimcheck.outcomes import Intent

logger = logging.getLogger(__name__)

DEFAULT_SETTLE_DELAY = 1.0


class ClaimReader(Protocol):
    def get_claim(self, claim_id: str) -> dict[str, JSONValue]:
        ...


class OutcomeResolver:
    """Reads the current adjudication state of a claim.

    Every lookup waits ``settle_delay`` seconds first so an in-flight decision
    has a chance to land. Errors propagate; retrying is the caller's call.
    """

    _client: ClaimReader
    settle_delay: float
    _sleep: Callable[[float], None]

    def __init__(
        self,
        client: ClaimReader,
        settle_delay: float = DEFAULT_SETTLE_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._client = client
        self.settle_delay = settle_delay
        self._sleep = sleep

    def resolve_outcome(self, claim_id: str) -> str:
        """Return the claim's state display text, or "" when it has none."""
        if self.settle_delay > 0:
            self._sleep(self.settle_delay)
        resource = self._client.get_claim(claim_id)
        outcome = extract_claim_state(resource)
        logger.debug("Claim %s resolved to %r", claim_id, outcome)
        return outcome

    def refresh(self, claim_id: str, intent: Union[Intent, str, None]) -> RefreshResult:
        """Re-evaluate an already submitted claim without resubmitting it."""
        outcome = self.resolve_outcome(claim_id)
        return RefreshResult(
            outcome=outcome,
            status=classify(intent, True, outcome),
            message=f"Refreshed: {outcome}",
        )
