# Copyright (c) Syntropy Systems
"""Per test case pipeline: submit, resolve, classify, persist."""
from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from claimcheck.client import ClaimCheckClientError
from claimcheck.resources import ensure_related_resources

if TYPE_CHECKING:
    from claimcheck.classifier import ResultBuilder
    from claimcheck.client import ClaimCheckClient
    from claimcheck.models.results import TestResult
    from claimcheck.models.testcase import TestCase

logger = logging.getLogger(__name__)


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


class ClaimSubmitter:
    """Executes one test case against the claims service.

    Only transport and HTTP errors from the submission call are turned into
    error results; anything else propagates to the orchestrator.
    """

    _client: ClaimCheckClient
    _builder: ResultBuilder
    register_resources: bool

    def __init__(
        self,
        client: ClaimCheckClient,
        builder: ResultBuilder,
        register_resources: bool = True,
    ) -> None:
        self._client = client
        self._builder = builder
        self.register_resources = register_resources

    def __call__(self, test_case: TestCase) -> TestResult:
        """Submit the test case's claim and return its classified result."""
        start = time.monotonic()
        try:
            response = self._client.submit_claim(test_case.submission_body())
        except ClaimCheckClientError as exc:
            logger.info("Submission of %r raised: %s", test_case.title, exc)
            result = self._builder.from_error(test_case, exc, _elapsed_ms(start))
            self._builder.persist(test_case, result)
            return result

        result = self._builder.from_submission(test_case, response, _elapsed_ms(start))
        self._builder.persist(test_case, result)

        if self.register_resources:
            created = ensure_related_resources(self._client, test_case.payload)
            if created:
                logger.info("Registered %s for %r", ", ".join(created), test_case.title)

        return result
