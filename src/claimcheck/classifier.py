# Copyright (c) Syntropy Systems
"""Turn submission responses and errors into classified test results."""
from __future__ import annotations

import json
import logging
import uuid
from typing import TYPE_CHECKING, Optional, Protocol, cast

from claimcheck.client import ClaimCheckClientError
from claimcheck.models.api import ResultCreate
from claimcheck.models.results import TestResult
from claimcheck.outcomes import OUTCOME_ERROR, ClaimState, Intent, Verdict, classify

if TYPE_CHECKING:
    from claimcheck.models.api import SubmissionResponse
    from claimcheck.models.base import JSONValue
    from claimcheck.models.testcase import TestCase
    from claimcheck.resolver import OutcomeResolver

logger = logging.getLogger(__name__)

UNKNOWN_ERROR = "Unknown error occurred"
DEFAULT_ERROR_STATUS = "500"
HTTP_OK = 200


class ResultStore(Protocol):
    def create_result(self, result: ResultCreate) -> JSONValue:
        ...


def describe_error(body: Optional[JSONValue], error: Optional[BaseException] = None) -> str:
    """Build a readable message from an error response body.

    Tries a plain string body, then ``error.message``, ``message``, a string
    ``error``, a JSON dump of the body, the exception text and finally a
    generic message.
    """
    if isinstance(body, str) and body:
        return body

    if isinstance(body, dict):
        nested = body.get("error")
        if isinstance(nested, dict):
            nested_message = nested.get("message")
            if isinstance(nested_message, str) and nested_message:
                return nested_message
        message = body.get("message")
        if isinstance(message, str) and message:
            return message
        if isinstance(nested, str) and nested:
            return nested

    if body:
        return json.dumps(body)

    if error is not None and str(error):
        return str(error)

    return UNKNOWN_ERROR


def _result_id(prefix: str) -> str:
    return f"{prefix}-{str(uuid.uuid4())[:8]}"


class ResultBuilder:
    """Builds ``TestResult`` records and persists them on a best-effort basis."""

    _resolver: OutcomeResolver
    _store: Optional[ResultStore]
    user: Optional[str]

    def __init__(
        self,
        resolver: OutcomeResolver,
        store: Optional[ResultStore] = None,
        user: Optional[str] = None,
    ) -> None:
        """Initialize the builder.

        Args:
            resolver: Used to settle a claim that came back as Pending
            store: Result store; results are not persisted when omitted
            user: Caller identity recorded on persisted results

        """
        self._resolver = resolver
        self._store = store
        self.user = user

    def from_submission(
        self,
        test_case: TestCase,
        response: SubmissionResponse,
        duration_ms: int,
        status_code: int = HTTP_OK,
    ) -> TestResult:
        """Classify a submission the service accepted at the transport level."""
        claim_id = response.claim_id
        outcome = response.initial_outcome
        error = None

        if outcome == ClaimState.PENDING:
            try:
                outcome = self._resolver.resolve_outcome(claim_id)
            except Exception as exc:  # noqa: BLE001
                logger.warning("Could not resolve outcome for claim %s: %s", claim_id, exc)
                outcome = OUTCOME_ERROR
                error = f"Outcome resolution failed: {exc}"

        message = response.message or ""
        raw_error = response.error
        return TestResult(
            id=response.response_id or _result_id("generated"),
            claim_id=claim_id,
            test_polarity=test_case.intent,
            testcase_id=test_case.id,
            name=test_case.title or "Claim Submission",
            use=test_case.use,
            status=classify(test_case.intent, response.success, outcome),
            outcome=outcome,
            duration=duration_ms,
            message=message,
            error=error,
            details={
                "request": test_case.submission_body(),
                "response": response.data,
                "fhirBundle": cast("JSONValue", response.fhir_bundle),
                "validationErrors": response.validation_errors,
                "errorMessage": str(raw_error) if raw_error else message,
                "statusCode": status_code,
            },
        )

    def from_error(
        self,
        test_case: TestCase,
        error: BaseException,
        duration_ms: int = 0,
    ) -> TestResult:
        """Classify a submission that raised.

        A negative test passes here: the rejection is what it set out to prove.
        """
        body: Optional[JSONValue] = None
        status_code: Optional[int] = None
        if isinstance(error, ClaimCheckClientError):
            body = error.body
            status_code = error.status_code

        message = describe_error(body, error)
        validation_errors: JSONValue = []
        if isinstance(body, dict) and isinstance(body.get("validation_errors"), list):
            validation_errors = body["validation_errors"]

        status = Verdict.PASSED if test_case.intent is Intent.NEGATIVE else Verdict.FAILED
        return TestResult(
            id=_result_id("error"),
            test_polarity=test_case.intent,
            testcase_id=test_case.id,
            name=test_case.title or "Claim Submission",
            use=test_case.use,
            status=status,
            duration=duration_ms,
            message=message,
            error=str(error) or message,
            details={
                "request": test_case.submission_body(),
                "error": str(error),
                "errorMessage": message,
                "statusCode": status_code,
                "response": body,
                "validationErrors": validation_errors,
            },
        )

    def persist(self, test_case: TestCase, result: TestResult) -> None:
        """Save a result to the store when the test case has a persisted id.

        Failures are logged and never change the result.
        """
        if self._store is None or test_case.id is None:
            return

        submitted = result.claim_id is not None
        status_code = result.details.get("statusCode")
        record = ResultCreate(
            testcase_id=test_case.id,
            result_status=1 if result.passed else 0,
            message=result.outcome if submitted else result.message,
            detail=result.message if submitted else result.error,
            status_code=str(status_code) if status_code is not None else DEFAULT_ERROR_STATUS,
            claim_id=result.claim_id,
            created_by=self.user,
        )
        try:
            _ = self._store.create_result(record)
        except Exception:
            logger.exception("Error saving result for test case %s", test_case.id)
