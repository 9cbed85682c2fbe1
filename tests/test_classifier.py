# Copyright (c) Syntropy Systems
"""Tests for result building and persistence."""

import pytest
from fakes import make_record, submission_body

from claimcheck.classifier import UNKNOWN_ERROR, ResultBuilder, describe_error
from claimcheck.client import ClaimApiError, ClaimCheckClientError
from claimcheck.models import SubmissionResponse, TestCase
from claimcheck.outcomes import OUTCOME_ERROR, Verdict
from claimcheck.resolver import OutcomeResolver


@pytest.fixture
def resolver(client, fake_sleep):
    return OutcomeResolver(client, settle_delay=1.0, sleep=fake_sleep)


@pytest.fixture
def builder(resolver, client):
    return ResultBuilder(resolver, store=client, user="qa-bot")


def _case(test="positive", record_id=11):
    return TestCase.from_record(make_record(record_id, 2, test, "Case title", use="claim"))


def _response(claim_id, state, success=True):
    return SubmissionResponse.model_validate(submission_body(claim_id, state, success))


class TestDescribeError:
    """Tests for error message extraction."""

    def test_string_body(self):
        assert describe_error("Bad gateway") == "Bad gateway"

    def test_nested_error_message_first(self):
        body = {"error": {"message": "Member inactive"}, "message": "Request failed"}
        assert describe_error(body) == "Member inactive"

    def test_message_then_error_string(self):
        assert describe_error({"message": "Invalid claim"}) == "Invalid claim"
        assert describe_error({"error": "Timeout upstream"}) == "Timeout upstream"

    def test_body_dump(self):
        assert describe_error({"code": 7}) == '{"code": 7}'

    def test_exception_text_then_default(self):
        assert describe_error(None, RuntimeError("boom")) == "boom"
        assert describe_error(None) == UNKNOWN_ERROR


class TestFromSubmission:
    """Tests for classifying accepted submissions."""

    def test_positive_approved_passes(self, builder, sleeps, service):
        result = builder.from_submission(_case(), _response("CLM-1", "Approved"), 120)

        assert result.status is Verdict.PASSED
        assert result.outcome == "Approved"
        assert result.claim_id == "CLM-1"
        assert result.id == "resp-CLM-1"
        assert result.duration == 120
        assert result.use == "claim"
        assert result.error is None
        assert result.details["statusCode"] == 200
        assert result.details["request"]["formData"]["title"] == "Case title"
        # No lookup for a settled claim
        assert sleeps == []
        assert service.requests == []

    def test_pending_is_resolved_once(self, builder, service, sleeps):
        service.claims["CLM-2"] = "Approved"

        result = builder.from_submission(_case(), _response("CLM-2", "Pending"), 10)

        assert result.outcome == "Approved"
        assert result.status is Verdict.PASSED
        assert sleeps == [1.0]
        assert service.paths() == ["/api/claims/CLM-2"]

    def test_pending_still_pending(self, builder, service):
        service.claims["CLM-3"] = "Pending"

        result = builder.from_submission(_case(), _response("CLM-3", "Pending"), 10)

        assert result.outcome == "Pending"
        assert result.status is Verdict.FAILED
        assert result.error is None

    def test_resolution_failure(self, builder, service):
        service.fail_claim_lookup = True

        result = builder.from_submission(_case(), _response("CLM-4", "Pending"), 10)

        assert result.outcome == OUTCOME_ERROR
        assert result.status is Verdict.FAILED
        assert "Outcome resolution failed" in result.error

    def test_unsuccessful_submission_fails_positive(self, builder):
        result = builder.from_submission(_case(), _response("CLM-5", "Approved", success=False), 10)
        assert result.status is Verdict.FAILED

    def test_negative_declined_passes(self, builder):
        result = builder.from_submission(_case("negative"), _response("CLM-6", "Declined"), 10)
        assert result.status is Verdict.PASSED

    def test_generated_id_without_response_id(self, builder):
        response = SubmissionResponse.model_validate({"success": True, "data": {}})
        result = builder.from_submission(_case(), response, 10)
        assert result.id.startswith("generated-")
        assert result.claim_id == "unknown-claim-id"


class TestFromError:
    """Tests for classifying rejected submissions."""

    def test_negative_rejection_passes(self, builder):
        error = ClaimApiError(
            "Server error 422",
            status_code=422,
            body={"message": "Validation failed", "validation_errors": [{"field": "x"}]},
        )

        result = builder.from_error(_case("negative"), error, 35)

        assert result.status is Verdict.PASSED
        assert result.message == "Validation failed"
        assert result.error == "Server error 422"
        assert result.claim_id is None
        assert result.outcome == ""
        assert result.duration == 35
        assert result.details["statusCode"] == 422
        assert result.details["validationErrors"] == [{"field": "x"}]

    def test_positive_rejection_fails(self, builder):
        result = builder.from_error(_case(), ClaimCheckClientError("Connection error: refused"))

        assert result.status is Verdict.FAILED
        assert result.message == "Connection error: refused"
        assert result.id.startswith("error-")


class TestPersist:
    """Tests for best-effort result persistence."""

    def test_persists_passed_submission(self, builder, service):
        result = builder.from_submission(_case(), _response("CLM-7", "Approved"), 10)

        builder.persist(_case(), result)

        assert service.results == [{
            "testcase_id": 11,
            "result_status": 1,
            "message": "Approved",
            "detail": "Claim processed",
            "status_code": "200",
            "claim_id": "CLM-7",
            "created_by": "qa-bot",
        }]

    def test_persists_error_with_status(self, builder, service):
        error = ClaimApiError("Server error 400", status_code=400, body={"message": "Bad claim"})
        result = builder.from_error(_case(), error)

        builder.persist(_case(), result)

        saved = service.results[0]
        assert saved["result_status"] == 0
        assert saved["message"] == "Bad claim"
        assert saved["detail"] == "Server error 400"
        assert saved["status_code"] == "400"
        assert saved["claim_id"] is None

    def test_transport_error_defaults_to_500(self, builder, service):
        result = builder.from_error(_case(), ClaimCheckClientError("Connection error"))
        builder.persist(_case(), result)
        assert service.results[0]["status_code"] == "500"

    def test_skips_unsaved_test_case(self, builder, service):
        tc = TestCase(title="adhoc")
        builder.persist(tc, builder.from_error(tc, ClaimCheckClientError("x")))
        assert service.results == []

    def test_skips_without_store(self, resolver, service):
        builder = ResultBuilder(resolver)
        builder.persist(_case(), builder.from_error(_case(), ClaimCheckClientError("x")))
        assert service.requests == []

    def test_store_failure_is_swallowed(self, builder, service):
        service.fail_results = True
        result = builder.from_submission(_case(), _response("CLM-8", "Approved"), 10)

        builder.persist(_case(), result)

        assert result.status is Verdict.PASSED
        assert service.paths("POST") == ["/api/results"]
