# Copyright (c) Syntropy Systems
"""Tests for the claims API client."""

import json

import httpx
import pytest
from fakes import BASE_URL, make_record

from claimcheck.client import ClaimApiError, ClaimCheckClient, ClaimCheckClientError
from claimcheck.models import PatientRecord, ResultCreate


class TestSubmitClaim:
    """Tests for claim submission."""

    def test_posts_form_data(self, client, service):
        response = client.submit_claim({"formData": {"title": "t", "claim_id": "CLM-5"}})

        request = service.requests[0]
        assert request.method == "POST"
        assert request.url.path == "/api/claims/submit"
        assert json.loads(request.content) == {"formData": {"title": "t", "claim_id": "CLM-5"}}
        assert response.success is True
        assert response.claim_id == "CLM-5"

    def test_http_error_carries_status_and_body(self, client):
        with pytest.raises(ClaimApiError) as exc_info:
            _ = client.submit_claim({"formData": {"reject": 422}})

        assert exc_info.value.status_code == 422
        assert exc_info.value.body["message"] == "Validation failed"

    def test_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with ClaimCheckClient(BASE_URL, transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(ClaimCheckClientError, match="Connection error") as exc_info:
                _ = client.submit_claim({"formData": {}})

        assert not isinstance(exc_info.value, ClaimApiError)
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_non_json_body(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>"))
        with ClaimCheckClient(BASE_URL, transport=transport) as client:
            with pytest.raises(ClaimCheckClientError, match="Invalid response format"):
                _ = client.submit_claim({"formData": {}})

    def test_non_object_body(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json=[1, 2]))
        with ClaimCheckClient(BASE_URL, transport=transport) as client:
            with pytest.raises(ClaimCheckClientError, match="Unexpected response"):
                _ = client.submit_claim({"formData": {}})

    def test_bearer_token(self, service):
        with ClaimCheckClient(BASE_URL, token="s3cret", transport=service.transport) as client:
            _ = client.submit_claim({"formData": {}})

        assert service.requests[0].headers["Authorization"] == "Bearer s3cret"


class TestGetClaim:
    """Tests for claim lookup."""

    def test_unwraps_data_envelope(self, client, service):
        service.claims["CLM-1"] = "Declined"

        claim = client.get_claim("CLM-1")

        assert claim["resourceType"] == "Claim"
        assert claim["id"] == "CLM-1"

    def test_missing_claim(self, client):
        with pytest.raises(ClaimApiError) as exc_info:
            _ = client.get_claim("nope")
        assert exc_info.value.status_code == 404


class TestCatalogue:
    """Tests for catalogue reads."""

    def test_list_test_cases(self, client, service):
        service.test_cases = [make_record(1, 3, "positive", "one"), make_record(2, 3, None, "two")]

        cases = client.list_test_cases()

        assert [tc.title for tc in cases] == ["one", "two"]
        assert cases[0].intervention_id == 3

    def test_get_test_cases_by_code(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/test-cases/SHA-01"
            return httpx.Response(200, json=[make_record(4, 1, "negative", "by code")])

        with ClaimCheckClient(BASE_URL, transport=httpx.MockTransport(handler)) as client:
            cases = client.get_test_cases_by_code("SHA-01")

        assert [tc.id for tc in cases] == [4]

    def test_package_intervention_ids(self, client, service):
        service.packages[7] = [3, 5]
        assert client.get_package_intervention_ids(7) == [3, 5]
        assert client.get_package_intervention_ids(8) == []


class TestResultsAndRegistry:
    """Tests for result persistence and registry calls."""

    def test_create_result(self, client, service):
        record = ResultCreate(
            testcase_id=1,
            result_status=1,
            message="Approved",
            status_code="200",
            claim_id="CLM-1",
        )
        _ = client.create_result(record)

        assert service.results[0]["testcase_id"] == 1
        assert service.results[0]["status_code"] == "200"

    def test_lookup_returns_none_on_404(self, client):
        assert client.get_patient("CR-404") is None

    def test_lookup_raises_other_errors(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(500, json={}))
        with ClaimCheckClient(BASE_URL, transport=transport) as client:
            with pytest.raises(ClaimApiError):
                _ = client.get_provider("FID-1")

    def test_create_then_get_patient(self, client, service):
        _ = client.create_patient(PatientRecord(cr_id="CR-1", name="Jane"))
        assert service.registry["patients"]["CR-1"]["name"] == "Jane"
        assert client.get_patient("CR-1") is not None
