# Copyright (c) Syntropy Systems
"""HTTP client for the claims service and its collaborator endpoints."""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional, TypeVar, cast, overload

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError
from typing_extensions import Self

from claimcheck.models.api import (
    PatientRecord,
    PractitionerRecord,
    ProviderRecord,
    ResultCreate,
    SubmissionResponse,
)
from claimcheck.models.testcase import TestCase

if TYPE_CHECKING:
    from collections.abc import Mapping
    from types import TracebackType

    from claimcheck.models.base import JSONValue

ResponseModel = TypeVar("ResponseModel", bound=BaseModel)

_TEST_CASES_ADAPTER = TypeAdapter(list[TestCase])

HTTP_NOT_FOUND = 404


class ClaimCheckClientError(Exception):
    """Error communicating with the claims service."""

    status_code: Optional[int]
    body: Optional[JSONValue]

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        body: Optional[JSONValue] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ClaimApiError(ClaimCheckClientError):
    """The service answered with an error status."""


def _response_body(response: httpx.Response) -> Optional[JSONValue]:
    try:
        return cast("JSONValue", response.json())
    except ValueError:
        return response.text or None


def _unwrap_list(data: JSONValue) -> list[JSONValue]:
    if isinstance(data, dict):
        data = data.get("data")
    return data if isinstance(data, list) else []


class ClaimCheckClient:
    """HTTP client for submitting claims and reading their outcomes."""

    base_url: str
    timeout: float
    _client: httpx.Client

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        token: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Base URL of the claims API (e.g., "http://localhost:5000/api")
            timeout: Request timeout in seconds
            token: Bearer token attached to every request
            transport: Optional httpx transport, mainly for tests

        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.Client(timeout=timeout, headers=headers, transport=transport)

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> Self:
        """Enter the client context and return self."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit the client context and close the HTTP client."""
        self.close()

    @overload
    def _request(
        self,
        method: str,
        path: str,
        json: Mapping[str, object] | None = None,
        params: Mapping[str, object] | None = None,
        *,
        response_model: type[ResponseModel],
    ) -> ResponseModel:
        ...

    @overload
    def _request(
        self,
        method: str,
        path: str,
        json: Mapping[str, object] | None = None,
        params: Mapping[str, object] | None = None,
        *,
        response_model: None = None,
    ) -> JSONValue:
        ...

    def _request(
        self,
        method: str,
        path: str,
        json: Mapping[str, object] | None = None,
        params: Mapping[str, object] | None = None,
        *,
        response_model: type[ResponseModel] | None = None,
    ) -> ResponseModel | JSONValue:
        """Make an HTTP request to the service."""
        url = f"{self.base_url}{path}"
        try:
            response = self._client.request(
                method=method,
                url=url,
                json=json,
                params=params,
            )
            _ = response.raise_for_status()
        except httpx.HTTPStatusError as e:
            body = _response_body(e.response)
            msg = f"Server error {e.response.status_code} for {method} {path}"
            raise ClaimApiError(msg, status_code=e.response.status_code, body=body) from e
        except httpx.RequestError as e:
            msg = f"Connection error: {e}"
            raise ClaimCheckClientError(msg) from e

        try:
            data = cast("JSONValue", response.json())
        except ValueError as e:
            msg = f"Invalid response format from {method} {path}"
            raise ClaimCheckClientError(msg, status_code=response.status_code) from e

        if response_model is None:
            return data
        try:
            return response_model.model_validate(data)
        except ValidationError as e:
            msg = f"Unexpected response from {method} {path}: {e}"
            raise ClaimCheckClientError(msg, status_code=response.status_code, body=data) from e

    def _lookup(self, path: str) -> Optional[JSONValue]:
        """GET a registry entry, returning None when it does not exist."""
        try:
            return self._request("GET", path)
        except ClaimApiError as e:
            if e.status_code == HTTP_NOT_FOUND:
                return None
            raise

    # --- Claim Operations ---

    def submit_claim(self, body: Mapping[str, object]) -> SubmissionResponse:
        """Submit a claim document.

        Args:
            body: Submission body, usually ``{"formData": payload}``

        Returns:
            Parsed submission envelope

        Raises:
            ClaimApiError: If the service rejects the request
            ClaimCheckClientError: On transport failure or a non-object body

        """
        return self._request(
            "POST",
            "/claims/submit",
            json=body,
            response_model=SubmissionResponse,
        )

    def get_claim(self, claim_id: str) -> dict[str, JSONValue]:
        """Fetch a claim resource.

        Args:
            claim_id: Claim identifier from the submission response

        Returns:
            The claim resource, unwrapped from a ``data`` envelope if present

        """
        data = self._request("GET", f"/claims/{claim_id}")
        if not isinstance(data, dict):
            msg = f"Invalid response format for claim {claim_id}"
            raise ClaimCheckClientError(msg, body=data)
        inner = data.get("data")
        if "extension" not in data and isinstance(inner, dict):
            return inner
        return data

    # --- Result Operations ---

    def create_result(self, result: ResultCreate) -> JSONValue:
        """Persist a test result in the result store."""
        return self._request(
            "POST",
            "/results",
            json=result.model_dump(mode="json"),
        )

    # --- Catalogue Operations ---

    def list_test_cases(self) -> list[TestCase]:
        """Get every test case in the catalogue."""
        return _TEST_CASES_ADAPTER.validate_python(
            _unwrap_list(self._request("GET", "/test-cases"))
        )

    def get_test_cases_by_code(self, code: str) -> list[TestCase]:
        """Get the test cases registered for an intervention code."""
        return _TEST_CASES_ADAPTER.validate_python(
            _unwrap_list(self._request("GET", f"/test-cases/{code}"))
        )

    def get_package_intervention_ids(self, package_id: int) -> list[int]:
        """Get the intervention ids that belong to a package."""
        records = _unwrap_list(self._request("GET", f"/interventions/package/{package_id}"))
        ids: list[int] = []
        for record in records:
            if isinstance(record, dict) and isinstance(record.get("id"), int):
                ids.append(cast("int", record["id"]))
        return ids

    # --- Resource Registry Operations ---

    def get_patient(self, cr_id: str) -> Optional[JSONValue]:
        """Look up a patient by client registry id."""
        return self._lookup(f"/patients/{cr_id}")

    def create_patient(self, record: PatientRecord) -> JSONValue:
        """Register a patient."""
        return self._request("POST", "/patients", json=record.model_dump(mode="json"))

    def get_provider(self, f_id: str) -> Optional[JSONValue]:
        """Look up a provider by facility id."""
        return self._lookup(f"/providers/{f_id}")

    def create_provider(self, record: ProviderRecord) -> JSONValue:
        """Register a provider."""
        return self._request("POST", "/providers", json=record.model_dump(mode="json"))

    def get_practitioner(self, pu_id: str) -> Optional[JSONValue]:
        """Look up a practitioner by id."""
        return self._lookup(f"/practitioners/{pu_id}")

    def create_practitioner(self, record: PractitionerRecord) -> JSONValue:
        """Register a practitioner."""
        return self._request("POST", "/practitioners", json=record.model_dump(mode="json"))


# Convenience function
def get_client(
    base_url: str,
    timeout: float = 30.0,
    token: str | None = None,
) -> ClaimCheckClient:
    """Create a ClaimCheckClient instance.

    Args:
        base_url: Base URL of the claims API
        timeout: Request timeout in seconds
        token: Optional bearer token

    Returns:
        ClaimCheckClient instance

    """
    return ClaimCheckClient(base_url, timeout=timeout, token=token)
