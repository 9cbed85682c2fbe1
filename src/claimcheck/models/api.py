# Copyright (c) Syntropy Systems
"""Pydantic models for collaborator API requests and responses."""

from __future__ import annotations

from typing import Optional, cast

from pydantic import Field, field_validator, model_validator

from claimcheck.outcomes import extract_claim_state

from .base import ClaimCheckBaseModel, ExtraAllowModel, JSONValue

UNKNOWN_CLAIM_ID = "unknown-claim-id"


def _bundle_entries(bundle: object) -> list[dict[str, object]]:
    if not isinstance(bundle, dict):
        return []
    entries = bundle.get("entry")
    if not isinstance(entries, list):
        return []
    return [e for e in entries if isinstance(e, dict)]


class SubmissionResponse(ExtraAllowModel):
    """Body returned by the claim submission endpoint.

    ``data`` is the claim-response bundle and ``fhirBundle`` the submitted
    claim bundle. A doubly wrapped envelope is flattened to its inner level.
    """

    success: bool = False
    message: Optional[str] = None
    status: Optional[int] = None
    data: Optional[JSONValue] = None
    fhir_bundle: Optional[dict[str, JSONValue]] = Field(default=None, alias="fhirBundle")
    validation_errors: list[JSONValue] = Field(default_factory=list)
    error: Optional[JSONValue] = None

    @model_validator(mode="before")
    @classmethod
    def _unwrap_envelope(cls, data: object) -> object:
        if not isinstance(data, dict):
            return cast("object", data)
        inner = data.get("data")
        if not isinstance(inner, dict) or "success" not in inner or "resourceType" in inner:
            return cast("object", data)

        merged = cast("dict[str, object]", dict(inner))
        merged["success"] = bool(data.get("success", True)) and bool(inner.get("success"))
        for key in ("fhirBundle", "message", "validation_errors", "error"):
            if key not in merged and key in data:
                merged[key] = data[key]
        return merged

    @field_validator("validation_errors", mode="before")
    @classmethod
    def _default_errors(cls, value: object) -> object:
        return [] if value is None else value

    def find_resource(self, resource_type: str) -> Optional[dict[str, object]]:
        """Return the first resource of the given type in either bundle."""
        for bundle in (self.fhir_bundle, self.data):
            for entry in _bundle_entries(bundle):
                resource = entry.get("resource")
                if isinstance(resource, dict) and resource.get("resourceType") == resource_type:
                    return cast("dict[str, object]", resource)
        return None

    @property
    def claim_id(self) -> str:
        """Identifier of the submitted claim, or the unknown-id sentinel."""
        claim = self.find_resource("Claim")
        claim_id = claim.get("id") if claim else None
        return claim_id if isinstance(claim_id, str) and claim_id else UNKNOWN_CLAIM_ID

    @property
    def initial_outcome(self) -> str:
        """Claim state reported alongside the submission response."""
        return extract_claim_state(self.find_resource("ClaimResponse"))

    @property
    def response_id(self) -> Optional[str]:
        """Identifier of the returned claim-response bundle."""
        if isinstance(self.data, dict):
            value = self.data.get("id")
            if isinstance(value, str):
                return value
        return None


class ResultCreate(ClaimCheckBaseModel):
    """Request to persist a test result in the result store."""

    testcase_id: int
    result_status: int
    message: str = ""
    detail: Optional[str] = None
    status_code: str
    claim_id: Optional[str] = None
    created_by: Optional[str] = None


def _identifier(identifiers: object, system: str) -> Optional[str]:
    if not isinstance(identifiers, list):
        return None
    for item in identifiers:
        if isinstance(item, dict) and item.get("system") == system:
            value = item.get("value")
            return value if isinstance(value, str) else None
    return None


def _text(data: dict[str, object], key: str) -> str:
    value = data.get(key)
    return value if isinstance(value, str) else ""


class PatientRecord(ClaimCheckBaseModel):
    """Patient entry in the resource registry."""

    cr_id: str
    name: str = ""
    gender: str = ""
    birthdate: str = ""
    national_id: str = ""
    email: str = ""
    system_value: str = ""

    @classmethod
    def from_form(cls, data: dict[str, object]) -> PatientRecord:
        """Build from the patient block of a claim payload."""
        identifiers = data.get("identifiers")
        return cls(
            cr_id=_text(data, "id"),
            name=_text(data, "name"),
            gender=_text(data, "gender"),
            birthdate=_text(data, "birthDate"),
            national_id=_identifier(identifiers, "NationalID") or "",
            email=_text(data, "email"),
            system_value=_identifier(identifiers, "SHA") or _text(data, "id"),
        )


class ProviderRecord(ClaimCheckBaseModel):
    """Provider (facility) entry in the resource registry."""

    f_id: str
    name: str = ""
    level: str = ""
    slade_code: Optional[str] = None
    status: int = 1

    @classmethod
    def from_form(cls, data: dict[str, object]) -> ProviderRecord:
        """Build from the provider block of a claim payload."""
        return cls(
            f_id=_text(data, "id"),
            name=_text(data, "name"),
            level=_text(data, "level"),
            slade_code=_identifier(data.get("identifiers"), "SladeCode"),
            status=1 if data.get("active", True) else 0,
        )


class PractitionerRecord(ClaimCheckBaseModel):
    """Practitioner entry in the resource registry."""

    pu_id: str
    name: str = ""
    gender: str = ""
    phone: str = ""
    address: str = ""
    national_id: str = ""
    email: str = ""
    slade_code: str = ""
    reg_number: str = ""
    status: int = 1

    @classmethod
    def from_form(cls, data: dict[str, object]) -> PractitionerRecord:
        """Build from the practitioner block of a claim payload."""
        return cls(
            pu_id=_text(data, "id"),
            name=_text(data, "name"),
            gender=_text(data, "gender"),
            phone=_text(data, "phone"),
            address=_text(data, "address"),
            national_id=_text(data, "nationalID"),
            email=_text(data, "email"),
            slade_code=_text(data, "sladeCode"),
            reg_number=_text(data, "regNumber"),
            status=1 if data.get("status", True) else 0,
        )
