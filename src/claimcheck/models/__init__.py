# Copyright (c) Syntropy Systems
"""Pydantic models for claimcheck."""

from .api import (
    UNKNOWN_CLAIM_ID,
    PatientRecord,
    PractitionerRecord,
    ProviderRecord,
    ResultCreate,
    SubmissionResponse,
)
from .base import ClaimCheckBaseModel, ExtraAllowModel, JSONObject, JSONValue
from .results import RefreshResult, RunReport, RunSummary, TestResult
from .run import ItemStatus, RunItem
from .testcase import TestCase

__all__ = [
    "UNKNOWN_CLAIM_ID",
    "ClaimCheckBaseModel",
    "ExtraAllowModel",
    "ItemStatus",
    "JSONObject",
    "JSONValue",
    "PatientRecord",
    "PractitionerRecord",
    "ProviderRecord",
    "RefreshResult",
    "ResultCreate",
    "RunItem",
    "RunReport",
    "RunSummary",
    "SubmissionResponse",
    "TestCase",
    "TestResult",
]
