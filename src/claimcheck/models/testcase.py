# Copyright (c) Syntropy Systems
"""Pydantic model for test cases loaded from the catalogue."""

from __future__ import annotations

from typing import ClassVar, Optional, cast

from pydantic import ConfigDict, Field, field_validator, model_validator

from claimcheck.outcomes import Intent

from .base import ClaimCheckBaseModel, JSONValue


class TestCase(ClaimCheckBaseModel):
    """A scripted claim submission with an expected intent.

    Accepts either the flat shape or the catalogue record shape, where the
    claim document lives under ``test_config.formData`` and the intent under
    ``formData.test``.
    """

    __test__: ClassVar[bool] = False

    model_config: ClassVar[ConfigDict] = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        frozen=True,
    )

    id: Optional[int] = None
    intervention_id: Optional[int] = None
    intent: Optional[Intent] = None
    title: str
    description: Optional[str] = None
    code: Optional[str] = None
    payload: dict[str, JSONValue] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _unwrap_record(cls, data: object) -> object:
        if not isinstance(data, dict) or "test_config" not in data:
            return cast("object", data)

        record = cast("dict[str, object]", dict(data))
        config = record.pop("test_config") or {}
        form: dict[str, object] = {}
        if isinstance(config, dict):
            raw_form = config.get("formData")
            if isinstance(raw_form, dict):
                form = cast("dict[str, object]", raw_form)

        record.setdefault("payload", form)
        if "title" not in record:
            record["title"] = form.get("title") or record.get("name") or ""
        if "intent" not in record:
            record["intent"] = form.get("test")
        return record

    @field_validator("intent", mode="before")
    @classmethod
    def _parse_intent(cls, value: object) -> Optional[Intent]:
        return Intent.parse(value)

    @classmethod
    def from_record(cls, record: dict[str, object]) -> TestCase:
        """Build a test case from a catalogue record."""
        return cls.model_validate(record)

    @property
    def use(self) -> Optional[str]:
        """Claim use (e.g. claim or preauthorization) from the payload."""
        value = self.payload.get("use")
        return value if isinstance(value, str) else None

    @property
    def product_code(self) -> Optional[str]:
        """Code of the first service line, if any."""
        lines = self.payload.get("productOrService")
        if isinstance(lines, list) and lines and isinstance(lines[0], dict):
            code = lines[0].get("code")
            return code if isinstance(code, str) else None
        return None

    def submission_body(self) -> dict[str, JSONValue]:
        """Request body for the claim submission endpoint."""
        form: dict[str, JSONValue] = dict(self.payload)
        form.setdefault("title", self.title)
        if self.intent is not None:
            form.setdefault("test", self.intent.value)
        return {"formData": form}
