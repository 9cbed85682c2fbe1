# Copyright (c) Syntropy Systems
"""Make sure the patient, provider and practitioner on a claim are registered."""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Protocol, cast

from claimcheck.models.api import PatientRecord, PractitionerRecord, ProviderRecord

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from claimcheck.models.base import JSONValue

logger = logging.getLogger(__name__)


class ResourceRegistry(Protocol):
    def get_patient(self, cr_id: str) -> Optional[JSONValue]:
        ...

    def create_patient(self, record: PatientRecord) -> JSONValue:
        ...

    def get_provider(self, f_id: str) -> Optional[JSONValue]:
        ...

    def create_provider(self, record: ProviderRecord) -> JSONValue:
        ...

    def get_practitioner(self, pu_id: str) -> Optional[JSONValue]:
        ...

    def create_practitioner(self, record: PractitionerRecord) -> JSONValue:
        ...


@dataclass(frozen=True)
class _Resource:
    kind: str
    key: str
    lookup: Callable[[str], Optional[JSONValue]]
    create: Callable[[], JSONValue]


def _block(payload: Mapping[str, object], name: str) -> Optional[dict[str, object]]:
    block = payload.get(name)
    if isinstance(block, dict) and isinstance(block.get("id"), str) and block["id"]:
        return cast("dict[str, object]", block)
    return None


def _resources(registry: ResourceRegistry, payload: Mapping[str, object]) -> list[_Resource]:
    resources: list[_Resource] = []

    practitioner = _block(payload, "practitioner")
    if practitioner is not None:
        record = PractitionerRecord.from_form(practitioner)
        resources.append(_Resource(
            "practitioner", record.pu_id, registry.get_practitioner,
            lambda: registry.create_practitioner(record),
        ))

    provider = _block(payload, "provider")
    if provider is not None:
        provider_record = ProviderRecord.from_form(provider)
        resources.append(_Resource(
            "provider", provider_record.f_id, registry.get_provider,
            lambda: registry.create_provider(provider_record),
        ))

    patient = _block(payload, "patient")
    if patient is not None:
        patient_record = PatientRecord.from_form(patient)
        resources.append(_Resource(
            "patient", patient_record.cr_id, registry.get_patient,
            lambda: registry.create_patient(patient_record),
        ))

    return resources


def ensure_related_resources(
    registry: ResourceRegistry,
    payload: Mapping[str, object],
) -> list[str]:
    """Register any resource referenced by the payload that does not exist yet.

    Lookups run concurrently, then the needed creates run concurrently. A
    failed lookup counts as missing; a failed create is logged and skipped.

    Returns:
        Kinds of resource that were created

    """
    resources = _resources(registry, payload)
    if not resources:
        return []

    created: list[str] = []
    with ThreadPoolExecutor(max_workers=len(resources)) as pool:
        lookups = [(res, pool.submit(res.lookup, res.key)) for res in resources]

        missing: list[_Resource] = []
        for res, future in lookups:
            try:
                found = future.result()
            except Exception as exc:  # noqa: BLE001
                logger.warning("Lookup of %s %s failed: %s", res.kind, res.key, exc)
                found = None
            if found is None:
                missing.append(res)

        creates = [(res, pool.submit(res.create)) for res in missing]
        for res, future in creates:
            try:
                _ = future.result()
            except Exception as exc:  # noqa: BLE001
                logger.warning("Could not register %s %s: %s", res.kind, res.key, exc)
            else:
                created.append(res.kind)

    return created
