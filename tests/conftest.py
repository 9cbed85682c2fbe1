# Copyright (c) Syntropy Systems
"""Pytest fixtures for claimcheck tests."""

import json
import os
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest
import yaml
from fakes import BASE_URL, FakeClaimsService, make_record

from claimcheck.client import ClaimCheckClient

# Store original cwd at module load time
_original_cwd = Path.cwd()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def claimcheck_project(temp_dir: Path) -> Generator[Path, None, None]:
    """Create a project whose config points at the fake service with no delays."""
    config_dir = temp_dir / ".claimcheck"
    config_dir.mkdir()
    config = {
        "api_url": BASE_URL,
        "settle_delay": 0,
        "pacing_delay": 0,
        "max_per_polarity": 2,
        "user": "qa-bot",
    }
    with (config_dir / "config.yaml").open("w") as f:
        yaml.dump(config, f)

    os.chdir(temp_dir)

    yield temp_dir

    # Always return to original cwd
    os.chdir(_original_cwd)


@pytest.fixture
def service() -> FakeClaimsService:
    """Fake claims API."""
    return FakeClaimsService()


@pytest.fixture
def client(service: FakeClaimsService) -> Generator[ClaimCheckClient, None, None]:
    """Client wired to the fake service."""
    with ClaimCheckClient(BASE_URL, transport=service.transport) as c:
        yield c


@pytest.fixture
def sleeps() -> list[float]:
    """Collects requested sleeps instead of sleeping."""
    return []


@pytest.fixture
def fake_sleep(sleeps: list[float]):
    """Sleep replacement that records its argument."""
    return sleeps.append


@pytest.fixture
def corpus_records() -> list[dict]:
    """Catalogue records spanning two interventions and every intent."""
    return [
        make_record(1, 10, "positive", "Outpatient consult", state="Approved"),
        make_record(2, 10, "positive", "Outpatient with review", state="Medical Review"),
        make_record(3, 10, "positive", "Outpatient follow-up", state="Approved"),
        make_record(4, 10, "negative", "Missing referral", state="Declined"),
        make_record(5, 10, "negative", "Duplicate claim", reject=422),
        make_record(6, 20, "positive", "Dialysis session", state="Sent for payment processing"),
        make_record(7, 20, None, "Dialysis overlap", description="Negative: overlapping dates",
                    state="Rejected"),
        make_record(8, 20, "build", "Dialysis build", state="Approved"),
        make_record(9, None, "positive", "Orphaned case", state="Approved"),
    ]


@pytest.fixture
def corpus_file(temp_dir: Path, corpus_records: list[dict]) -> Path:
    """Corpus written as a JSON file."""
    path = temp_dir / "corpus.json"
    _ = path.write_text(json.dumps(corpus_records))
    return path
