# Copyright (c) Syntropy Systems
"""Configuration management for claimcheck."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional, cast

import yaml

CONFIG_DIR_NAME = ".claimcheck"
CONFIG_FILE_NAME = "config.yaml"


@dataclass
class ClaimCheckConfig:
    """Configuration for claimcheck."""

    # Base URL of the claims API
    api_url: str = "http://localhost:5000/api"

    # HTTP request timeout (seconds)
    timeout: float = 30.0

    # Wait before each claim outcome lookup (seconds)
    settle_delay: float = 1.0

    # Wait between test cases in a batch (seconds)
    pacing_delay: float = 3.0

    # Sampled test cases per polarity per intervention
    max_per_polarity: int = 2

    # Caller identity recorded on persisted results
    user: Optional[str] = None

    # Bearer token for the claims API
    api_token: Optional[str] = None

    def to_dict(self) -> dict[str, object]:
        """Convert to a plain dict for writing config.yaml."""
        return asdict(self)


def find_config_dir(start_path: Path | None = None) -> Path | None:
    """Find the nearest .claimcheck directory by walking up from start_path.

    Returns None if no .claimcheck directory is found.
    """
    if start_path is None:
        start_path = Path.cwd()

    current = start_path.resolve()

    while current != current.parent:
        config_dir = current / CONFIG_DIR_NAME
        if config_dir.is_dir():
            return config_dir
        current = current.parent

    # Check root
    config_dir = current / CONFIG_DIR_NAME
    if config_dir.is_dir():
        return config_dir

    return None


def get_global_config_dir() -> Path:
    """Get the global claimcheck config directory (~/.claimcheck)."""
    return Path.home() / CONFIG_DIR_NAME


def _number(data: dict[str, object], key: str) -> float | None:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _string(data: dict[str, object], key: str) -> str | None:
    value = data.get(key)
    return value if isinstance(value, str) and value else None


def load_config(config_dir: Path | None = None) -> ClaimCheckConfig:
    """Load configuration from .claimcheck/config.yaml or defaults.

    Looks for config in:
    1. Provided config_dir
    2. Nearest .claimcheck directory walking up
    3. ~/.claimcheck/config.yaml
    4. Defaults
    """
    config = ClaimCheckConfig()

    config_path = None

    if config_dir is not None:
        config_path = config_dir / CONFIG_FILE_NAME
    else:
        found_dir = find_config_dir()
        if found_dir is not None:
            config_path = found_dir / CONFIG_FILE_NAME
        else:
            global_config = get_global_config_dir() / CONFIG_FILE_NAME
            if global_config.exists():
                config_path = global_config

    if config_path is None or not config_path.exists():
        return config

    with config_path.open() as f:
        loaded = yaml.safe_load(f) or {}
    if not isinstance(loaded, dict):
        msg = f"{config_path} must contain a mapping"
        raise ValueError(msg)
    data = cast("dict[str, object]", loaded)

    api_url = _string(data, "api_url")
    if api_url is not None:
        config.api_url = api_url
    timeout = _number(data, "timeout")
    if timeout is not None:
        config.timeout = timeout
    settle_delay = _number(data, "settle_delay")
    if settle_delay is not None:
        config.settle_delay = settle_delay
    pacing_delay = _number(data, "pacing_delay")
    if pacing_delay is not None:
        config.pacing_delay = pacing_delay
    max_per_polarity = _number(data, "max_per_polarity")
    if max_per_polarity is not None:
        config.max_per_polarity = int(max_per_polarity)
    config.user = _string(data, "user") or config.user
    config.api_token = _string(data, "api_token") or config.api_token

    return config
