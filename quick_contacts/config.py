"""Configuration helpers for Quick Contacts."""
from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Optional

from dotenv import find_dotenv, load_dotenv


class ConfigError(RuntimeError):
    """Raised when configuration values are invalid."""


@dataclass(slots=True)
class Settings:
    """Runtime configuration for the capture CLI."""

    environment: str = "local"
    user_email: Optional[str] = None
    seed_count: int = 0


def load_settings(*, use_dotenv: bool = True) -> Settings:
    """Load settings from environment variables.

    Args:
        use_dotenv: Read the nearest ``.env`` file (searching up from the
            working directory) into the environment first.

    Returns:
        Settings resolved from ``QC_*`` variables.

    Raises:
        ConfigError: if ``QC_SEED_COUNT`` is not a non-negative integer.
    """

    if use_dotenv:
        load_dotenv(find_dotenv(usecwd=True))

    raw_seed = os.getenv("QC_SEED_COUNT", "0").strip()
    try:
        seed_count = int(raw_seed)
    except ValueError as exc:
        raise ConfigError(
            f"QC_SEED_COUNT must be an integer, got {raw_seed!r}."
        ) from exc
    if seed_count < 0:
        raise ConfigError("QC_SEED_COUNT must not be negative.")

    user_email = os.getenv("QC_USER_EMAIL") or None

    return Settings(
        environment=os.getenv("QC_ENV", "local"),
        user_email=user_email.strip() if user_email else None,
        seed_count=seed_count,
    )
