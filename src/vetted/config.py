"""Lightweight application configuration loader."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from vetted.domain.enums import RejectionPolicy


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() not in {"0", "false", "no"}


def _env_policy(name: str, default: RejectionPolicy) -> RejectionPolicy:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return RejectionPolicy(raw.strip().lower())
    except ValueError as exc:
        choices = ", ".join(policy.value for policy in RejectionPolicy)
        msg = f"{name} must be one of {choices}; got {raw!r}"
        raise ValueError(msg) from exc


@dataclass(frozen=True)
class AppSettings:
    """Immutable configuration sourced from environment variables."""

    environment: str = "development"
    rejection_policy: RejectionPolicy = RejectionPolicy.SILENT
    strict_construction: bool = True
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> AppSettings:
        return cls(
            environment=os.getenv("VETTED_ENV", cls.environment),
            rejection_policy=_env_policy("VETTED_REJECTION_POLICY", cls.rejection_policy),
            strict_construction=_env_bool("VETTED_STRICT_CONSTRUCTION", cls.strict_construction),
            log_level=os.getenv("VETTED_LOG_LEVEL", cls.log_level).strip().upper(),
        )


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Return settings cached from the environment on first use."""

    return AppSettings.from_env()


def reset_settings() -> None:
    """Clear the cached settings (useful for tests)."""

    get_settings.cache_clear()


__all__ = ["AppSettings", "get_settings", "reset_settings"]
