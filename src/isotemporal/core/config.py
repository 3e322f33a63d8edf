"""
Engine settings

Defaults applied when a caller passes None for a policy argument, plus logging
switches. Values come from (highest priority first):
  1. Init kwargs
  2. Env vars with the ``ISOTEMPORAL_`` prefix
  3. Code defaults below

Fixed numeric limits (instant range, year range, ns-per-unit) are not
settings; they live as Final constants in the math modules that own them.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from isotemporal.core.domain.enums import Disambiguation, Overflow, RoundingMode


class EngineSettings(BaseSettings):
    """
    Policy defaults and logging switches.

    Attributes:
        default_overflow: Overflow policy for field resolution and date addition
        default_disambiguation: Strategy for ambiguous or skipped local times
        default_rounding_mode: Rounding mode for time rounding without an explicit mode
        verbose: DEBUG-level engine logging
        log_json: JSON log lines instead of console output
    """

    model_config = SettingsConfigDict(env_prefix="ISOTEMPORAL_", frozen=True)

    default_overflow: Overflow = Overflow.CONSTRAIN
    default_disambiguation: Disambiguation = Disambiguation.COMPATIBLE
    default_rounding_mode: RoundingMode = RoundingMode.HALF_EXPAND
    verbose: bool = False
    log_json: bool = False


@lru_cache(maxsize=1)
def get_settings() -> EngineSettings:
    """Process-wide settings, read once."""
    return EngineSettings()


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() re-reads the environment."""
    get_settings.cache_clear()
