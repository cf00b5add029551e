"""Configuration dataclasses."""
from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from t800.spatial import MovementSpeed

DEFAULT_BASE_URL = "http://localhost:11434"
DEFAULT_MODEL = "llama3.2"


@dataclass(frozen=True)
class OracleConfig:
    """Immutable configuration for the decision oracle.

    Attributes:
        base_url: Root URL of the Ollama server.
        model: Model identifier sent with every request.
        timeout: Seconds to wait for a single oracle response.
        temperature: Sampling temperature passed to the model.
    """

    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    timeout: float = 30.0
    temperature: float = 0.2

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> OracleConfig:
        """Build a config from ``OLLAMA_BASE_URL``, ``OLLAMA_MODEL`` and ``OLLAMA_TIMEOUT``.

        Unset or empty variables keep their defaults.

        Raises:
            ValueError: If ``OLLAMA_TIMEOUT`` is not a number.
        """
        env = os.environ if environ is None else environ
        raw_timeout = env.get("OLLAMA_TIMEOUT")
        timeout = cls.timeout
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                raise ValueError(
                    f"OLLAMA_TIMEOUT must be a number, got {raw_timeout!r}"
                ) from None
        return cls(
            base_url=env.get("OLLAMA_BASE_URL") or DEFAULT_BASE_URL,
            model=env.get("OLLAMA_MODEL") or DEFAULT_MODEL,
            timeout=timeout,
        )


@dataclass(frozen=True)
class ProcessorConfig:
    """Immutable configuration for the processor loops.

    Attributes:
        health_interval: Seconds between regeneration ticks.
        scan_interval: Seconds between environment scans.
        engagement_interval: Seconds between engagement steps; also the
            time step used for movement.
        engagement_distance: Standoff distance from the active threat, metres.
        speed: Agent movement speed.
    """

    health_interval: float = 1.0
    scan_interval: float = 0.5
    engagement_interval: float = 0.1
    engagement_distance: float = 20.0
    speed: MovementSpeed = field(default_factory=MovementSpeed)

    def __post_init__(self) -> None:
        for name in ("health_interval", "scan_interval", "engagement_interval"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        if self.engagement_distance < 0:
            raise ValueError("engagement_distance cannot be negative")
