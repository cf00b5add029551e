"""DecisionOracle - prompt assembly and structured tactical verdicts."""
from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from t800.client import OllamaClient, OracleClient
from t800.config import OracleConfig
from t800.parsers import parse_combat_decision, parse_engagement_decision
from t800.spatial import Location
from t800.types import Threat

logger = logging.getLogger(__name__)

ACTIONS = ("move", "attack", "defend", "retreat")

COMBAT_ROLE = (
    "You are the AI core of a T800 combat robot. Analyze the situation and "
    "make a tactical decision."
)
ENGAGEMENT_ROLE = "You decide whether the T800 should proactively engage a threat."

_COMBAT_FORMAT = """IMPORTANT: Respond with ONLY a valid JSON object in the following format:
{
    "action": "move", "attack", "defend", or "retreat",
    "target": "target ID if applicable",
    "weapon": "weapon to use if attacking",
    "priority": number between 1-10,
    "confidence": number between 0-1,
    "explanation": "brief explanation of the decision"
}

Do not include any text before or after the JSON object."""

_ENGAGEMENT_FORMAT = """IMPORTANT: Respond with ONLY a valid JSON object in the following format:
{
    "should_engage": true or false,
    "confidence": number between 0-1,
    "explanation": "brief explanation"
}

Do not include any text before or after the JSON object."""


@dataclass(frozen=True)
class CombatDecision:
    action: str
    target: str = ""
    weapon: str = ""
    priority: int = 0
    confidence: float = 0.0
    explanation: str = ""


@dataclass(frozen=True)
class EngagementDecision:
    should_engage: bool
    confidence: float = 0.0
    explanation: str = ""


def _format_health(health: Mapping[str, float]) -> str:
    return ", ".join(f"{name}={value:.1f}%" for name, value in sorted(health.items()))


def _format_threat(threat: Threat) -> str:
    return f"{threat.id} (Severity: {threat.severity}, Location: {threat.location})"


def combat_prompt(
    location: Location,
    threat: Threat,
    health: Mapping[str, float],
    weapons: Sequence[str],
) -> str:
    return (
        f"Current Location: {location}\n"
        f"Active Threat: {_format_threat(threat)}\n"
        f"Threat Health: {threat.health:.1f}\n"
        f"Distance: {location.distance_to(threat.location):.2f} m\n"
        f"Health Status: {_format_health(health)}\n"
        f"Available Weapons: {', '.join(weapons)}\n\n"
        "Make a tactical decision considering:\n"
        "1. Distance to threat\n2. Threat severity\n3. Current health status\n"
        "4. Available weapons\n5. Strategic advantage\n\n"
        f"{_COMBAT_FORMAT}"
    )


def engagement_prompt(
    threat: Threat, location: Location, health: Mapping[str, float],
) -> str:
    return (
        f"Threat: {_format_threat(threat)}\n"
        f"Current Location: {location}\n"
        f"Distance: {location.distance_to(threat.location):.2f} m\n"
        f"Health Status: {_format_health(health)}\n\n"
        "Consider:\n1. Threat severity\n2. Distance\n3. Current health status\n"
        "4. Strategic advantage\n\n"
        f"{_ENGAGEMENT_FORMAT}"
    )


class DecisionOracle:
    """Asks an ``OracleClient`` for tactical decisions.

    Both calls block on the client and raise ``CommunicationError`` or
    ``DecodeError`` on failure.
    """

    def __init__(self, client: OracleClient) -> None:
        self._client = client

    @classmethod
    def from_config(cls, config: OracleConfig | None = None) -> DecisionOracle:
        """Oracle backed by Ollama, configured from the environment by default."""
        config = config if config is not None else OracleConfig.from_env()
        return cls(OllamaClient.from_config(config))

    @property
    def client(self) -> OracleClient:
        return self._client

    def make_combat_decision(
        self,
        location: Location,
        threat: Threat,
        health: Mapping[str, float],
        weapons: Sequence[str],
    ) -> CombatDecision:
        response = self._client.query(
            COMBAT_ROLE, combat_prompt(location, threat, health, weapons),
        )
        decision = CombatDecision(**parse_combat_decision(response))
        logger.info(
            "AI Decision: %s (Confidence: %.2f) - %s",
            decision.action, decision.confidence, decision.explanation,
        )
        return decision

    def should_engage_proactively(
        self, threat: Threat, location: Location, health: Mapping[str, float],
    ) -> EngagementDecision:
        response = self._client.query(
            ENGAGEMENT_ROLE, engagement_prompt(threat, location, health),
        )
        decision = EngagementDecision(**parse_engagement_decision(response))
        logger.info(
            "AI Engagement Decision: %s (Confidence: %.2f) - %s",
            decision.should_engage, decision.confidence, decision.explanation,
        )
        return decision
