"""t800 - control core for an autonomous combat agent."""
from __future__ import annotations

from t800.anatomy import Anatomy, BodyPart, Dimensions, PartType, Protection
from t800.client import (
    CommunicationError,
    DecodeError,
    MockClient,
    OllamaClient,
    OracleClient,
    OracleError,
)
from t800.config import OracleConfig, ProcessorConfig
from t800.defense import DefenseCatalog, DefenseStrategy, make_defense_catalog
from t800.health import HealthTracker
from t800.offense import WEAPON_DAMAGE, AttackStrategy, OffenseCatalog, make_offense_catalog
from t800.oracle import CombatDecision, DecisionOracle, EngagementDecision
from t800.processor import Processor
from t800.scanner import Scanner, SimulatedScanner, StaticScanner
from t800.spatial import Location, MovementSpeed
from t800.types import (
    InvalidOperationError,
    InvalidStateError,
    OperationMode,
    PartNotFoundError,
    Status,
    T800Error,
    Threat,
)

__all__ = [
    "WEAPON_DAMAGE",
    "Anatomy",
    "AttackStrategy",
    "BodyPart",
    "CombatDecision",
    "CommunicationError",
    "DecisionOracle",
    "DecodeError",
    "DefenseCatalog",
    "DefenseStrategy",
    "Dimensions",
    "EngagementDecision",
    "HealthTracker",
    "InvalidOperationError",
    "InvalidStateError",
    "Location",
    "MockClient",
    "MovementSpeed",
    "OffenseCatalog",
    "OllamaClient",
    "OperationMode",
    "OracleClient",
    "OracleConfig",
    "OracleError",
    "PartNotFoundError",
    "PartType",
    "Processor",
    "ProcessorConfig",
    "Protection",
    "Scanner",
    "SimulatedScanner",
    "StaticScanner",
    "Status",
    "T800Error",
    "Threat",
    "make_defense_catalog",
    "make_offense_catalog",
]
