"""Processor - the agent's control core.

Owns location, operation mode and the active threat, and drives three
independently scheduled loops (health, scan, engagement) on a small
thread pool. All loops share one cancellation event and are joined on
``stop()``.

Locking: ``_lock`` guards mode, active threat, location and status
fields. Anatomy and health trackers carry their own locks and are never
touched while ``_lock`` is held, and oracle/scanner calls are made
outside it.
"""
from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import TYPE_CHECKING

from t800.anatomy import Anatomy
from t800.client import OracleError
from t800.config import ProcessorConfig
from t800.defense import DefenseCatalog, make_defense_catalog
from t800.monitoring import log_action, log_error, log_health_status, log_threat
from t800.offense import WEAPON_DAMAGE, OffenseCatalog, make_offense_catalog
from t800.oracle import CombatDecision, DecisionOracle
from t800.scanner import Scanner, SimulatedScanner
from t800.spatial import Location
from t800.types import (
    InvalidOperationError,
    InvalidStateError,
    OperationMode,
    Status,
    Threat,
)

if TYPE_CHECKING:
    from t800.anatomy import BodyPart
    from t800.defense import DefenseStrategy
    from t800.offense import AttackStrategy

logger = logging.getLogger(__name__)


class Processor:
    """Concurrent control loop for the combat agent.

    Use ``start()`` / ``stop()`` (or the processor as a context manager)
    to run the loops. ``health_tick``, ``scan_tick`` and
    ``engagement_tick`` perform exactly one iteration of each loop and
    may be called directly to step the processor deterministically.
    """

    def __init__(
        self,
        oracle: DecisionOracle | None = None,
        scanner: Scanner | None = None,
        anatomy: Anatomy | None = None,
        defense: DefenseCatalog | None = None,
        offense: OffenseCatalog | None = None,
        config: ProcessorConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config if config is not None else ProcessorConfig()
        self._oracle = oracle if oracle is not None else DecisionOracle.from_config()
        self._scanner: Scanner = scanner if scanner is not None else SimulatedScanner()
        self._anatomy = anatomy if anatomy is not None else Anatomy()
        self._defense = defense if defense is not None else make_defense_catalog()
        self._offense = offense if offense is not None else make_offense_catalog()
        self._clock = clock

        self._lock = threading.Lock()
        self._active = False
        self._mode = OperationMode.NORMAL
        self._active_threat: Threat | None = None
        self._location = Location()
        self._last_scan: float | None = None

        self._stop_event = threading.Event()
        self._executor: ThreadPoolExecutor | None = None
        self._futures: list[Future[None]] = []

        self._handlers: dict[str, Callable[[Threat, CombatDecision], None]] = {
            "move": self._move,
            "attack": self._attack,
            "defend": self._defend,
            "retreat": self._retreat,
        }

    # --- Lifecycle ---

    def start(self) -> None:
        """Activate the processor and launch the health, scan and engagement loops."""
        with self._lock:
            if self._active or self._stop_event.is_set():
                raise InvalidStateError("processor cannot be started twice")
            self._active = True
        logger.info("Initializing T800 defensive system")

        cfg = self._config
        self._executor = ThreadPoolExecutor(max_workers=3, thread_name_prefix="t800")
        self._futures = [
            self._executor.submit(self._run_loop, "health", cfg.health_interval, self.health_tick),
            self._executor.submit(self._run_loop, "scan", cfg.scan_interval, self.scan_tick),
            self._executor.submit(
                self._run_loop, "engagement", cfg.engagement_interval, self.engagement_tick,
            ),
        ]

    def stop(self) -> None:
        """Signal cancellation and wait for all loops to exit. Idempotent."""
        with self._lock:
            was_active = self._active
            self._active = False
        if was_active:
            logger.info("Initiating shutdown sequence")
        self._stop_event.set()
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
            self._futures = []

    def __enter__(self) -> Processor:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def _run_loop(self, name: str, interval: float, tick: Callable[[], object]) -> None:
        logger.debug("%s loop started (every %.3fs)", name, interval)
        while not self._stop_event.wait(interval):
            try:
                tick()
            except Exception:
                logger.exception("%s tick failed", name)
        logger.debug("%s loop stopped", name)

    # --- Public surface ---

    @property
    def config(self) -> ProcessorConfig:
        return self._config

    @property
    def location(self) -> Location:
        with self._lock:
            return self._location

    @property
    def mode(self) -> OperationMode:
        with self._lock:
            return self._mode

    def get_status(self) -> Status:
        with self._lock:
            return Status(active=self._active, mode=self._mode, last_scan=self._last_scan)

    def get_anatomy(self) -> Anatomy:
        return self._anatomy

    def get_active_threat(self) -> Threat | None:
        with self._lock:
            return self._active_threat

    def report_threat(self, threat: Threat) -> None:
        """Make ``threat`` the active target and respond to it immediately.

        Raises:
            InvalidStateError: If the processor is not running.
        """
        with self._lock:
            if not self._active:
                raise InvalidStateError("system is not active")
            self._set_target(threat)
        self._respond(threat)

    # --- Health loop ---

    def health_tick(self, now: float | None = None) -> dict[str, float]:
        """Regenerate all parts and report the resulting health snapshot."""
        now = self._clock() if now is None else now
        self._anatomy.update_all_parts(now)
        status = self._anatomy.get_health_status()
        for name, pct in status.items():
            log_health_status(logger, name, pct, self._anatomy.is_part_critical(name))
        return status

    # --- Scan loop ---

    def scan_tick(self) -> Threat | None:
        """Scan around the current location and evaluate what was found.

        Returns the threat that became active during this tick, if any.
        """
        location = self.location
        threats = self._scanner.scan_area(location)
        with self._lock:
            self._last_scan = self._clock()

        if not threats:
            with self._lock:
                lost = self._active_threat
                if lost is not None:
                    self._active_threat = None
                    self._mode = OperationMode.NORMAL
            if lost is not None:
                logger.info("Threat %s no longer detected, returning to normal", lost.id)
            return None

        return self._evaluate(threats, location)

    def _evaluate(self, threats: Iterable[Threat], location: Location) -> Threat | None:
        # The first approved candidate wins, even over a more severe engagement.
        health = self._anatomy.get_health_status()
        for threat in threats:
            if threat.health <= 0:
                continue
            log_threat(logger, threat)
            try:
                verdict = self._oracle.should_engage_proactively(threat, location, health)
            except OracleError as exc:
                log_error(logger, exc, "engagement evaluation failed")
                return None
            if not verdict.should_engage:
                continue
            with self._lock:
                if not self._active:
                    return None
                self._set_target(threat)
            self._respond(threat)
            return threat
        return None

    # --- Engagement loop ---

    def engagement_tick(self) -> CombatDecision | None:
        """Ask the oracle what to do about the active threat and do it."""
        with self._lock:
            threat = self._active_threat
            location = self._location
        if threat is None:
            return None

        health = self._anatomy.get_health_status()
        try:
            decision = self._oracle.make_combat_decision(
                location, threat, health, self._offense.weapons(),
            )
        except OracleError as exc:
            log_error(logger, exc, "combat decision failed")
            return None

        handler = self._handlers.get(decision.action)
        if handler is None:
            logger.warning("Ignoring unrecognized action %r", decision.action)
            return decision
        handler(threat, decision)
        return decision

    def _move(self, threat: Threat, decision: CombatDecision) -> None:
        speed = self._config.speed.linear
        dt = self._config.engagement_interval
        with self._lock:
            self._location = self._location.move_towards(threat.location, speed, dt)
            location = self._location
        dist = location.distance_to(threat.location)
        logger.info("Moving towards target. Distance: %.2f meters", dist)
        if dist > self._config.engagement_distance:
            self._preemptive_strike(threat, dist)

    def _preemptive_strike(self, threat: Threat, dist: float) -> None:
        for part in (self._anatomy.body, *self._anatomy.arms):
            in_range = [
                s for s in self._offense.preemptive_strategies(part) if s.range >= dist
            ]
            if in_range:
                self._run_strategies(part, in_range, threat, "preemptive strike")

    def _attack(self, threat: Threat, decision: CombatDecision) -> None:
        damage = WEAPON_DAMAGE.get(decision.weapon)
        if damage is None:
            logger.warning("Unknown weapon %r, no damage dealt", decision.weapon)
            return
        self._fire(decision.weapon, threat)

        with self._lock:
            applied = threat.take_hit(damage)
            remaining = threat.health
            eliminated = threat.is_eliminated and self._active_threat is threat
            if eliminated:
                self._active_threat = None
                self._mode = OperationMode.NORMAL
        logger.info(
            "%s hit %s for %.1f damage, health now %.1f",
            decision.weapon, threat.id, applied, remaining,
        )
        if eliminated:
            logger.info("Target %s eliminated", threat.id)

    def _fire(self, weapon: str, threat: Threat) -> None:
        mount = self._offense.mount_of(weapon)
        if mount is None:
            return
        part_type, strategy = mount
        for part in self._anatomy.parts():
            if part.part_type is part_type:
                self._run_strategies(part, [strategy], threat, "attack")
                return

    def _defend(self, threat: Threat, decision: CombatDecision) -> None:
        for part in self._anatomy.get_critical_parts():
            self._run_strategies(
                part, self._defense.strategies(part), threat, "defensive action",
            )

    def _retreat(self, threat: Threat, decision: CombatDecision) -> None:
        speed = self._config.speed.linear
        dt = self._config.engagement_interval
        with self._lock:
            self._location = self._location.move_away_from(threat.location, speed, dt)
            location = self._location
        logger.info(
            "Retreating from %s. Distance: %.2f meters",
            threat.id, location.distance_to(threat.location),
        )

    # --- Target acquisition ---

    def _set_target(self, threat: Threat) -> None:
        # Caller holds _lock.
        self._active_threat = threat
        self._mode = OperationMode.COMBAT

    def _respond(self, threat: Threat) -> None:
        log_threat(logger, threat)
        logger.info(
            "New primary target acquired: %s (Severity: %d)", threat.id, threat.severity,
        )
        for part in self._anatomy.get_critical_parts():
            self._run_strategies(
                part, self._defense.strategies(part), threat, "defensive action",
            )
        for arm in self._anatomy.arms:
            self._run_strategies(arm, self._offense.strategies(arm), threat, "offensive action")
        body = self._anatomy.body
        self._run_strategies(body, self._offense.strategies(body), threat, "offensive action")

    def _run_strategies(
        self,
        part: BodyPart,
        strategies: Iterable[DefenseStrategy | AttackStrategy],
        threat: Threat,
        context: str,
    ) -> int:
        """Apply each strategy in turn; failures are logged and skipped.

        Returns the number of strategies that succeeded.
        """
        succeeded = 0
        for strategy in strategies:
            try:
                strategy.action.apply(part, threat)
            except InvalidOperationError as exc:
                log_error(logger, exc, f"{context} failed")
                log_action(logger, strategy.description, part.name, False)
                continue
            log_action(logger, strategy.description, part.name, True)
            succeeded += 1
        return succeeded
