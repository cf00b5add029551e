"""Run the control core against a single hostile contact.

Run:
    python -m t800
    python -m t800 --duration 60 --log-level DEBUG
    OLLAMA_MODEL=mistral python -m t800 --no-scan
"""
from __future__ import annotations

import argparse
import logging
import sys
import time

from t800.config import OracleConfig
from t800.monitoring import configure_logging
from t800.oracle import DecisionOracle
from t800.processor import Processor
from t800.scanner import Scanner, SimulatedScanner, StaticScanner
from t800.spatial import Location
from t800.types import T800Error, Threat

logger = logging.getLogger("t800")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="t800", description=__doc__.splitlines()[0])
    parser.add_argument("--duration", type=float, default=30.0,
                        help="Seconds to run before giving up (default 30)")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--scan", action=argparse.BooleanOptionalAction, default=True,
                        help="Run the simulated scanner (default on)")
    return parser.parse_args(argv)


def make_demo_threat() -> Threat:
    return Threat(
        id="THREAT-001",
        kind="hostile_robot",
        location=Location(100.0, 100.0, 0.0),
        severity=8,
        description="Hostile combat robot detected",
    )


def build_scanner(scan: bool, threat: Threat) -> Scanner:
    """Simulated sweeps, or a fixed sensor picture that keeps ``threat`` in view."""
    if scan:
        return SimulatedScanner()
    return StaticScanner([[threat]])


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level)

    config = OracleConfig.from_env()
    logger.info("Decision oracle: %s (model %s)", config.base_url, config.model)
    threat = make_demo_threat()
    processor = Processor(
        oracle=DecisionOracle.from_config(config),
        scanner=build_scanner(args.scan, threat),
    )

    processor.start()
    try:
        try:
            processor.report_threat(threat)
        except T800Error as exc:
            logger.error("Error reporting threat: %s", exc)

        deadline = time.monotonic() + args.duration
        while time.monotonic() < deadline:
            active = processor.get_active_threat()
            if active is None:
                if threat.is_eliminated:
                    print("\nAll threats have been eliminated")
                else:
                    print(f"\nLost track of {threat.id}")
                break
            print(f"Threat {active.id} Health: {active.health:.2f}%")
            time.sleep(1.0)
        else:
            print("\nTimeout reached")
    except KeyboardInterrupt:
        print("\nReceived shutdown signal")
    finally:
        processor.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
