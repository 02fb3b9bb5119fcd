"""Command line driver.

Usage:
    python -m airportqueue INPUT [--sample-interval S] [--json] [--plot PATH] [--log-level LEVEL]
"""

from __future__ import annotations

import argparse
import logging
import sys

from airportqueue.config import SimulationConfig
from airportqueue.errors import ValidationError
from airportqueue.loader import load_file
from airportqueue.logging_config import configure_from_env, enable_console_logging
from airportqueue.simulation import AirportSimulation

logger = logging.getLogger("airportqueue.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="airportqueue",
        description="Simulate class-bound airport queues and report wait-time statistics.",
    )
    parser.add_argument("input", help="Input file: server counts line, then arrival,service,class records")
    parser.add_argument("--sample-interval", type=float, default=None,
                        help="Simulated seconds between queue-length samples (default 1.0)")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    parser.add_argument("--plot", metavar="PATH", default=None, help="Save a queue-length plot to PATH")
    parser.add_argument("--log-level", default=None,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="Enable console logging at this level")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.log_level:
        enable_console_logging(level=args.log_level)
    else:
        configure_from_env()

    try:
        config = SimulationConfig.from_env()
        if args.sample_interval is not None:
            config = SimulationConfig(sample_interval_s=args.sample_interval, start_time_s=config.start_time_s)

        data = load_file(args.input)
        sim = AirportSimulation(config)
        sim.initialize(data.economy_servers, data.business_servers, data.records)
    except ValidationError as e:
        logger.error("Invalid input: %s", e)
        print(f"error: {e}", file=sys.stderr)
        return 2

    report = sim.run()
    print(report.to_json() if args.json else report)

    if args.plot:
        from airportqueue.visual.plots import plot_queue_lengths

        plot_queue_lengths(sim.airport.stats, args.plot)
    return 0


if __name__ == "__main__":
    sys.exit(main())
