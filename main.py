"""Main entry point for bug fights.

This module provides command-line options to run the simulation:
- Web mode (default): FastAPI backend streaming fights over a websocket
- Headless mode: run N fights as fast as possible and log the results
"""

import argparse
import json
import logging
import random
import sys

from backend.logging_config import configure_logging

logger = logging.getLogger(__name__)

SEPARATOR_WIDTH = 60


def run_web_server(seed=None):
    """Run the web server."""
    import uvicorn

    from backend.app_factory import AppContext, create_app

    context = AppContext(seed=seed)
    app = create_app(context=context)

    logger.info("=" * SEPARATOR_WIDTH)
    logger.info("BUG FIGHTS - WEB SERVER")
    logger.info("=" * SEPARATOR_WIDTH)
    logger.info("Spectator websocket at ws://localhost:%d/ws", context.api_port)
    logger.info("API docs available at http://localhost:%d/docs", context.api_port)
    logger.info("Press Ctrl+C to stop the server")
    logger.info("=" * SEPARATOR_WIDTH)

    uvicorn.run(app, host="0.0.0.0", port=context.api_port)


def run_headless(fights, seed=None, roster_file=None, fight_logging=True, export_results=None):
    """Run ``fights`` fights back to back without a server.

    Args:
        fights: Number of fights to complete
        seed: Optional random seed for deterministic behavior
        roster_file: Optional roster JSON to load and update
        fight_logging: Whether to log per-fight diagnostics
        export_results: Optional filename to write the results to as JSON
    """
    from core.config.simulation_config import SimulationConfig
    from core.roster import RosterManager
    from core.simulation import Simulation

    rng = random.Random(seed)
    roster = RosterManager(roster_file, rng=rng)
    config = SimulationConfig(fight_logging=fight_logging)
    simulation = Simulation(roster, config=config, rng=rng)

    logger.info("=" * SEPARATOR_WIDTH)
    logger.info("HEADLESS BUG FIGHTS: %d fights (seed=%s)", fights, seed)
    logger.info("=" * SEPARATOR_WIDTH)

    results = simulation.run_fights(fights)
    roster.flush()
    for result in results:
        if result.winner_name is None:
            logger.info("Fight #%d: %s vs %s - DRAW (%d ticks)", result.fight_number, result.left_name, result.right_name, result.ticks)
        else:
            logger.info(
                "Fight #%d: %s vs %s - %s wins (%d ticks)",
                result.fight_number,
                result.left_name,
                result.right_name,
                result.winner_name,
                result.ticks,
            )

    if export_results:
        with open(export_results, "w") as f:
            json.dump([result.__dict__ for result in results], f, indent=2)
        logger.info("Results exported to: %s", export_results)

    return results


def main():
    """Parse command-line arguments and run the appropriate mode."""
    parser = argparse.ArgumentParser(
        description="Bug Fights - autonomous insect combat simulator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run web server (default)
  python main.py

  # Run 20 fights headless
  python main.py --headless --fights 20

  # Reproducible run with results exported
  python main.py --headless --fights 50 --seed 42 --export-results results.json
        """,
    )
    parser.add_argument("--headless", action="store_true", help="Run fights without the web server")
    parser.add_argument("--fights", type=int, default=10, help="Fights to run in headless mode (default: 10)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for deterministic behavior (optional)")
    parser.add_argument("--roster-file", type=str, default=None, help="Roster JSON file to load and update")
    parser.add_argument("--quiet", action="store_true", help="Disable per-fight diagnostics logging")
    parser.add_argument(
        "--export-results",
        type=str,
        default=None,
        metavar="FILENAME",
        help="Write headless fight results to a JSON file",
    )
    parser.add_argument("--log-level", type=str, default=None, help="Log level (default: BUGFIGHTS_LOG_LEVEL or INFO)")

    args = parser.parse_args()
    configure_logging(level=args.log_level)

    if args.headless:
        if args.fights < 1:
            parser.error("--fights must be at least 1")
        run_headless(
            args.fights,
            seed=args.seed,
            roster_file=args.roster_file,
            fight_logging=not args.quiet,
            export_results=args.export_results,
        )
    else:
        run_web_server(seed=args.seed)
    return 0


if __name__ == "__main__":
    sys.exit(main())
