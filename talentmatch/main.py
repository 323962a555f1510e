"""Command-line entry point: seed the store and print ranked matches for one party."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import json
import sys
import time
from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import ValidationError

from talentmatch.config.environment import EnvironmentConfig
from talentmatch.config.exceptions import ConfigurationError
from talentmatch.config.loader import load_config
from talentmatch.config.models import AppConfig, RankingView
from talentmatch.logging import get_logger
from talentmatch.logging.config import configure_logging
from talentmatch.persistence.database import close_database, init_database
from talentmatch.persistence.exceptions import PersistenceError
from talentmatch.pipeline import MatchPipeline
from talentmatch.report import ReportRenderError, ReportRenderer
from talentmatch.seed import seed_from_file
from talentmatch.selection.exceptions import MatchingError

logger = get_logger(__name__, component="cli")


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and resolve the effective log level.

    Log level priority: CLI > LOG_LEVEL environment variable > config file.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level

    return app_config, env_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Talent Match - keyword matching between job seekers and employers"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml, then config/config.yaml)",
    )
    parser.add_argument(
        "--seed",
        type=Path,
        default=None,
        help="YAML fixture of keywords and parties to load before matching",
    )
    parser.add_argument(
        "--party",
        default=None,
        help="Party id to compute ranked matches for",
    )
    parser.add_argument(
        "--view",
        default=None,
        choices=[v.value for v in RankingView],
        help="Ranked view (overrides config)",
    )
    parser.add_argument(
        "--format",
        dest="output_format",
        default="json",
        choices=["json", "text"],
        help="Output format for the ranked list (default: json)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success, 1 for failure, 2 for usage errors)
    """
    start_time = time.time()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.seed is None and args.party is None:
        parser.print_usage(sys.stderr)
        print("error: nothing to do, pass --seed and/or --party", file=sys.stderr)
        return 2

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)

        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=env_config.environment,
        )

        logger.info(
            "Talent Match starting",
            extra={
                "event": "service.starting",
                "config_path": str(args.config) if args.config else None,
                "log_level": env_config.log_level,
                "policy": app_config.matching.policy,
            },
        )

        init_database(env_config.database_url)

        try:
            if args.seed is not None:
                seeded = seed_from_file(args.seed, app_config.matching)
                print(
                    f"Seeded {seeded.keywords} keywords, {seeded.parties} parties, "
                    f"{seeded.selections} selections",
                    file=sys.stderr,
                )

            if args.party is not None:
                pipeline = MatchPipeline.from_config(app_config)
                view = RankingView(args.view) if args.view else None
                result = pipeline.run_for_party(args.party, view=view)

                if args.output_format == "text":
                    print(ReportRenderer().render_text(result))
                else:
                    print(json.dumps(result.to_payload(), indent=2, default=str))
        finally:
            close_database()

        logger.info(
            "Talent Match finished",
            extra={
                "event": "service.stopping",
                "uptime_seconds": round(time.time() - start_time, 2),
            },
        )
        return 0

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        logger.error(
            f"Configuration error: {e.message}",
            extra={"event": "config.error", "error_type": "ConfigurationError"},
        )
        return 1
    except (MatchingError, PersistenceError, ReportRenderError) as e:
        print(f"Error: {e}", file=sys.stderr)
        logger.error(
            f"Run failed: {e}",
            extra={"event": "service.failed", "error_type": type(e).__name__},
        )
        return 1
    except ValidationError as e:
        print(f"Invalid stored record: {e}", file=sys.stderr)
        logger.error(
            f"Invalid stored record: {e.title}",
            extra={"event": "service.failed", "error_type": "ValidationError"},
        )
        return 1
    except KeyboardInterrupt:
        print("\nShutdown requested by user", file=sys.stderr)
        return 0


if __name__ == "__main__":
    sys.exit(main())
