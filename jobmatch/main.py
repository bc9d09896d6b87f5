"""Command-line entry point for the job match pipeline."""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from dotenv import load_dotenv

from jobmatch.adapters.factory import build_adapters
from jobmatch.aggregation.aggregator import JobAggregator
from jobmatch.config.environment import EnvironmentConfig
from jobmatch.config.exceptions import ConfigurationError
from jobmatch.config.loader import load_config, load_profile
from jobmatch.config.models import AppConfig
from jobmatch.domain.models import CanonicalJob, SearchProfile, SearchQuery
from jobmatch.logging import get_logger
from jobmatch.logging.config import configure_logging
from jobmatch.pipeline import MatchPipeline
from jobmatch.scoring.client import OpenAIScoringClient
from jobmatch.scoring.service import ScoringService

logger = get_logger(__name__, component="cli")

LOG_LEVEL_CHOICES = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jobmatch",
        description="JobMatch pipeline - fetch listings from several job boards, deduplicate and score them",
    )
    parser.add_argument(
        "--profile",
        type=Path,
        required=True,
        help="Path to the candidate profile YAML file",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml or config/config.yaml, else built-in defaults)",
    )
    parser.add_argument("--query", default=None, help="Search keywords (default: the profile's keywords)")
    parser.add_argument(
        "--location",
        default=None,
        help="Location filter (default: the profile's first preferred location)",
    )
    parser.add_argument(
        "--remote",
        action="store_true",
        help="Only return remote jobs (implied by remote_preference: remote_only)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=LOG_LEVEL_CHOICES,
        help="Log level (overrides config and environment)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the JSON result to this file instead of stdout",
    )
    parser.add_argument(
        "--no-score",
        action="store_true",
        help="Skip AI scoring and output deduplicated, unscored jobs",
    )
    return parser


def resolve_log_level(cli_level: Optional[str], env_config: EnvironmentConfig, app_config: AppConfig) -> str:
    """Apply log level priority: CLI > environment > config file."""
    if cli_level:
        return cli_level
    if env_config.log_level:
        return env_config.log_level
    return app_config.logging.level


def build_query(profile: SearchProfile, args: argparse.Namespace) -> SearchQuery:
    """
    Derive the adapter query from the profile, applying CLI overrides.

    Raises:
        ConfigurationError: If neither the CLI nor the profile supplies keywords
    """
    base = SearchQuery.from_profile(profile)

    keywords = args.query if args.query is not None else base.keywords
    location = args.location if args.location is not None else base.location

    if not keywords.strip():
        raise ConfigurationError(
            "No search keywords given",
            suggestions=["Add keywords to the profile", "Pass --query \"python developer\""],
        )

    return SearchQuery(
        keywords=keywords,
        location=location,
        remote_only=args.remote or base.remote_only,
    )


def render_jobs(jobs: Sequence[CanonicalJob]) -> str:
    """Serialize jobs as a JSON array."""
    return json.dumps([job.model_dump(mode="json") for job in jobs], indent=2, ensure_ascii=False)


def write_output(payload: str, output: Optional[Path]) -> None:
    if output is None:
        sys.stdout.write(payload + "\n")
        sys.stdout.flush()
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(payload + "\n", encoding="utf-8")
    logger.info(
        f"Results written to {output}",
        extra={"event": "output.written", "path": str(output)},
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the job match pipeline.

    Returns:
        Exit code: 0 on success, 1 on configuration errors, 2 on unexpected errors
    """
    load_dotenv()
    args = build_parser().parse_args(argv)

    try:
        # Config first: it decides the log format
        app_config, env_config = load_config(args.config)

        log_level = resolve_log_level(args.log_level, env_config, app_config)
        configure_logging(
            level=log_level,
            format_type=app_config.logging.format,
            environment=env_config.environment,
        )

        enabled_sources = app_config.get_enabled_sources()
        logger.info(
            "Configuration loaded",
            extra={
                "event": "config.loaded",
                "config_path": str(args.config) if args.config else None,
                "enabled_sources": [s.type.value for s in enabled_sources],
                "batch_size": app_config.scoring.batch_size,
                "scoring_enabled": not args.no_score,
                "env": repr(env_config),
            },
        )

        profile = load_profile(args.profile)
        query = build_query(profile, args)

        scoring_service = None
        if not args.no_score:
            client = OpenAIScoringClient.from_config(app_config.scoring, env_config)
            scoring_service = ScoringService(client, app_config.scoring)

        aggregator = JobAggregator(
            build_adapters(app_config, env_config),
            max_workers=app_config.advanced.max_workers,
        )
        pipeline = MatchPipeline(aggregator, scoring_service)

        result = pipeline.run(query, profile)

        write_output(render_jobs(result.jobs), args.output)

        logger.info(
            f"Run finished: {len(result.jobs)} jobs, {len(result.errors)} source error(s)",
            extra={"event": "service.run.completed", **result.summary()},
        )
        return 0

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        logger.error(
            f"Configuration error: {e.message}",
            extra={"event": "config.error", "error_type": "ConfigurationError"},
        )
        return 1
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error during run",
            extra={
                "event": "service.run.failed",
                "error_type": type(e).__name__,
                "error": str(e),
            },
            exc_info=True,
        )
        return 2


if __name__ == "__main__":
    sys.exit(main())
