"""Command-line entry point for the ScamShield risk engine."""

import argparse
import json
import sys
import time
from pathlib import Path
from typing import Any, List, Optional, Tuple

from dotenv import load_dotenv

from scamshield.cache import CacheStoreError, DatabaseCacheStore
from scamshield.config.environment import EnvironmentConfig
from scamshield.config.exceptions import ConfigurationError
from scamshield.config.loader import load_config
from scamshield.config.models import AppConfig
from scamshield.domain.exceptions import InvalidPostingError
from scamshield.domain.models import ReportType
from scamshield.logging import get_logger
from scamshield.logging.config import configure_logging
from scamshield.persistence import (
    PersistenceError,
    RecordNotFoundError,
    close_database,
    init_database,
)
from scamshield.service import ScamShield, build_service

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
        env_config.log_level = app_config.logging.level or "INFO"

    return app_config, env_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scamshield",
        description="ScamShield - fraud-risk scoring for job postings",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml, then config/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze = subparsers.add_parser("analyze", help="Analyze postings from a JSON file")
    analyze.add_argument(
        "file", help="JSON file with one posting object or a list of them ('-' for stdin)"
    )

    report = subparsers.add_parser("report", help="Record user feedback for a posting")
    report.add_argument("fingerprint", help="Posting fingerprint")
    report.add_argument("report_type", choices=[t.value for t in ReportType])
    report.add_argument("--feedback", default=None, help="Optional free-text feedback")

    show_report = subparsers.add_parser("show-report", help="Show feedback counters for a posting")
    show_report.add_argument("fingerprint", help="Posting fingerprint")

    stats = subparsers.add_parser("stats", help="Show statistics over stored analyses")
    stats.add_argument("--days", type=int, default=None, help="Window in days (default: config)")

    subparsers.add_parser("purge-cache", help="Delete expired verification cache entries")

    return parser


def _read_postings(source: str) -> Any:
    try:
        if source == "-":
            return json.load(sys.stdin)
        with open(source, "r", encoding="utf-8") as f:
            return json.load(f)
    except OSError as e:
        raise InvalidPostingError(f"Cannot read postings file: {e}") from e
    except ValueError as e:
        raise InvalidPostingError(f"Postings file is not valid JSON: {e}") from e


def _emit(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def cmd_analyze(engine: ScamShield, args: argparse.Namespace) -> int:
    data = _read_postings(args.file)

    if isinstance(data, list):
        batch = engine.analysis.analyze_batch(data)
        _emit([item.to_payload() for item in batch.items])
        return 1 if batch.rejected_count else 0

    _emit(engine.analysis.analyze_payload(data).to_payload())
    return 0


def cmd_report(engine: ScamShield, args: argparse.Namespace) -> int:
    report = engine.reporting.record_report(args.fingerprint, args.report_type, args.feedback)
    _emit(report.model_dump(mode="json"))
    return 0


def cmd_show_report(engine: ScamShield, args: argparse.Namespace) -> int:
    report = engine.reporting.get_report(args.fingerprint)
    _emit(report.model_dump(mode="json"))
    return 0


def cmd_stats(engine: ScamShield, args: argparse.Namespace) -> int:
    stats = engine.reporting.get_stats(args.days)
    _emit(stats.model_dump(mode="json"))
    return 0


def cmd_purge_cache(engine: ScamShield, args: argparse.Namespace) -> int:
    if not isinstance(engine.cache_store, DatabaseCacheStore):
        logger.info(
            "In-memory cache backend configured; nothing to purge",
            extra={"event": "cache.purge_skipped"},
        )
        _emit({"deleted": 0})
        return 0

    _emit({"deleted": engine.cache_store.purge_expired()})
    return 0


COMMANDS = {
    "analyze": cmd_analyze,
    "report": cmd_report,
    "show-report": cmd_show_report,
    "stats": cmd_stats,
    "purge-cache": cmd_purge_cache,
}


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the ScamShield CLI.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    load_dotenv()

    start_time = time.time()
    args = build_parser().parse_args(argv)

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)

        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=env_config.environment,
        )

        logger.info(
            "ScamShield starting",
            extra={
                "event": "service.starting",
                "command": args.command,
                "log_level": env_config.log_level,
            },
        )

        init_database(env_config.database_url)

        try:
            with build_service(app_config, env_config) as engine:
                exit_code = COMMANDS[args.command](engine, args)
        finally:
            close_database()

        logger.info(
            "ScamShield stopped",
            extra={
                "event": "service.stopping",
                "exit_code": exit_code,
                "uptime_seconds": round(time.time() - start_time, 2),
            },
        )
        return exit_code

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        return 1
    except InvalidPostingError as e:
        print(f"Invalid posting: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Invalid argument: {e}", file=sys.stderr)
        return 1
    except RecordNotFoundError as e:
        print(f"Not found: {e}", file=sys.stderr)
        return 1
    except (PersistenceError, CacheStoreError) as e:
        print(f"Storage error: {e}", file=sys.stderr)
        logger.error(
            f"Storage error: {e}",
            extra={"event": "service.storage_error", "error_type": type(e).__name__},
        )
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
