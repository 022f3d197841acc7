"""Main entry point for the DMP Award Scanner service."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import os
import signal
import sys
import threading
import time
from pathlib import Path
from typing import Optional, Tuple

from award_scanner.adapters import get_awards_adapter, get_dmphub_adapter
from award_scanner.config.environment import EnvironmentConfig
from award_scanner.config.exceptions import ConfigurationError
from award_scanner.config.loader import load_config
from award_scanner.config.models import AppConfig
from award_scanner.logging import get_logger
from award_scanner.logging.config import configure_logging
from award_scanner.matching import CandidateRanker, TitleNormalizer
from award_scanner.persistence.database import close_database, init_database
from award_scanner.pipeline import ScanPipeline
from award_scanner.scheduler import SchedulerService

logger = get_logger(__name__, component="cli")


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str], dry_run: bool = False
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load and prepare runtime configuration.

    Log level priority: CLI > LOG_LEVEL environment variable > config > INFO.

    Args:
        config_path: Path to configuration file (None for the default lookup)
        log_level_override: Log level from CLI
        dry_run: Force dry-run mode regardless of the config file

    Returns:
        Tuple of (AppConfig, EnvironmentConfig)

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    if dry_run:
        app_config = app_config.model_copy(update={"dry_run": True})

    if log_level_override:
        env_config.log_level = log_level_override
    elif env_config.log_level:
        pass
    elif app_config.logging and app_config.logging.level:
        env_config.log_level = app_config.logging.level
    else:
        env_config.log_level = "INFO"

    return app_config, env_config


def build_pipeline(app_config: AppConfig, env_config: EnvironmentConfig) -> ScanPipeline:
    """Wire adapters, ranker and normalizer into a ScanPipeline."""
    return ScanPipeline(
        app_config=app_config,
        dmphub_adapter=get_dmphub_adapter(app_config.dmphub, app_config.advanced, env_config),
        awards_adapter=get_awards_adapter(app_config.nsf, app_config.advanced),
        ranker=CandidateRanker(),
        normalizer=TitleNormalizer(),
    )


def main(argv=None) -> int:
    """
    Main entry point for the DMP Award Scanner.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    start_time = time.time()
    parser = argparse.ArgumentParser(
        description="DMP Award Scanner - match data management plans to NSF awards"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml or config/config.yaml)",
    )
    parser.add_argument(
        "--manual-run",
        action="store_true",
        help="Run a single scan immediately and exit",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report matches without registering awards or recording plans",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )

    args = parser.parse_args(argv)

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level, args.dry_run)

        log_format = app_config.logging.format if app_config.logging else "key-value"
        environment = os.environ.get("ENVIRONMENT", "local")
        configure_logging(level=env_config.log_level, format_type=log_format, environment=environment)

        logger.info(
            "DMP Award Scanner starting",
            extra={
                "event": "service.starting",
                "config_path": str(args.config) if args.config else None,
                "log_level": env_config.log_level,
                "manual_run": args.manual_run,
                "dry_run": app_config.dry_run,
            },
        )

        init_database(env_config.database_url)

        logger.info(
            "Configuration loaded",
            extra={
                "event": "config.loaded",
                "dmphub_plans_url": app_config.dmphub.plans_url,
                "nsf_awards_url": app_config.nsf.awards_url,
                "only_dois_count": len(app_config.only_dois),
                "authenticated": env_config.has_dmphub_credentials,
                "scan_interval_seconds": app_config.scan_interval_seconds,
                "log_format": log_format,
            },
        )

        pipeline = build_pipeline(app_config, env_config)

        if args.manual_run:
            logger.info("Executing manual scan", extra={"event": "service.manual_scan.starting"})
            result = pipeline.run_once()

            logger.info(
                f"Manual scan completed: "
                f"{result.total_plans} plans, "
                f"{result.total_scanned} scanned, "
                f"{result.total_skipped} skipped, "
                f"{result.total_matched} matched, "
                f"{result.total_registered} registered",
                extra={
                    "event": "service.manual_scan.completed",
                    "duration_seconds": result.total_duration_seconds,
                    "had_errors": result.had_errors,
                    "total_errors": result.total_errors,
                },
            )

            close_database()

            logger.info(
                "DMP Award Scanner stopped",
                extra={
                    "event": "service.stopping",
                    "uptime_seconds": round(time.time() - start_time, 2),
                },
            )

            return 1 if result.had_errors else 0

        shutdown_event = threading.Event()
        scheduler_service = SchedulerService(
            pipeline_callable=pipeline.run_once,
            interval_seconds=app_config.scan_interval_seconds,
            shutdown_event=shutdown_event,
        )

        def signal_handler(signum, frame):
            logger.info(
                f"Received signal {signum}, shutting down",
                extra={"event": "service.signal_received", "signal": signum},
            )
            scheduler_service.shutdown(wait=False)
            close_database()

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

        scheduler_service.start()

        logger.info(
            "Scheduler started. Press Ctrl+C to stop",
            extra={"event": "service.daemon_mode.started"},
        )

        try:
            shutdown_event.wait()
        except KeyboardInterrupt:
            logger.info(
                "Keyboard interrupt received, shutting down",
                extra={"event": "service.keyboard_interrupt"},
            )
            scheduler_service.shutdown(wait=False)
            close_database()

        logger.info(
            "DMP Award Scanner stopped",
            extra={
                "event": "service.stopping",
                "uptime_seconds": round(time.time() - start_time, 2),
            },
        )
        return 0

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        logger.error(
            f"Configuration error: {e}",
            extra={"event": "config.error", "error_type": "ConfigurationError"},
        )
        return 1
    except KeyboardInterrupt:
        print("\nShutdown requested by user", file=sys.stderr)
        return 0
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error during startup",
            extra={
                "event": "service.startup.failed",
                "error_type": type(e).__name__,
                "error": str(e),
            },
            exc_info=True,
        )
        return 1


if __name__ == "__main__":
    sys.exit(main())
