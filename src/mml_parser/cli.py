"""
Command-line interface for the MML printout parser.

This module handles CLI argument parsing, logging configuration,
and user interaction.
"""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from mml_parser import __version__
from mml_parser.config_models import SlicePolicy
from mml_parser.exceptions import FileProcessingError, UnwritableOutputError
from mml_parser.observability import LoggingHook, ObservabilityHook, PrometheusHook, StatsDHook
from mml_parser.orchestrator import load_config, parse_files
from mml_parser.utils import execution_time_message

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mml-parser",
        description="Parses Huawei MML 'LST' printouts into one CSV file per managed object type",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Parse one printout
  mml-parser --out ./output dump_20170101.txt

  # Parse every file in a directory
  mml-parser --out ./output ./printouts/

  # Fail files with short data lines instead of emitting empty values
  mml-parser --out ./output --slice-policy strict ./printouts/

  # Dry run (parse only, no output)
  mml-parser --out ./output --dry-run ./printouts/

  # Export metrics for the node exporter textfile collector
  mml-parser --out ./output --prometheus /var/lib/node_exporter/mml_parser.prom ./printouts/
        """
    )
    parser.add_argument("input_paths", nargs="+", type=Path, help="Printout files or directories")
    parser.add_argument("--out", "-o", required=True, type=Path, help="Output directory")
    parser.add_argument("--config", type=Path, help="Optional config JSON file")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level")
    parser.add_argument("--dry-run", action="store_true",
                        help="Parse without writing outputs")
    parser.add_argument("--fail-fast", action="store_true",
                        help="Stop processing on first file error (default: continue)")
    parser.add_argument("--slice-policy", choices=[p.value for p in SlicePolicy],
                        help="Handling of data lines shorter than the header (overrides config)")
    parser.add_argument("--log-events", action="store_true",
                        help="Log file and block events")
    parser.add_argument("--prometheus", metavar="TEXTFILE", type=Path,
                        help="Write run metrics in Prometheus text format to TEXTFILE")
    parser.add_argument("--statsd", metavar="HOST:PORT",
                        help="Send metrics to a StatsD server")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def build_hooks(args: argparse.Namespace) -> List[ObservabilityHook]:
    hooks: List[ObservabilityHook] = []
    if args.log_events:
        hooks.append(LoggingHook())
    if args.prometheus:
        hooks.append(PrometheusHook(textfile=args.prometheus))
    if args.statsd:
        host, _, port = args.statsd.partition(":")
        hooks.append(StatsDHook(host=host or "localhost", port=int(port or 8125)))
    return hooks


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point.

    Returns:
        Exit code: 0 = success, 1 = fatal error or all files failed, 2 = partial failure
    """
    args = build_arg_parser().parse_args(argv)
    logging.getLogger().setLevel(args.log_level)
    start_time = time.time()

    try:
        config = load_config(args.config)
        overrides = {}
        if args.fail_fast:
            overrides["fail_fast"] = True
        if args.slice_policy:
            overrides["slice_policy"] = SlicePolicy(args.slice_policy)
        if overrides:
            config = config.model_copy(update=overrides)

        stats, record_stats, file_errors = parse_files(
            args.input_paths,
            args.out,
            config=config,
            dry_run=args.dry_run,
            hooks=build_hooks(args)
        )

        logger.info(execution_time_message(time.time() - start_time))

        if record_stats:
            logger.info("Rows per managed object:")
            for entity_type in sorted(record_stats.keys()):
                pstats = record_stats[entity_type]
                logger.info(
                    f"  {entity_type}: {pstats.success_rows:,} rows in {pstats.blocks} block(s), {pstats.duration:.2f}s"
                )
                if pstats.skipped_rows > 0:
                    logger.warning(f"  {entity_type}: {pstats.skipped_rows:,} rows skipped")
                if pstats.file_parse_failures > 0:
                    logger.warning(f"  {entity_type}: {pstats.file_parse_failures} file(s) failed")

        if not args.dry_run:
            logger.info(f"Output Location: {args.out.resolve()}")
        else:
            logger.info("DRY RUN - No outputs written")

        # Log file-level errors if any
        if file_errors:
            logger.error(f"FILE PROCESSING ERRORS ({len(file_errors)} files failed):")
            for file_path, error_msg in file_errors.items():
                logger.error(f"  {file_path}: {error_msg}")

        failed_file_count = len(file_errors)
        successful_file_count = stats["processed"] - failed_file_count

        if failed_file_count == 0:
            return 0
        elif successful_file_count == 0:
            return 1
        else:
            # Partial failure - some files succeeded, some failed
            return 2

    except UnwritableOutputError as e:
        logger.error(f"ERROR: {e}")
        return 1
    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
        return 1
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Validation error: {e}")
        return 1
    except FileProcessingError as e:
        logger.error(f"File processing error: {e}")
        return 1
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
