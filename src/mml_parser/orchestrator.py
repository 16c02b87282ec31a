"""
Orchestration logic for batch printout parsing.

This module resolves input paths to files and feeds them one at a time
through the printout parser, independent of CLI concerns. A file that
fails is reported and skipped; only an unwritable output is fatal.
"""

import json
import logging
import re
import time
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

from mml_parser.config_models import ParserConfig
from mml_parser.context import RunContext
from mml_parser.csv_writer import OutputRouter
from mml_parser.exceptions import FileProcessingError, UnreadableInputError, UnwritableOutputError
from mml_parser.models import ParsingStats
from mml_parser.observability import EventType, ObservabilityHook, ObservabilityManager
from mml_parser.parsers import parse_printout
from mml_parser.validators import validate_config, validate_output_dir

logger = logging.getLogger(__name__)


def load_config(config_path: Optional[Path] = None) -> ParserConfig:
    """Load and validate a JSON config file, or return the defaults.

    Raises:
        FileNotFoundError: If the config file does not exist
        ValueError: If the config fails semantic validation
        pydantic.ValidationError: If the config has invalid fields
    """
    if config_path is None:
        return ParserConfig()

    if not config_path.exists():
        raise FileNotFoundError(f"Config not found: {config_path}")

    logger.info(f"Loading configuration from {config_path}")
    with open(config_path, 'r', encoding='utf-8') as f:
        config = json.load(f)

    config_errors = validate_config(config)
    if config_errors:
        for error in config_errors:
            logger.error(f"Config validation error: {error}")
        raise ValueError(f"Configuration validation failed with {len(config_errors)} error(s)")

    return ParserConfig.from_dict(config)


def resolve_input_files(input_paths: Sequence[Path]) -> List[Path]:
    """Expand each path to the files it names.

    A directory contributes its regular files sorted by name; its
    subdirectories are skipped. Anything else is passed through so that
    a missing path fails as a file of its own.
    """
    files: List[Path] = []
    for path in input_paths:
        if path.is_dir():
            children = sorted(path.iterdir(), key=lambda p: p.name)
            for child in children:
                if child.is_file():
                    files.append(child)
                else:
                    logger.debug(f"Skipping non-file entry {child}")
        else:
            files.append(path)
    return files


def _filter_files(files: List[Path], config: ParserConfig) -> List[Path]:
    """Apply the config's file mask and file-count cap."""
    if config.file_mask is not None:
        try:
            pattern = re.compile(config.file_mask)
        except re.error as e:
            raise ValueError(f"Invalid file_mask regex pattern '{config.file_mask}': {e}")
        original_count = len(files)
        files = [f for f in files if pattern.search(f.name)]
        filtered_count = original_count - len(files)
        if filtered_count > 0:
            logger.info(f"File mask '{config.file_mask}' filtered out {filtered_count} file(s), {len(files)} remaining")
        if not files:
            raise ValueError(f"File mask '{config.file_mask}' filtered out all input files. No files to process.")

    if config.max_files is not None and len(files) > config.max_files:
        logger.warning(f"Limiting processing to first {config.max_files} of {len(files)} files")
        files = files[:config.max_files]

    return files


def _check_readable(input_file: Path, config: ParserConfig) -> None:
    """Fail early on files that cannot be parsed at all.

    Raises:
        UnreadableInputError: Missing, not a regular file, or too large
    """
    if not input_file.exists():
        raise UnreadableInputError(f"Input file not found: {input_file}")
    if not input_file.is_file():
        raise UnreadableInputError(f"Not a regular file: {input_file}")
    if config.max_file_size is not None:
        size = input_file.stat().st_size
        if size > config.max_file_size:
            size_mb = size / (1024 * 1024)
            limit_mb = config.max_file_size / (1024 * 1024)
            raise UnreadableInputError(
                f"File size {size_mb:.2f} MB exceeds maximum allowed size {limit_mb:.2f} MB"
            )


def parse_files(
    input_paths: Union[Path, Sequence[Path]],
    output_dir: Path,
    config: Optional[ParserConfig] = None,
    dry_run: bool = False,
    hooks: Optional[List[ObservabilityHook]] = None
) -> Tuple[Dict[str, float], Dict[str, ParsingStats], Dict[str, str]]:
    """Parse printout files or directories into one CSV per entity type.

    Args:
        input_paths: File or directory paths to process
        output_dir: Output directory for ``<entity type>.csv`` files
        config: Parser configuration (defaults when None)
        dry_run: If True, parse and count but don't write outputs
        hooks: Observability hooks to register for this run

    Returns:
        Tuple: (stats dict, record_stats dict, file_errors dict)

    Raises:
        UnwritableOutputError: If output cannot be written (fatal to the run)
        FileProcessingError: On the first failed file when ``config.fail_fast``
        ValueError: If the file mask excludes every input file
    """
    start_time = time.time()
    config = config or ParserConfig()
    if isinstance(input_paths, Path):
        input_paths = [input_paths]

    input_files = _filter_files(resolve_input_files(input_paths), config)
    file_errors: Dict[str, str] = {}
    successful_files = 0
    failed_files = 0

    if dry_run:
        logger.info("DRY RUN MODE - Files will be parsed but no outputs will be written")
        router: Optional[OutputRouter] = None
    else:
        validate_output_dir(output_dir)
        router = OutputRouter(
            output_dir,
            encoding=config.output.encoding,
            flush_every=config.output.flush_every
        )

    ctx = RunContext(config=config, router=router, observability=ObservabilityManager(hooks))
    logger.info(f"Files: {len(input_files)}, Fail-fast: {config.fail_fast}, Slice policy: {config.slice_policy.value}")

    try:
        for file_idx, input_file in enumerate(input_files, 1):
            name = input_file.name
            ctx.begin_file()
            ctx.observability.emit_event(EventType.FILE_START, file_path=input_file)
            ctx.observability.start_timer("file_duration")
            logger.debug(f"[{file_idx}/{len(input_files)}] Parsing {input_file}")

            try:
                _check_readable(input_file, config)
                rows = parse_printout(input_file, ctx)
            except UnwritableOutputError:
                raise
            except Exception as e:
                ctx.observability.end_timer("file_duration", tags={"status": "failed"})
                error_msg = f"{type(e).__name__}: {e}"
                logger.error(f"Parsing {name}... Failed: {error_msg}")
                logger.error(f"Skipping file: {name}")
                file_errors[str(input_file)] = error_msg
                failed_files += 1
                for entity_type in ctx.file_entity_types:
                    ctx.stats_for(entity_type).file_parse_failures += 1
                ctx.observability.emit_event(EventType.FILE_ERROR, file_path=input_file, details={"error": error_msg})

                if config.fail_fast:
                    raise FileProcessingError(f"File processing failed: {error_msg}") from e
                continue

            duration = ctx.observability.end_timer("file_duration", tags={"status": "ok"})
            logger.info(f"Parsing {name}... Done.")
            ctx.observability.emit_event(
                EventType.FILE_COMPLETE, file_path=input_file,
                details={"rows": rows, "duration": f"{duration:.2f}s"}
            )
            successful_files += 1

    finally:
        if router is not None:
            try:
                router.close()
            except Exception as e:
                logger.error(f"Error closing output streams: {e}")
        ctx.observability.close()

    total_duration = time.time() - start_time
    logger.info(f"Files: {successful_files} succeeded, {failed_files} failed")

    stats = {
        "processed": successful_files + failed_files,
        "succeeded": successful_files,
        "failed": failed_files,
        "duration": total_duration
    }

    return stats, ctx.record_stats, file_errors
