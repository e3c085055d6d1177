"""Command-line interface for mamedex."""

import sys
import logging
import argparse
from pathlib import Path
from typing import Dict, Optional

from rich.console import Console

from mamedex import __version__
from mamedex.catalog.indices import Index
from mamedex.config.loader import DEFAULT_CONFIG_NAME, ConfigError, get_config_value, load_config, set_config_value
from mamedex.config.validator import ValidationError, validate_config
from mamedex.errors import MamedexError
from mamedex.export import DEFAULT_BATCH_SIZE, EXPORT_FORMATS
from mamedex.filters import FILTER_NAMES
from mamedex.pipeline import CatalogPipeline
from mamedex.readers.sources import discover_sources
from mamedex.stats import render_stats, render_top

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser."""
    parser = argparse.ArgumentParser(
        prog='mamedex',
        description='MAME arcade metadata merger and exporter',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Read everything under ./data and show statistics
  mamedex --data-dir ./data --stats

  # Drop non-games and clones, then export SQLite and CSV
  mamedex --filter non_games --filter clones --format sqlite --format csv

  # Show the 20 most common entries of every index
  mamedex --top 20

  # Use custom config file
  mamedex --config /path/to/mamedex.yaml
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parser.add_argument(
        '--config',
        type=Path,
        metavar='PATH',
        help=f'Path to config file (default: ./{DEFAULT_CONFIG_NAME} if present)'
    )

    parser.add_argument(
        '--data-dir',
        type=Path,
        metavar='PATH',
        help='Directory holding the extracted source files. Overrides config.'
    )

    parser.add_argument(
        '--export-dir',
        type=Path,
        metavar='PATH',
        help='Directory exports are written below. Overrides config.'
    )

    parser.add_argument(
        '--filter',
        action='append',
        dest='filters',
        choices=FILTER_NAMES,
        metavar='NAME',
        help=f'Filter to apply, repeatable, in order ({", ".join(FILTER_NAMES)}). Overrides config.'
    )

    parser.add_argument(
        '--format',
        action='append',
        dest='formats',
        choices=EXPORT_FORMATS,
        help='Export format, repeatable. Overrides config.'
    )

    parser.add_argument(
        '--stats',
        action='store_true',
        help='Print catalog statistics after import and filtering'
    )

    parser.add_argument(
        '--top',
        type=int,
        metavar='N',
        help='Print the N most common entries of every index'
    )

    return parser


def _setup_logging(config: dict) -> None:
    """
    Setup logging configuration from config.

    Args:
        config: Configuration dictionary
    """
    logging_config = config.get('logging') or {}

    level_str = str(logging_config.get('level', 'INFO')).upper()
    level = getattr(logging, level_str, logging.INFO)

    handlers = []

    if logging_config.get('console', True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        formatter = logging.Formatter('%(levelname)s: %(message)s')
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    # File handler (if configured)
    log_file = logging_config.get('file')
    if log_file:
        try:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(level)
            formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
            file_handler.setFormatter(formatter)
            handlers.append(file_handler)
        except OSError as e:
            print(f"Error: Could not create log file '{log_file}': {e}", file=sys.stderr)
            sys.exit(1)

    if not handlers:
        handlers.append(logging.NullHandler())

    logging.basicConfig(
        level=level,
        handlers=handlers,
        force=True  # Override any existing configuration
    )


def _load_config(config_path: Optional[Path]) -> dict:
    """Load the given config file, or ./mamedex.yaml if it exists."""
    if config_path is None:
        default_path = Path.cwd() / DEFAULT_CONFIG_NAME
        if not default_path.exists():
            return {}
        config_path = default_path
    return load_config(str(config_path))


def _apply_overrides(config: dict, args: argparse.Namespace) -> None:
    """Apply CLI overrides on top of the loaded config."""
    if args.data_dir is not None:
        set_config_value(config, 'paths.data_dir', str(args.data_dir))
    if args.export_dir is not None:
        set_config_value(config, 'paths.export_dir', str(args.export_dir))
    if args.filters:
        config['filters'] = list(args.filters)
    if args.formats:
        set_config_value(config, 'export.formats', list(args.formats))


def resolve_source_paths(config: dict) -> Dict[str, Path]:
    """
    Find source files under the data directory, then apply explicit overrides.

    Args:
        config: Configuration dictionary

    Returns:
        Source name -> file path
    """
    data_dir = Path(get_config_value(config, 'paths.data_dir', 'data')).expanduser()
    paths = discover_sources(data_dir)

    for name, path in (config.get('sources') or {}).items():
        paths[name] = Path(path).expanduser()

    for name, path in paths.items():
        logger.debug(f"Source {name}: {path}")
    return paths


def main(argv: Optional[list] = None) -> int:
    """
    Main entry point for mamedex CLI.

    Args:
        argv: Command-line arguments (default: sys.argv)

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.top is not None and args.top < 1:
        parser.error('--top must be a positive integer')

    # Load and validate configuration
    try:
        config = _load_config(args.config)
        _apply_overrides(config, args)
        validate_config(config)
    except (ConfigError, ValidationError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    _setup_logging(config)

    try:
        return run(config, args)
    except KeyboardInterrupt:
        print("\n\nInterrupted by user.", file=sys.stderr)
        return 130


def run(config: dict, args: argparse.Namespace) -> int:
    """
    Run import, filters, reports and exports.

    Args:
        config: Validated configuration with CLI overrides applied
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    pipeline = CatalogPipeline()
    console = Console()

    report = pipeline.import_sources(resolve_source_paths(config))
    if pipeline.store.is_empty():
        print("Error: No machines loaded, check the data directory and the mame source file",
              file=sys.stderr)
        return 1

    exit_code = 0 if report.ok else 2

    try:
        for name in config.get('filters') or []:
            removed = pipeline.apply_filter(name)
            logger.info(f"Filter {name}: removed {removed} machines, {len(pipeline.store)} remaining")

        if args.stats:
            render_stats(pipeline.stats(), console)

        if args.top:
            for index in Index:
                render_top(pipeline.indices, index, args.top, console)
    except MamedexError as e:
        logger.error(str(e))
        return 1

    export_dir = Path(get_config_value(config, 'paths.export_dir', 'export')).expanduser()
    batch_size = get_config_value(config, 'export.batch_size', DEFAULT_BATCH_SIZE)

    for fmt in get_config_value(config, 'export.formats', []) or []:
        try:
            output = pipeline.export(fmt, export_dir, batch_size=batch_size)
            logger.info(f"Exported {fmt}: {output}")
        except MamedexError as e:
            logger.error(f"{fmt} export failed: {e}")
            exit_code = 1

    return exit_code


if __name__ == '__main__':
    sys.exit(main())
