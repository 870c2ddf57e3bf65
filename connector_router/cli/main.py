"""
Command-line entry point: ``connector-router init`` and ``connector-router route``
"""

import sys
import logging
from pathlib import Path
from typing import List, Optional

from ..core.config import RouterConfig
from ..core.exceptions import ConfigError, SceneError
from ..exporters import export_to_json, export_paths_to_csv, ExporterError
from .argument_parser import setup_argument_parser
from .config_discovery import discover_config
from .init_command import run_init_command
from .output import print_route_summary
from .scene_loader import load_scene


def setup_logging(log_file: Optional[Path] = None, log_level: str = 'INFO') -> None:
    """
    Configure logging to output to the console and, optionally, a file

    Console output goes to stderr so exported data on stdout stays clean.

    Args:
        log_file: Optional path to log file (always logs at DEBUG)
        log_level: Console logging level (DEBUG, INFO, WARNING, ERROR)
    """
    formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(getattr(logging, log_level.upper()))
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    logging.getLogger('connector_router').setLevel(logging.DEBUG)


def load_config(explicit_path: Optional[str] = None) -> RouterConfig:
    """Discovered configuration, or the defaults when no file exists."""
    config_file = discover_config(explicit_path)
    if config_file is None:
        return RouterConfig.default()
    print(f"📋 Loading config from: {config_file}", file=sys.stderr)
    return RouterConfig.from_yaml(config_file)


def run_route_command(
    scene_file: str,
    config_path: Optional[str] = None,
    output_format: str = 'json',
    output: Optional[str] = None,
    log_level: Optional[str] = None
) -> int:
    """
    Route every connector of a scene and export the result

    Returns:
        Exit code (0 = success, 1 = error)
    """
    try:
        config = load_config(config_path)
    except (FileNotFoundError, ConfigError) as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1

    setup_logging(config.log_file, log_level or config.log_level)
    logger = logging.getLogger(__name__)

    try:
        scene = load_scene(scene_file)
        result = scene.route(config)
    except (FileNotFoundError, SceneError) as e:
        logger.error(str(e))
        print(f"❌ {e}", file=sys.stderr)
        return 1

    print_route_summary(result)

    try:
        if output_format == 'csv':
            text = export_paths_to_csv(result, output)
        else:
            text = export_to_json(result, output)
    except ExporterError as e:
        logger.error(f"Export failed: {e}")
        print(f"❌ {e}", file=sys.stderr)
        return 1

    if output:
        print(f"📄 Routes saved to: {output}", file=sys.stderr)
    else:
        print(text)

    unroutable = [c['id'] for c in result['connectors'] if not c.get('routable', True)]
    if unroutable:
        logger.warning(f"Unroutable connectors (stale paths kept): {', '.join(unroutable)}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the connector-router CLI"""
    parser = setup_argument_parser()
    args = parser.parse_args(argv)

    if args.command == 'init':
        return run_init_command(force=args.force, path=args.path)

    return run_route_command(
        args.scene_file,
        config_path=args.config,
        output_format=args.format,
        output=args.output,
        log_level=args.log_level,
    )


if __name__ == '__main__':
    sys.exit(main())
