"""
Command-line argument parser configuration with subcommands
"""

import argparse


def setup_argument_parser() -> argparse.ArgumentParser:
    """
    Configure and return the argument parser with subcommands (init, route)

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog='connector-router',
        description='Route connectors between shapes (straight, curve and orthogonal)',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Initialize configuration
  connector-router init                          # Create ./connector_router.yaml
  connector-router init --force                  # Overwrite existing config
  connector-router init --path ./router.yaml     # Create in custom location

  # Route a scene
  connector-router route scene.yaml                        # Print routed connectors as JSON
  connector-router route scene.yaml --format csv -o out.csv
  connector-router route scene.yaml --config router.yaml --log-level DEBUG
        """
    )

    subparsers = parser.add_subparsers(
        dest='command',
        required=True,
        help='Command to execute'
    )

    # ========================================================================
    # INIT SUBCOMMAND
    # ========================================================================
    init_parser = subparsers.add_parser(
        'init',
        help='Create a new configuration file',
        description='Write the default router configuration to a YAML file'
    )

    init_parser.add_argument(
        '--force', '-f',
        action='store_true',
        help='Overwrite existing configuration file'
    )

    init_parser.add_argument(
        '--path', '-p',
        type=str,
        help='Custom path for config file (default: ./connector_router.yaml)'
    )

    # ========================================================================
    # ROUTE SUBCOMMAND
    # ========================================================================
    route_parser = subparsers.add_parser(
        'route',
        help='Route every connector of a scene',
        description='Load a YAML scene, route its connectors and export the paths'
    )

    route_parser.add_argument(
        'scene_file',
        help='Path to YAML scene file'
    )

    route_parser.add_argument(
        '--config', '-c',
        type=str,
        help='Path to router configuration (optional, will auto-discover)'
    )

    route_parser.add_argument(
        '--format',
        choices=['json', 'csv'],
        default='json',
        help='Output format (default: json)'
    )

    route_parser.add_argument(
        '--output', '-o',
        type=str,
        help='Write the result to this file instead of stdout'
    )

    route_parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default=None,
        help='Set logging level (default: from config, INFO)'
    )

    return parser
