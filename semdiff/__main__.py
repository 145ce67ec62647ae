"""
Main entry point for semdiff.

Runs the analysis for one project over a file of exported sessions and
writes the results as JSON.
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from semdiff.analysis.project import ProjectAnalysis
from semdiff.components.config import Config, ConfigManager, load_project_config, read_data_file
from semdiff.schemas.models import Session

LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
LEVEL_ALIASES = {'WARN': 'WARNING', 'FATAL': 'CRITICAL'}


def setup_logging(level: str = 'INFO') -> None:
    """
    Set up logging.

    Args:
        level: Logging level
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stderr)
        ]
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(description='Semantic differential analysis')

    parser.add_argument(
        '--project',
        required=True,
        help='Project configuration file (.json, .yaml or .yml)'
    )

    parser.add_argument(
        '--sessions',
        required=True,
        help='Sessions file (.json, .yaml or .yml) holding a list of sessions'
    )

    parser.add_argument(
        '--config',
        help='Path to runtime configuration file'
    )

    parser.add_argument(
        '--k',
        type=int,
        help='Number of clusters'
    )

    parser.add_argument(
        '--max-iterations',
        type=int,
        help='Maximum k-means iterations'
    )

    parser.add_argument(
        '--seed',
        type=int,
        help='Seed for cluster initialization'
    )

    parser.add_argument(
        '--log-level',
        choices=LOG_LEVELS,
        help='Logging level (defaults to the configured logging.level)'
    )

    parser.add_argument(
        '--output',
        help='Write results to this file instead of stdout'
    )

    return parser.parse_args(argv)


def resolve_log_level(cli_level: Optional[str], config: Config) -> str:
    """
    Pick the logging level: the command line wins over configuration.

    Args:
        cli_level: Level given with --log-level, or None
        config: Runtime configuration

    Returns:
        One of LOG_LEVELS; unknown configured names fall back to WARNING
    """
    if cli_level:
        return cli_level

    level = str(config.get('logging.level', 'warn')).upper()
    level = LEVEL_ALIASES.get(level, level)
    return level if level in LOG_LEVELS else 'WARNING'


def load_sessions(filepath: str) -> List[Session]:
    """
    Load sessions from a file.

    Accepts a list of sessions or a mapping of session id to session, the
    shape the document store exports.

    Args:
        filepath: Path to the sessions file

    Returns:
        List of sessions
    """
    data = read_data_file(filepath) or []
    if isinstance(data, dict):
        data = list(data.values())
    return [Session.model_validate(entry) for entry in data]


def main(argv: Optional[List[str]] = None) -> None:
    """
    Main entry point.
    """
    args = parse_args(argv)

    overrides = {}
    if args.config:
        overrides.update(read_data_file(args.config))
    if args.seed is not None:
        overrides.setdefault('clustering', {})['seed'] = args.seed

    config = ConfigManager.get_config(overrides)
    setup_logging(resolve_log_level(args.log_level, config))

    project = load_project_config(args.project, config)
    sessions = load_sessions(args.sessions)

    analysis = ProjectAnalysis(project, sessions, config)
    result = analysis.to_dict(k=args.k, max_iterations=args.max_iterations)

    if args.output:
        with open(args.output, 'w') as f:
            json.dump(result, f, indent=2)
    else:
        json.dump(result, sys.stdout, indent=2)
        sys.stdout.write('\n')


if __name__ == '__main__':
    main()
