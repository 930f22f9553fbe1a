from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from . import const
from .checker import VersionChecker
from .context import Context
from .errors import VercheckError
from .slogconf import close_event_log, setup_event_log
from .tools import read_config

logger = logging.getLogger(__name__)

def build_parser() -> argparse.ArgumentParser:
  parser = argparse.ArgumentParser(
    prog = 'check-versions',
    description = 'Check for new versions of nginx and nchan, '
    'optionally committing and pushing the versions file.',
    epilog = 'Exits with 1 when versions changed (or --force is given), '
    '0 when nothing changed, and 2 on failure.',
  )
  parser.set_defaults(mode=const.MODE_CHECK)
  parser.add_argument('--check-only', dest='mode', action='store_const',
                      const=const.MODE_CHECK,
                      help="check for updates but don't modify anything (default)")
  parser.add_argument('--update', dest='mode', action='store_const',
                      const=const.MODE_UPDATE,
                      help='update the versions file and commit+push if changed')
  parser.add_argument('--dry-run', action='store_true',
                      help='show what would be done without making changes')
  parser.add_argument('--force', action='store_true',
                      help="force update even if versions haven't changed")
  parser.add_argument('--config', metavar='FILE',
                      help='TOML config file')
  parser.add_argument('--versions-file', metavar='FILE',
                      help='versions file to read and update '
                      f'(default: {const.VERSIONS_FILE})')
  parser.add_argument('--loglevel', default='info',
                      choices=['debug', 'info', 'warn', 'error'],
                      help='log level')
  return parser

def setup_logging(loglevel: str) -> None:
  from tornado.log import enable_pretty_logging
  from tornado.options import options

  options.logging = loglevel
  enable_pretty_logging(options=options, logger=logging.getLogger())

def main(argv: Optional[List[str]] = None) -> int:
  parser = build_parser()
  args = parser.parse_args(argv)
  setup_logging(args.loglevel)

  try:
    config = read_config(args.config) if args.config else {}
    ctx = Context(config, versions_file=args.versions_file)
    setup_event_log(ctx.event_file)
  except VercheckError as e:
    logger.error('%s', e)
    return const.EXIT_FAILURE

  checker = VersionChecker(ctx)
  try:
    result = checker.run(args.mode, dry_run=args.dry_run, force=args.force)
  except VercheckError as e:
    logger.error('%s', e)
    return const.EXIT_FAILURE
  finally:
    close_event_log()

  return result.exit_code
