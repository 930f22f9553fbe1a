from __future__ import annotations

import sys
import logging
from typing import Callable, List, NamedTuple, Optional, TextIO

import structlog

from . import const
from .context import Context
from .publish import publish
from .record import read_record, write_record
from .sources import fetch_nginx_version, fetch_nchan_commit
from .tools import format_timestamp
from .typing import Change, VersionRecord

logger = logging.getLogger(__name__)
event_logger = structlog.get_logger(logger_name='version-check')

VersionSource = Callable[[Context], str]
Publisher = Callable[[Context, Optional[str], str, Optional[str], str], None]

class CheckResult(NamedTuple):
  old: VersionRecord
  nginx_version: str
  nchan_commit: str
  forced: bool = False
  published: bool = False

  @property
  def nginx_change(self) -> Change:
    return Change('nginx', self.old.nginx_version, self.nginx_version)

  @property
  def nchan_change(self) -> Change:
    return Change('nchan', self.old.nchan_commit, self.nchan_commit)

  @property
  def changes(self) -> List[Change]:
    return [c for c in (self.nginx_change, self.nchan_change) if c.changed]

  @property
  def changed(self) -> bool:
    return self.forced or bool(self.changes)

  @property
  def exit_code(self) -> int:
    if self.changed:
      return const.EXIT_CHANGED
    return const.EXIT_UNCHANGED

class VersionChecker:
  '''Compare upstream nginx / nchan versions with the recorded ones.

  The fetchers and the publisher are plain callables taking the
  :class:`Context`, so they can be swapped out (e.g. in tests).
  '''

  def __init__(
    self,
    ctx: Context,
    *,
    nginx_source: VersionSource = fetch_nginx_version,
    nchan_source: VersionSource = fetch_nchan_commit,
    publisher: Publisher = publish,
    out: Optional[TextIO] = None,
  ) -> None:
    self.ctx = ctx
    self.nginx_source = nginx_source
    self.nchan_source = nchan_source
    self.publisher = publisher
    self.out = out

  def _print(self, *args: str) -> None:
    print(*args, file=self.out or sys.stdout)

  def check(self, *, force: bool = False) -> CheckResult:
    old = read_record(self.ctx.versions_file)

    self._print('Checking latest nginx version...')
    nginx_version = self.nginx_source(self.ctx)
    self._print(f'Latest nginx version: {nginx_version}')

    self._print('Checking latest nchan version...')
    nchan_commit = self.nchan_source(self.ctx)
    self._print(f'Latest nchan commit: {nchan_commit}')
    self._print()

    return CheckResult(old, nginx_version, nchan_commit, forced=force)

  def run(
    self,
    mode: str = const.MODE_CHECK,
    *,
    dry_run: bool = False,
    force: bool = False,
  ) -> CheckResult:
    if mode not in (const.MODE_CHECK, const.MODE_UPDATE):
      raise ValueError(f'unknown mode: {mode!r}')

    self._print('=== Version Check Script ===')
    self._print(f'Mode: {mode}')
    self._print(f'Checking versions at {format_timestamp()}')
    self._print()

    result = self.check(force=force)
    if force:
      self._print('Force mode enabled - will update regardless of changes')

    if not result.changed:
      self._print('=== No version changes detected ===')
      self._print(f'  nginx: {result.old.nginx_version or ""} (unchanged)')
      self._print(f'  nchan: {result.old.nchan_commit or ""} (unchanged)')
      self._log_event(result, mode, dry_run)
      return result

    self._print('=== Version changes detected ===')
    for change in result.changes:
      self._print(f'  {change.name}: {change.old or ""} -> {change.new}')
    self._print()

    if mode == const.MODE_UPDATE:
      if dry_run:
        self._print(f'DRY RUN: Would update {self.ctx.versions_file.name}')
        self._print('DRY RUN: Would commit with message about version changes')
        self._print(f'DRY RUN: Would push to {self.ctx.git_remote}/{self.ctx.git_branch}')
      else:
        result = self._update(result)
    else:
      self._print('Running in check-only mode - no changes made')
      self._print('Run with --update to apply changes')

    self._log_event(result, mode, dry_run)
    return result

  def _update(self, result: CheckResult) -> CheckResult:
    ctx = self.ctx
    if not ctx.nchan_template_configured:
      logger.warning(
        'nchan display version uses the built-in base %s-%d, '
        'which does not follow upstream history; '
        'set nchan.base_version / nchan.distance to override',
        ctx.nchan_base_version, ctx.nchan_distance)

    self._print(f'Updating {ctx.versions_file.name}...')
    write_record(
      ctx.versions_file, result.nginx_version, result.nchan_commit,
      base_version = ctx.nchan_base_version,
      distance = ctx.nchan_distance,
    )
    self._print(f'{ctx.versions_file.name} updated')

    self._print('Committing and pushing changes...')
    self.publisher(
      ctx,
      result.old.nginx_version, result.nginx_version,
      result.old.nchan_commit, result.nchan_commit,
    )
    self._print('Changes committed and pushed successfully')
    return result._replace(published=True)

  def _log_event(self, result: CheckResult, mode: str, dry_run: bool) -> None:
    event_logger.info(
      'version-check',
      mode = mode,
      dry_run = dry_run,
      forced = result.forced,
      changed = result.changed,
      published = result.published,
      nginx_old = result.old.nginx_version,
      nginx_new = result.nginx_version,
      nchan_old = result.old.nchan_commit,
      nchan_new = result.nchan_commit,
    )
