from __future__ import annotations

import logging
import re
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Callable, List, Optional, Sequence, TYPE_CHECKING

import requests

from . import const
from .cmd import run_cmd

if TYPE_CHECKING:
  from .context import Context
  del Context

logger = logging.getLogger(__name__)

UserAgent = 'vercheck/0.1 (nginx and nchan version checker for COPR builds)'

s = requests.Session()
s.headers['User-Agent'] = UserAgent
s.headers['Accept'] = 'application/vnd.github+json'

CommitStrategy = Callable[['Context'], Optional[str]]

_hash_re = re.compile(r'[0-9a-f]{7,64}')
_version_re = re.compile(r'[0-9][0-9A-Za-z.+~^_]*')

def fetch_nginx_version(ctx: Context) -> str:
  version = _query_dnf(ctx.nginx_package)
  if not version:
    logger.warning(
      'could not query %s version from Fedora repos, using default %s',
      ctx.nginx_package, ctx.default_nginx_version)
    version = ctx.default_nginx_version
  return version

def _query_dnf(package: str) -> Optional[str]:
  if shutil.which('dnf') is None:
    logger.debug('dnf not found')
    return None

  cmd = ['dnf', 'repoquery', '--latest-limit=1', '--qf=%{version}', package]
  try:
    output = run_cmd(cmd, silent=True)
  except (subprocess.CalledProcessError, OSError) as e:
    logger.warning('dnf repoquery for %s failed: %r', package, e)
    return None

  # dnf may print repository loading progress as well
  for line in output.splitlines():
    line = line.strip()
    if _version_re.fullmatch(line):
      return line
  return None

def short_hash(value: Optional[str]) -> Optional[str]:
  '''Return the abbreviated form of a commit id, or None if it isn't one'''
  if not value:
    return None
  value = value.strip().lower()
  if not _hash_re.fullmatch(value):
    return None
  return value[:const.SHORT_HASH_LEN]

def from_github_api(ctx: Context) -> Optional[str]:
  headers = {}
  if ctx.github_token:
    headers['Authorization'] = f'Bearer {ctx.github_token}'

  url = ctx.nchan_api_url
  try:
    r = s.get(url, headers=headers, timeout=ctx.http_timeout)
    r.raise_for_status()
    info = r.json()
  except (requests.RequestException, ValueError) as e:
    logger.warning('failed to get nchan commit from %s: %r', url, e)
    return None

  if not isinstance(info, dict) or not isinstance(info.get('sha'), str):
    logger.warning('unexpected response from %s', url)
    return None
  return info['sha']

def from_cached_clone(ctx: Context) -> Optional[str]:
  clonedir = ctx.nchan_cache_dir / const.NCHAN_CACHE_NAME
  if not clonedir.is_dir():
    return None

  branch = ctx.nchan_branch
  try:
    run_cmd(['git', 'fetch', 'origin', branch], cwd=clonedir, silent=True)
  except (subprocess.CalledProcessError, OSError) as e:
    # a stale tip is still better than nothing
    logger.warning('git fetch in %s failed: %r', clonedir, e)

  try:
    out = run_cmd(
      ['git', 'rev-parse', f'--short={const.SHORT_HASH_LEN}', f'origin/{branch}'],
      cwd = clonedir, silent = True,
    )
  except (subprocess.CalledProcessError, OSError) as e:
    logger.warning('git rev-parse in %s failed: %r', clonedir, e)
    return None
  return out.strip()

def from_shallow_clone(ctx: Context) -> Optional[str]:
  with tempfile.TemporaryDirectory(prefix='vercheck-') as tmpdir:
    clonedir = Path(tmpdir) / 'nchan-temp'
    try:
      run_cmd([
        'git', 'clone', '--depth=1', '--branch', ctx.nchan_branch,
        ctx.nchan_repo_url, clonedir,
      ], silent=True)
      out = run_cmd(['git', 'rev-parse', 'HEAD'], cwd=clonedir, silent=True)
    except (subprocess.CalledProcessError, OSError) as e:
      logger.warning('cloning %s failed: %r', ctx.nchan_repo_url, e)
      return None
  return out.strip()

NCHAN_STRATEGIES: List[CommitStrategy] = [
  from_github_api,
  from_cached_clone,
  from_shallow_clone,
]

def fetch_nchan_commit(
  ctx: Context,
  strategies: Sequence[CommitStrategy] = NCHAN_STRATEGIES,
) -> str:
  for strategy in strategies:
    name = getattr(strategy, '__name__', repr(strategy))
    commit = short_hash(strategy(ctx))
    if commit:
      logger.debug('got nchan commit %s via %s', commit, name)
      return commit
    logger.info('%s gave no nchan commit', name)

  logger.warning('all lookups of nchan commit failed')
  return const.UNKNOWN_COMMIT
