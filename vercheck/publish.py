from __future__ import annotations

import os
import datetime
import logging
import subprocess
from typing import Optional, TYPE_CHECKING

from .cmd import git_add_files, git_commit, git_config_get, git_push, run_cmd
from .errors import PublishError
from .tools import utcnow
from .typing import Change, PathLike

if TYPE_CHECKING:
  from .context import Context
  del Context

logger = logging.getLogger(__name__)

COMMIT_TRAILER = 'This commit triggers automatic COPR rebuild with latest versions.'

def build_commit_message(
  old_nginx: Optional[str], new_nginx: str,
  old_nchan: Optional[str], new_nchan: str,
  *,
  now: Optional[datetime.datetime] = None,
) -> str:
  changes = [c for c in (
    Change('nginx', old_nginx, new_nginx),
    Change('nchan', old_nchan, new_nchan),
  ) if c.changed]

  if changes:
    lines = [
      'Auto-update versions: ' + ', '.join(c.name for c in changes),
      '',
    ]
    lines.extend(str(c) for c in changes)
  else:
    lines = ['Force update versions.json']

  if now is None:
    now = utcnow()
  lines.extend([
    '',
    COMMIT_TRAILER,
    f'Generated by vercheck on {now:%Y-%m-%d %H:%M:%S} UTC',
  ])
  return '\n'.join(lines)

def ensure_git_identity(repodir: PathLike, name: str, email: str) -> None:
  # CI checkouts usually come without one
  if git_config_get('user.name', cwd=repodir) is not None:
    return
  logger.info('setting git identity to %s <%s>', name, email)
  run_cmd(['git', 'config', 'user.name', name], cwd=repodir)
  run_cmd(['git', 'config', 'user.email', email], cwd=repodir)

def publish(
  ctx: Context,
  old_nginx: Optional[str], new_nginx: str,
  old_nchan: Optional[str], new_nchan: str,
) -> None:
  msg = build_commit_message(old_nginx, new_nginx, old_nchan, new_nchan)
  repodir = ctx.repodir

  try:
    ensure_git_identity(repodir, ctx.git_user_name, ctx.git_user_email)
    git_add_files(os.path.relpath(ctx.versions_file, repodir), cwd=repodir)
    git_commit(msg, cwd=repodir)
    logger.info('pushing to %s/%s', ctx.git_remote, ctx.git_branch)
    git_push(ctx.git_remote, ctx.git_branch, cwd=repodir)
  except subprocess.CalledProcessError as e:
    details = (e.stderr or e.output or '').strip()
    raise PublishError(f'{" ".join(map(str, e.cmd))} failed: {details}') from e
  except OSError as e:
    raise PublishError(f'failed to run git in {repodir}: {e}') from e
