from __future__ import annotations

import os
import logging
import subprocess
import sys
from typing import Optional, Dict, List, Union

from .typing import Cmd, PathLike

logger = logging.getLogger(__name__)

def run_cmd(
  cmd: Cmd, *,
  silent: bool = False,
  cwd: Optional[PathLike] = None,
  env: Optional[Dict[str, str]] = None,
) -> str:
  logger.debug('running %r in %s,%s showing output', cmd,
               cwd or os.getcwd(), ' not' if silent else '')
  p = subprocess.Popen(
    cmd, stdin = subprocess.DEVNULL,
    stdout = subprocess.PIPE, stderr = subprocess.PIPE,
    cwd = cwd, env = env,
  )
  outb, errb = p.communicate()
  outs = outb.decode('utf-8', errors='replace').replace('\r\n', '\n')
  errs = errb.decode('utf-8', errors='replace').replace('\r\n', '\n')
  if not silent and errs:
    sys.stderr.write(errs)

  if p.returncode != 0:
    # set output by keyword to avoid being included in repr()
    raise subprocess.CalledProcessError(
      p.returncode, cmd, output=outs, stderr=errs)
  return outs

def git_config_get(key: str, *, cwd: Optional[PathLike] = None) -> Optional[str]:
  try:
    value = run_cmd(['git', 'config', key], cwd=cwd, silent=True).strip()
  except subprocess.CalledProcessError:
    # git exits with 1 when the key is unset
    return None
  return value or None

def git_add_files(
  files: Union[str, List[str]], *,
  cwd: Optional[PathLike] = None,
) -> None:
  if isinstance(files, str):
    files = [files]
  try:
    run_cmd(['git', 'add', '--'] + files, cwd=cwd)
  except subprocess.CalledProcessError:
    # on error, there may be a partial add
    run_cmd(['git', 'reset', '--'] + files, cwd=cwd)
    raise

def git_commit(msg: str, *, cwd: Optional[PathLike] = None) -> None:
  run_cmd(['git', 'commit', '--no-gpg-sign', '-m', msg], cwd=cwd)

def git_push(
  remote: str, branch: str, *,
  cwd: Optional[PathLike] = None,
) -> None:
  run_cmd(['git', 'push', remote, branch], cwd=cwd)
