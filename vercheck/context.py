from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

from . import const
from .errors import ConfigError
from .typing import PathLike

def _get_str(
  section: Dict[str, Any], name: str, key: str, default: Optional[str] = None,
) -> Optional[str]:
  value = section.get(key, default)
  if value is not None and not isinstance(value, str):
    raise ConfigError(f'{name}.{key} must be a string, not {type(value).__name__}')
  return value

def _get_section(config: Dict[str, Any], name: str) -> Dict[str, Any]:
  section = config.get(name, {})
  if not isinstance(section, dict):
    raise ConfigError(f'[{name}] must be a table')
  return section

class Context:
  '''Everything one run needs to know about paths, upstreams and git.

  Built from the (optional) TOML config; values not given there fall back to
  the defaults in :mod:`vercheck.const`.
  '''

  def __init__(
    self,
    config: Dict[str, Any],
    *,
    versions_file: Optional[PathLike] = None,
  ) -> None:
    versions = _get_section(config, 'versions')
    nginx = _get_section(config, 'nginx')
    nchan = _get_section(config, 'nchan')
    git = _get_section(config, 'git')
    github = _get_section(config, 'github')
    log = _get_section(config, 'log')

    path = (versions_file or _get_str(versions, 'versions', 'file')
            or const.VERSIONS_FILE)
    self.versions_file = Path(path).expanduser().absolute()

    self.nginx_package: str = _get_str(
      nginx, 'nginx', 'package', const.NGINX_PACKAGE)
    self.default_nginx_version: str = _get_str(
      nginx, 'nginx', 'default_version', const.DEFAULT_NGINX_VERSION)

    self.nchan_branch: str = _get_str(
      nchan, 'nchan', 'branch', const.NCHAN_BRANCH)
    self.nchan_repo_url: str = _get_str(
      nchan, 'nchan', 'repo_url', const.NCHAN_REPO_URL)
    api_url = _get_str(nchan, 'nchan', 'api_url', const.NCHAN_API_URL)
    try:
      self.nchan_api_url: str = api_url.format(branch=self.nchan_branch)
    except (KeyError, IndexError, ValueError) as e:
      raise ConfigError(
        f'nchan.api_url may only use the {{branch}} placeholder: {e!r}') from e
    cache_dir = _get_str(nchan, 'nchan', 'cache_dir')
    if cache_dir:
      self.nchan_cache_dir = Path(cache_dir).expanduser()
    else:
      self.nchan_cache_dir = self.versions_file.parent
    self.nchan_base_version: str = str(
      nchan.get('base_version', const.NCHAN_BASE_VERSION))
    try:
      self.nchan_distance = int(nchan.get('distance', const.NCHAN_DISTANCE))
    except (TypeError, ValueError) as e:
      raise ConfigError(f'nchan.distance must be an integer: {e}') from e
    self.nchan_template_configured = (
      'base_version' in nchan or 'distance' in nchan)

    repodir = _get_str(git, 'git', 'repodir')
    if repodir:
      self.repodir = Path(repodir).expanduser()
    else:
      self.repodir = self.versions_file.parent
    self.git_remote: str = _get_str(git, 'git', 'remote', const.GIT_REMOTE)
    self.git_branch: str = _get_str(git, 'git', 'branch', const.GIT_BRANCH)
    self.git_user_name: str = _get_str(
      git, 'git', 'user_name', const.GIT_USER_NAME)
    self.git_user_email: str = _get_str(
      git, 'git', 'user_email', const.GIT_USER_EMAIL)

    self.github_token: Optional[str] = (
      _get_str(github, 'github', 'token') or os.environ.get('GITHUB_TOKEN') or None)
    try:
      self.http_timeout = float(github.get('timeout', const.HTTP_TIMEOUT))
    except (TypeError, ValueError) as e:
      raise ConfigError(f'github.timeout must be a number: {e}') from e

    event_file = _get_str(log, 'log', 'event_file')
    self.event_file: Optional[Path] = (
      Path(event_file).expanduser() if event_file else None)

  def __repr__(self) -> str:
    return f'<Context: {self.versions_file}>'
