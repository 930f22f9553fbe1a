from __future__ import annotations

import os
import json
import logging
import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from . import const
from .errors import PublishError
from .tools import format_timestamp
from .typing import VersionRecord

logger = logging.getLogger(__name__)

def display_version(
  commit: str,
  base_version: str = const.NCHAN_BASE_VERSION,
  distance: int = const.NCHAN_DISTANCE,
) -> str:
  return f'{base_version}-{distance}-g{commit}'

def _commit_from_display_version(version: Optional[str]) -> Optional[str]:
  # 1.3.7-2-gabcdef1 -> abcdef1
  if not version:
    return None
  parts = version.split('-')
  if len(parts) < 3:
    return None
  return parts[2][1:const.SHORT_HASH_LEN + 1] or None

def _get_str(d: Any, key: str) -> Optional[str]:
  if not isinstance(d, dict):
    return None
  value = d.get(key)
  if value is None:
    return None
  return str(value)

def record_from_dict(data: Dict[str, Any]) -> VersionRecord:
  nginx = data.get('nginx')
  nchan = data.get('nchan')

  commit = _get_str(nchan, 'commit')
  if not commit:
    # written before the commit field existed
    commit = _commit_from_display_version(_get_str(nchan, 'version'))

  return VersionRecord(
    nginx_version = _get_str(nginx, 'version'),
    nginx_source = _get_str(nginx, 'source'),
    nginx_last_checked = _get_str(nginx, 'last_checked'),
    nchan_version = _get_str(nchan, 'version'),
    nchan_commit = commit,
    nchan_last_checked = _get_str(nchan, 'last_checked'),
    last_update = _get_str(data, 'last_update'),
  )

def record_to_dict(record: VersionRecord) -> Dict[str, Any]:
  return {
    'nginx': {
      'version': record.nginx_version,
      'source': record.nginx_source,
      'last_checked': record.nginx_last_checked,
    },
    'nchan': {
      'version': record.nchan_version,
      'commit': record.nchan_commit,
      'last_checked': record.nchan_last_checked,
    },
    'last_update': record.last_update,
  }

def read_record(path: Path) -> VersionRecord:
  try:
    with open(path, encoding='utf-8') as f:
      data = json.load(f)
  except FileNotFoundError:
    logger.info('%s does not exist yet', path)
    return VersionRecord()
  except (OSError, ValueError) as e:
    logger.warning('failed to read %s, treating it as empty: %s', path, e)
    return VersionRecord()

  if not isinstance(data, dict):
    logger.warning('%s does not contain a JSON object, treating it as empty', path)
    return VersionRecord()

  return record_from_dict(data)

def write_record(
  path: Path,
  nginx_version: str,
  nchan_commit: str,
  *,
  base_version: str = const.NCHAN_BASE_VERSION,
  distance: int = const.NCHAN_DISTANCE,
  now: Optional[datetime.datetime] = None,
) -> VersionRecord:
  ts = format_timestamp(now)
  record = VersionRecord(
    nginx_version = nginx_version,
    nginx_source = const.NGINX_SOURCE,
    nginx_last_checked = ts,
    nchan_version = display_version(nchan_commit, base_version, distance),
    nchan_commit = nchan_commit,
    nchan_last_checked = ts,
    last_update = ts,
  )
  text = json.dumps(record_to_dict(record), indent=2, ensure_ascii=False) + '\n'

  tmp = path.with_name(path.name + '.tmp')
  try:
    with open(tmp, 'w', encoding='utf-8') as f:
      f.write(text)
    os.replace(tmp, path)
  except OSError as e:
    raise PublishError(f'failed to write {path}: {e}') from e

  logger.debug('wrote %s: %r', path, record)
  return record
