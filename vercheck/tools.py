from __future__ import annotations

import datetime
from pathlib import Path
from typing import Dict, Any, Optional

import tomllib

from .const import TIMESTAMP_FMT
from .errors import ConfigError
from .typing import PathLike

def read_config(config_file: PathLike) -> Dict[str, Any]:
  path = Path(config_file).expanduser()
  try:
    with open(path, 'rb') as f:
      return tomllib.load(f)
  except FileNotFoundError as e:
    raise ConfigError(f'config file {path} not found') from e
  except tomllib.TOMLDecodeError as e:
    raise ConfigError(f'config file {path} is not valid TOML: {e}') from e

def utcnow() -> datetime.datetime:
  return datetime.datetime.now(datetime.timezone.utc)

def format_timestamp(dt: Optional[datetime.datetime] = None) -> str:
  if dt is None:
    dt = utcnow()
  elif dt.tzinfo is not None:
    dt = dt.astimezone(datetime.timezone.utc)
  return dt.strftime(TIMESTAMP_FMT)
