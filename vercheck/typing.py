from __future__ import annotations

import dataclasses
from pathlib import Path
from typing import NamedTuple, Optional, Sequence, Union

Cmd = Sequence[Union[str, Path]]
PathLike = Union[str, Path]

@dataclasses.dataclass(frozen=True)
class VersionRecord:
  nginx_version: Optional[str] = None
  nginx_source: Optional[str] = None
  nginx_last_checked: Optional[str] = None
  nchan_version: Optional[str] = None
  nchan_commit: Optional[str] = None
  nchan_last_checked: Optional[str] = None
  last_update: Optional[str] = None

  def is_empty(self) -> bool:
    return all(v is None for v in dataclasses.astuple(self))

class Change(NamedTuple):
  name: str
  old: Optional[str]
  new: str

  @property
  def changed(self) -> bool:
    # an unset old value never equals a fetched one
    return (self.old or '') != self.new

  def __str__(self) -> str:
    return f'{self.name} {self.old or ""} -> {self.new}'
