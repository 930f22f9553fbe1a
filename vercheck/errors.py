from __future__ import annotations

class VercheckError(Exception):
  pass

class ConfigError(VercheckError):
  pass

class PublishError(VercheckError):
  '''writing, committing or pushing the versions file failed'''
