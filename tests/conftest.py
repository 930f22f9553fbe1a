import pathlib
import shutil
import subprocess
import sys

import pytest
import structlog

# sys.path does not support `Path`s yet
this_dir = pathlib.Path(__file__).resolve()
sys.path.insert(0, str(this_dir.parents[1]))

from vercheck.context import Context
from vercheck.slogconf import close_event_log, setup_event_log

@pytest.fixture(autouse=True)
def quiet_event_log():
  setup_event_log(None)
  yield
  close_event_log()
  structlog.reset_defaults()

@pytest.fixture
def ctx(tmp_path, monkeypatch):
  monkeypatch.delenv('GITHUB_TOKEN', raising=False)
  return Context({}, versions_file=tmp_path / 'versions.json')

@pytest.fixture
def git(monkeypatch):
  if shutil.which('git') is None:
    pytest.skip('git is not available')

  monkeypatch.setenv('GIT_AUTHOR_NAME', 'Test')
  monkeypatch.setenv('GIT_AUTHOR_EMAIL', 'test@example.com')
  monkeypatch.setenv('GIT_COMMITTER_NAME', 'Test')
  monkeypatch.setenv('GIT_COMMITTER_EMAIL', 'test@example.com')

  def run(*args, cwd):
    return subprocess.run(
      ['git', *args], cwd=cwd, check=True,
      capture_output=True, text=True,
    ).stdout.strip()

  return run

@pytest.fixture
def upstream(tmp_path, git):
  '''a repository with one commit on master; returns (path, commit id)'''
  repo = tmp_path / 'upstream'
  repo.mkdir()
  git('init', '-q', cwd=repo)
  git('symbolic-ref', 'HEAD', 'refs/heads/master', cwd=repo)
  (repo / 'README').write_text('nchan\n')
  git('add', 'README', cwd=repo)
  git('commit', '-q', '--no-gpg-sign', '-m', 'initial', cwd=repo)
  return repo, git('rev-parse', 'HEAD', cwd=repo)
