import functools

import pytest

from vercheck import main as main_mod
from vercheck import slogconf
from vercheck.checker import VersionChecker
from vercheck.errors import PublishError
from vercheck.main import build_parser, main
from vercheck.record import write_record

@pytest.mark.parametrize('argv, mode', [
  ([], 'check'),
  (['--update'], 'update'),
  (['--check-only'], 'check'),
  (['--update', '--check-only'], 'check'),
  (['--check-only', '--update', '--dry-run'], 'update'),
])
def test_mode_flags(argv, mode):
  args = build_parser().parse_args(argv)
  assert args.mode == mode

def test_help(capsys):
  with pytest.raises(SystemExit) as excinfo:
    main(['--help'])
  assert excinfo.value.code == 0
  out = capsys.readouterr().out
  for flag in ['--check-only', '--update', '--dry-run', '--force']:
    assert flag in out

def test_unknown_option():
  with pytest.raises(SystemExit) as excinfo:
    main(['--frobnicate'])
  assert excinfo.value.code == 2

@pytest.fixture
def fake_checker(monkeypatch):
  published = []

  def publisher(ctx, *args):
    published.append(args)

  def factory(publisher=publisher):
    monkeypatch.setattr(main_mod, 'VersionChecker', functools.partial(
      VersionChecker,
      nginx_source = lambda ctx: '1.28.0',
      nchan_source = lambda ctx: 'abcdef1',
      publisher = publisher,
    ))
    return published

  return factory

def test_changed(tmp_path, fake_checker):
  fake_checker()
  path = tmp_path / 'versions.json'
  assert main(['--versions-file', str(path)]) == 1
  assert not path.exists()

def test_unchanged(tmp_path, fake_checker):
  published = fake_checker()
  path = tmp_path / 'versions.json'
  write_record(path, '1.28.0', 'abcdef1')
  assert main(['--update', '--versions-file', str(path)]) == 0
  assert published == []

def test_update(tmp_path, fake_checker):
  published = fake_checker()
  path = tmp_path / 'versions.json'
  assert main(['--update', '--versions-file', str(path), '--loglevel', 'debug']) == 1
  assert path.exists()
  assert published == [(None, '1.28.0', None, 'abcdef1')]

def test_force_dry_run(tmp_path, fake_checker):
  published = fake_checker()
  path = tmp_path / 'versions.json'
  write_record(path, '1.28.0', 'abcdef1')
  before = path.read_text()
  assert main(['--update', '--force', '--dry-run', '--versions-file', str(path)]) == 1
  assert published == []
  assert path.read_text() == before

def test_publish_failure(tmp_path, fake_checker):
  def publisher(ctx, *args):
    raise PublishError('git push origin master failed: rejected')
  fake_checker(publisher)
  assert main(['--update', '--versions-file', str(tmp_path / 'v.json')]) == 2

def test_missing_config(tmp_path, fake_checker):
  fake_checker()
  assert main(['--config', str(tmp_path / 'nope.toml')]) == 2

def test_config_file(tmp_path, fake_checker):
  fake_checker()
  path = tmp_path / 'state.json'
  events = tmp_path / 'events.json'
  config = tmp_path / 'vercheck.toml'
  config.write_text(f'''\
[versions]
file = "{path}"

[log]
event_file = "{events}"
''')
  assert main(['--update', '--config', str(config)]) == 1
  assert path.exists()
  assert '"event": "version-check"' in events.read_text()

def test_event_file_not_creatable(tmp_path, fake_checker):
  published = fake_checker()
  blocker = tmp_path / 'blocker'
  blocker.write_text('')
  path = tmp_path / 'state.json'
  config = tmp_path / 'vercheck.toml'
  config.write_text(f'''\
[versions]
file = "{path}"

[log]
event_file = "{blocker}/sub/events.json"
''')
  assert main(['--update', '--config', str(config)]) == 2
  assert not path.exists()
  assert published == []

def test_event_log_closed(tmp_path, fake_checker):
  fake_checker()
  events = tmp_path / 'events.json'
  config = tmp_path / 'vercheck.toml'
  config.write_text(f'''\
[versions]
file = "{tmp_path / 'state.json'}"

[log]
event_file = "{events}"
''')
  assert main(['--config', str(config)]) == 1
  assert slogconf._event_fh is None
