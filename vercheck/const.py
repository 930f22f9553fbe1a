from __future__ import annotations

VERSIONS_FILE = 'versions.json'

NGINX_PACKAGE = 'nginx'
NGINX_SOURCE = 'fedora'
DEFAULT_NGINX_VERSION = '1.28.0'

NCHAN_REPO_URL = 'https://github.com/slact/nchan.git'
NCHAN_API_URL = 'https://api.github.com/repos/slact/nchan/commits/{branch}'
NCHAN_BRANCH = 'master'
NCHAN_CACHE_NAME = 'nchan-master'
# base tag and distance used to build the nchan display version; these do not
# follow upstream history and can be overridden in the config file
NCHAN_BASE_VERSION = '1.3.7'
NCHAN_DISTANCE = 2

UNKNOWN_COMMIT = 'unknown'
SHORT_HASH_LEN = 7

GIT_REMOTE = 'origin'
GIT_BRANCH = 'master'
GIT_USER_NAME = 'Version Checker Bot'
GIT_USER_EMAIL = 'bot@github-actions'

HTTP_TIMEOUT = 30
TIMESTAMP_FMT = '%Y-%m-%dT%H:%M:%SZ'

MODE_CHECK = 'check'
MODE_UPDATE = 'update'

EXIT_UNCHANGED = 0
EXIT_CHANGED = 1
EXIT_FAILURE = 2
