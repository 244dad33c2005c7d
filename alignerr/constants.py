APP_NAME = 'alignerr'
USER_CONFIG = 'config.yml'

DEFAULT_BASE_PATH = '~/Documents/projects/alignerr'
BASE_PATH_ENV = 'ALIGNERR_BASE_PATH'
SOURCE_PATH_ENV = 'ALIGNERR_SOURCE_PATH'

SUBMISSIONS_DIRECTORY = 'submissions'
SUBMISSION_META_FILE = 'meta.json'
ARCHIVE_EXTENSION = '.tar'
GITIGNORE_FILE = '.gitignore'
SCRATCH_PREFIX = '.scratch-'

# Compatibility markers: the value is embedded in the filename
HASH_MARKER_PREFIX = 'initial-hash.'
UUID_MARKER_PREFIX = 'uuid.'

DIFF_SUFFIX = '_final.diff'
