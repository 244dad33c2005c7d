"""Path helpers shared by the init and finalize phases"""

import os

from .constants import ARCHIVE_EXTENSION, SUBMISSIONS_DIRECTORY, DIFF_SUFFIX
from .utils import current_date


def home_directory():
    return os.environ.get('HOME') or os.environ.get('USERPROFILE') \
        or os.path.expanduser('~')


def expand_home_path(path):
    """
    Expand a leading `~' or `~/' to the current user's home directory.
    Any other path, including `~otheruser/...', is returned unchanged.
    """

    if path == '~':
        return home_directory()
    if path.startswith('~/'):
        return os.path.join(home_directory(), path[2:])
    return path


def resolve_source_path(provided_source=None, config=None):
    """
    Find the source directory to archive and diff. Priority: the path
    given on the command line, then the configured default, then the
    current working directory.
    """

    if provided_source:
        return expand_home_path(provided_source)

    if config is not None and config.source_path:
        return expand_home_path(config.source_path)

    return os.getcwd()


def filename_from_path(path):
    """
    Derive an archive name from the base name of `path', so that
    /a/b/my-project and /a/b/my-project/ both become my-project.tar
    """

    folder = os.path.basename(os.path.normpath(path))
    return folder + ARCHIVE_EXTENSION


def ensure_archive_extension(filename):
    if filename.endswith(ARCHIVE_EXTENSION):
        return filename
    return filename + ARCHIVE_EXTENSION


def submission_directory(base_path, date=None):
    """Return <base>/submissions/<date>, defaulting to today."""

    if date is None:
        date = current_date()

    return os.path.join(expand_home_path(base_path), SUBMISSIONS_DIRECTORY,
                        date)


def diff_filename(task_id):
    return task_id + DIFF_SUFFIX
