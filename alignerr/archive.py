"""Create and extract the filtered snapshot of a source directory"""

import os
import logging
import tarfile

import pathspec

from .constants import ARCHIVE_EXTENSION, GITIGNORE_FILE, \
                       HASH_MARKER_PREFIX, UUID_MARKER_PREFIX, \
                       SUBMISSION_META_FILE
from .exceptions import ArchiveError, MissingStateError

logger = logging.getLogger(__name__)


class IgnoreRules(object):
    """gitignore-style patterns, matched against paths relative to the
    source folder"""

    def __init__(self, lines=()):
        self.spec = pathspec.GitIgnoreSpec.from_lines(lines)

    @classmethod
    def from_directory(cls, source_path):
        """
        Load `.gitignore' from `source_path'. A missing file means no
        rules.
        """

        gitignore_path = os.path.join(source_path, GITIGNORE_FILE)

        try:
            with open(gitignore_path) as gitignore:
                lines = gitignore.read().splitlines()
        except FileNotFoundError:
            logger.info('No %s found in %s', GITIGNORE_FILE, source_path)
            return cls()

        logger.info('Loaded %s patterns from %s', GITIGNORE_FILE, source_path)
        return cls(lines)

    def ignores(self, relative_path, is_dir=False):
        # Directory-only patterns like `node_modules/' need the slash
        if is_dir and not relative_path.endswith('/'):
            relative_path += '/'

        return self.spec.match_file(relative_path)


def create_archive(source_path, tar_path, rules=None):
    """
    Write an uncompressed tar of `source_path' to `tar_path'. Members
    are stored as <folder>/..., where <folder> is the base name of
    `source_path', and anything matched by `rules' is left out.
    """

    if rules is None:
        rules = IgnoreRules()

    source_path = os.path.normpath(os.path.abspath(source_path))
    folder = os.path.basename(source_path)

    if not os.path.isdir(source_path):
        raise ArchiveError('Failed to create tar file: source directory {} '
                           'does not exist'.format(source_path))

    def member_filter(tarinfo):
        if tarinfo.name == folder:
            return tarinfo

        relative_path = tarinfo.name[len(folder) + 1:]
        if rules.ignores(relative_path, is_dir=tarinfo.isdir()):
            logger.debug('ignoring %s', relative_path)
            return None

        return tarinfo

    try:
        with tarfile.open(tar_path, 'w') as archive:
            archive.add(source_path, arcname=folder, filter=member_filter)
    except (tarfile.TarError, OSError) as err:
        raise ArchiveError('Failed to create tar file: {}'.format(err))

    return tar_path


def _check_members(archive, dest_dir):
    """Refuse members which would land outside dest_dir"""

    real_dest = os.path.realpath(dest_dir)

    for member in archive.getmembers():
        target = os.path.realpath(os.path.join(dest_dir, member.name))
        if target != real_dest and \
                not target.startswith(real_dest + os.sep):
            raise ArchiveError('Failed to extract tar file: unsafe member '
                               '`{}\''.format(member.name))


def _is_submission_file(name, tar_name):
    return name == tar_name or name.startswith(HASH_MARKER_PREFIX) \
        or name.startswith(UUID_MARKER_PREFIX) \
        or name == SUBMISSION_META_FILE


def extract_archive(tar_path, dest_dir):
    """
    Extract `tar_path' into `dest_dir' and return the path of the
    extracted content directory.
    """

    try:
        with tarfile.open(tar_path) as archive:
            if hasattr(tarfile, 'tar_filter'):
                # Link targets are kept as archived, absolute ones included
                archive.extractall(dest_dir, filter='tar')
            else:
                _check_members(archive, dest_dir)
                archive.extractall(dest_dir)
    except (tarfile.TarError, OSError) as err:
        raise ArchiveError('Failed to extract tar file: {}'.format(err))

    tar_name = os.path.basename(tar_path)

    for name in sorted(os.listdir(dest_dir)):
        if _is_submission_file(name, tar_name):
            continue

        full_path = os.path.join(dest_dir, name)
        if os.path.isdir(full_path):
            return full_path

    raise ArchiveError('Failed to extract tar file: Could not find extracted '
                       'directory')


def find_archive(submission_dir):
    """Return the path of the snapshot archive in `submission_dir'."""

    archives = sorted(name for name in os.listdir(submission_dir)
                      if name.endswith(ARCHIVE_EXTENSION))

    if not archives:
        raise MissingStateError('No tar file found in submission directory. '
                                'Please run --init first.')

    if len(archives) > 1:
        logger.warning('Found %d archives in %s, using %s', len(archives),
                       submission_dir, archives[0])

    return os.path.join(submission_dir, archives[0])


def remove_archives(submission_dir):
    for name in os.listdir(submission_dir):
        if name.endswith(ARCHIVE_EXTENSION):
            os.remove(os.path.join(submission_dir, name))
