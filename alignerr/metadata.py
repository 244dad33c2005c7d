import os
import json
import logging

from .constants import SUBMISSION_META_FILE, HASH_MARKER_PREFIX, \
                       UUID_MARKER_PREFIX
from .exceptions import MissingStateError, SubmissionError
from .utils import ConfigDictMixin, current_iso8601

logger = logging.getLogger(__name__)

RUN_INIT_FIRST = 'Please run the init command first (--init).'


class SubmissionMetadata(ConfigDictMixin):
    """
    Provenance of one submission directory: the commit the snapshot was
    taken at and the task it belongs to. Stored as meta.json.
    """

    def __init__(self, commit_hash, task_id, archive_name=None,
                 source_path=None, created_at=None):
        self.commit_hash = commit_hash
        self.task_id = task_id
        self.archive_name = archive_name
        self.source_path = source_path
        self.created_at = created_at

    @staticmethod
    def get_path(submission_dir):
        return os.path.join(submission_dir, SUBMISSION_META_FILE)

    @staticmethod
    def marker_paths(submission_dir, commit_hash, task_id):
        return (os.path.join(submission_dir, HASH_MARKER_PREFIX + commit_hash),
                os.path.join(submission_dir, UUID_MARKER_PREFIX + task_id))

    @classmethod
    def exists_in(cls, submission_dir):
        return os.path.isfile(cls.get_path(submission_dir))

    @classmethod
    def load_from_dir(cls, submission_dir):
        """
        Load the metadata written by `init'. Falls back to the
        initial-hash.* and uuid.* markers when meta.json is absent.
        """

        if not os.path.isdir(submission_dir):
            raise MissingStateError('Submission directory not found: {}. {}'
                                    .format(submission_dir, RUN_INIT_FIRST))

        meta_path = cls.get_path(submission_dir)

        try:
            with open(meta_path) as meta_file:
                meta_json = json.load(meta_file)
        except FileNotFoundError:
            logger.debug('no %s in %s, reading markers', SUBMISSION_META_FILE,
                         submission_dir)
            return cls.load_from_markers(submission_dir)
        except ValueError as err:
            raise SubmissionError('Corrupt submission metadata {}: {}'
                                  .format(meta_path, err))

        try:
            return cls.from_config_dict(meta_json)
        except (ValueError, TypeError) as err:
            raise SubmissionError('Invalid submission metadata {}: {}'
                                  .format(meta_path, err))

    @classmethod
    def load_from_markers(cls, submission_dir):
        files = os.listdir(submission_dir)

        commit_hash = _marker_value(files, HASH_MARKER_PREFIX,
                                    'Commit hash file')
        task_id = _marker_value(files, UUID_MARKER_PREFIX, 'UUID file')

        return cls(commit_hash=commit_hash, task_id=task_id)

    def write(self, submission_dir):
        """Write meta.json and the compatibility marker files."""

        if self.created_at is None:
            self.created_at = current_iso8601()

        with open(self.get_path(submission_dir), 'w') as meta_file:
            json.dump(self.to_config_dict(), meta_file, sort_keys=True,
                      indent=2, separators=(',', ': '))

        hash_marker, uuid_marker = self.marker_paths(
            submission_dir, self.commit_hash, self.task_id)

        with open(hash_marker, 'w') as marker:
            marker.write(self.commit_hash)
        with open(uuid_marker, 'w') as marker:
            marker.write(self.task_id)

        return hash_marker, uuid_marker


def _marker_value(files, prefix, description):
    matches = [name for name in files if name.startswith(prefix)]

    if not matches:
        raise MissingStateError('{} not found. {}'
                                .format(description, RUN_INIT_FIRST))
    if len(matches) > 1:
        raise SubmissionError('Found {} {}* files, expected one. Re-run '
                              'init with --clean.'.format(len(matches),
                                                          prefix))

    return matches[0][len(prefix):]


def remove_markers(submission_dir):
    """Delete stale marker files left by an earlier init."""

    for name in os.listdir(submission_dir):
        if name.startswith(HASH_MARKER_PREFIX) \
                or name.startswith(UUID_MARKER_PREFIX):
            os.remove(os.path.join(submission_dir, name))
