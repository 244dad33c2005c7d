# -*- coding: utf-8 -*-

"""
The two-phase submission workflow.

`init' snapshots a source directory into today's submission directory
and records the commit it was taken at. `finalize' diffs the source
against that commit and checks the diff still applies to the snapshot.
"""

import os
import shutil
import logging
import tempfile
from collections import namedtuple

from .archive import IgnoreRules, create_archive, extract_archive, \
                     find_archive, remove_archives
from .config import AlignerrConfig
from .constants import SCRATCH_PREFIX
from .exceptions import MissingStateError, SubmissionConflictError, \
                        SubmissionError, PromptError
from .metadata import SubmissionMetadata, remove_markers
from .paths import resolve_source_path, submission_directory, \
                   ensure_archive_extension, home_directory, diff_filename
from .prompts import prompt_for_filename, prompt_for_uuid
from .utils import mkdir_p, rmtree_if_exists
from .vcs import GitVCS, ApplyResult

logger = logging.getLogger(__name__)

InitResult = namedtuple('InitResult', ('submission_dir', 'archive_path',
                                       'source_path', 'commit_hash',
                                       'task_id', 'cleaned'))

FinalizeResult = namedtuple('FinalizeResult', ('submission_dir', 'source_path',
                                               'commit_hash', 'task_id',
                                               'home_diff_path', 'diff_path',
                                               'apply_result'))

SubmissionStatus = namedtuple('SubmissionStatus', ('submission_dir', 'state',
                                                   'metadata'))

STATE_ABSENT = 'absent'
STATE_INITIALIZED = 'initialized'
STATE_FINALIZED = 'finalized'


class SubmissionManager(object):
    """
    Runs init and finalize for the submission directory of one date.
    `vcs' defaults to git; `date' defaults to today.
    """

    def __init__(self, config=None, vcs=None, date=None):
        self.config = config if config is not None else AlignerrConfig()
        self.vcs = vcs if vcs is not None else GitVCS()
        self.date = date

    @property
    def submission_dir(self):
        return submission_directory(self.config.base_path, self.date)

    def resolve_source(self, provided_source=None):
        return resolve_source_path(provided_source, self.config)

    def _existing_metadata(self):
        try:
            return SubmissionMetadata.load_from_dir(self.submission_dir)
        except MissingStateError:
            return None

    def init(self, filename=None, task_id=None, source=None, clean=False):
        """Archive the source tree and record its commit and task id."""

        source_path = self.resolve_source(source)
        filename = ensure_archive_extension(
            prompt_for_filename(filename, source_path))
        task_id = prompt_for_uuid(task_id)

        if os.sep in task_id or '/' in task_id:
            raise PromptError("Task UUID `{}' may not contain path separators"
                              .format(task_id))

        submission_dir = self.submission_dir

        cleaned = False
        if clean:
            try:
                cleaned = rmtree_if_exists(submission_dir)
            except OSError as err:
                raise SubmissionError('Failed to clean {}: {}'
                                      .format(submission_dir, err))
            if cleaned:
                logger.info('Cleaned existing directory %s', submission_dir)
        else:
            existing = self._existing_metadata()
            if existing is not None and existing.task_id != task_id:
                raise SubmissionConflictError(
                    'Submission directory {} already belongs to task {}. '
                    'Finish that task or re-run init with --clean.'
                    .format(submission_dir, existing.task_id))

        try:
            mkdir_p(submission_dir)
            # Re-running init for the same task replaces its snapshot
            remove_archives(submission_dir)
            remove_markers(submission_dir)
            stale_diff = os.path.join(submission_dir, diff_filename(task_id))
            if os.path.isfile(stale_diff):
                os.remove(stale_diff)
        except OSError as err:
            raise SubmissionError('Failed to prepare {}: {}'
                                  .format(submission_dir, err))

        archive_path = os.path.join(submission_dir, filename)
        rules = IgnoreRules.from_directory(source_path)
        create_archive(source_path, archive_path, rules)
        logger.info('Created tar file %s', archive_path)

        commit_hash = self.vcs.current_commit(source_path)

        metadata = SubmissionMetadata(commit_hash=commit_hash, task_id=task_id,
                                      archive_name=filename,
                                      source_path=source_path)
        try:
            metadata.write(submission_dir)
        except OSError as err:
            raise SubmissionError('Failed to save submission metadata: {}'
                                  .format(err))

        return InitResult(submission_dir, archive_path, source_path,
                          commit_hash, task_id, cleaned)

    def _archive_path(self, metadata):
        submission_dir = self.submission_dir

        if metadata.archive_name:
            archive_path = os.path.join(submission_dir, metadata.archive_name)
            if os.path.isfile(archive_path):
                return archive_path

        return find_archive(submission_dir)

    def finalize(self, source=None):
        """
        Diff the source against the recorded commit, save the diff next
        to the snapshot and in the home directory, and check that it
        applies to the snapshot. The scratch extraction is always
        removed.
        """

        source_path = self.resolve_source(source)
        submission_dir = self.submission_dir

        metadata = SubmissionMetadata.load_from_dir(submission_dir)
        archive_path = self._archive_path(metadata)

        scratch_dir = None
        try:
            scratch_dir = tempfile.mkdtemp(prefix=SCRATCH_PREFIX,
                                           dir=submission_dir)
            extracted_path = extract_archive(archive_path, scratch_dir)
            logger.info('Extracted %s to %s', archive_path, extracted_path)

            self.vcs.stage_all(source_path)

            name = diff_filename(metadata.task_id)
            home_diff_path = os.path.join(home_directory(), name)
            diff_path = os.path.join(submission_dir, name)

            self.vcs.diff(metadata.commit_hash, source_path, home_diff_path)
            try:
                shutil.copyfile(home_diff_path, diff_path)
            except OSError as err:
                raise SubmissionError('Failed to copy diff to {}: {}'
                                      .format(diff_path, err))

            if os.path.getsize(home_diff_path) == 0:
                # git apply rejects an empty patch
                apply_result = ApplyResult(True, 'No changes since {}'
                                           .format(metadata.commit_hash))
            else:
                apply_result = self.vcs.apply(home_diff_path, extracted_path)
        finally:
            if scratch_dir is not None:
                self._remove_scratch(scratch_dir)

        return FinalizeResult(submission_dir, source_path,
                              metadata.commit_hash, metadata.task_id,
                              home_diff_path, diff_path, apply_result)

    @staticmethod
    def _remove_scratch(scratch_dir):
        try:
            shutil.rmtree(scratch_dir)
        except OSError as err:
            logger.warning('Could not remove scratch directory %s: %s',
                           scratch_dir, err)
        else:
            logger.info('Removed %s', scratch_dir)

    def status(self):
        submission_dir = self.submission_dir

        metadata = self._existing_metadata()
        if metadata is None:
            return SubmissionStatus(submission_dir, STATE_ABSENT, None)

        diff_path = os.path.join(submission_dir,
                                 diff_filename(metadata.task_id))
        state = STATE_FINALIZED if os.path.isfile(diff_path) \
            else STATE_INITIALIZED

        return SubmissionStatus(submission_dir, state, metadata)
