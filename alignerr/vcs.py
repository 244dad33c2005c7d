"""
Version control queries needed by the submission workflow.

SubmissionManager only talks to the small interface below, so tests can
hand it a fake instead of a real git binary.
"""

import logging
from abc import ABCMeta, abstractmethod
from collections import namedtuple

import git

from .exceptions import VCSError

logger = logging.getLogger(__name__)

ApplyResult = namedtuple('ApplyResult', ('success', 'message'))


class VCS(metaclass=ABCMeta):
    @abstractmethod
    def current_commit(self, path):
        """Return the commit hash HEAD points to in the repo at `path'."""
        pass

    @abstractmethod
    def stage_all(self, path):
        """Stage every change in the working tree at `path'."""
        pass

    @abstractmethod
    def diff(self, commit, path, output_path):
        """
        Write the difference between `commit' and the working tree at
        `path' to the file `output_path'.
        """
        pass

    @abstractmethod
    def apply(self, patch_path, path):
        """
        Apply the patch at `patch_path' to the files under `path'.
        Return an ApplyResult; a patch that does not apply is not an
        exception.
        """
        pass


class GitVCS(VCS):
    """VCS backed by GitPython"""

    @staticmethod
    def _repo(path, action):
        try:
            return git.Repo(path, search_parent_directories=True)
        except git.NoSuchPathError:
            raise VCSError('Failed to {}: no such directory {}'
                           .format(action, path))
        except git.InvalidGitRepositoryError:
            raise VCSError('Failed to {}: {} is not a git repository'
                           .format(action, path))

    def current_commit(self, path):
        repo = self._repo(path, 'get git commit hash')

        try:
            return repo.head.commit.hexsha
        except ValueError as err:
            # Raised for a repository without any commits
            raise VCSError('Failed to get git commit hash: {}'.format(err))

    def stage_all(self, path):
        repo = self._repo(path, 'stage changes')
        logger.debug('git add -A in %s', repo.working_dir)

        try:
            repo.git.add(A=True)
        except git.GitCommandError as err:
            raise VCSError('Failed to stage changes: git add -A exited with '
                           '{}'.format(err.status), verbose=err.stderr)

    def diff(self, commit, path, output_path):
        repo = self._repo(path, 'create git diff')
        logger.debug('git diff %s in %s > %s', commit, repo.working_dir,
                     output_path)

        try:
            with open(output_path, 'wb') as diff_file:
                repo.git.diff(commit, binary=True, output_stream=diff_file)
        except git.GitCommandError as err:
            raise VCSError('Failed to create git diff from {}'.format(commit),
                           verbose=err.stderr)
        except OSError as err:
            raise VCSError('Failed to write diff file {}: {}'
                           .format(output_path, err))

    def apply(self, patch_path, path):
        logger.debug('git apply %s in %s', patch_path, path)

        try:
            git.Git(path).apply(patch_path)
        except git.GitCommandError as err:
            message = err.stderr.strip() if err.stderr else str(err)
            return ApplyResult(False, message)

        return ApplyResult(True, None)
