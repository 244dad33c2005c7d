import os

from alignerr.exceptions import VCSError
from alignerr.vcs import VCS, ApplyResult


def write_file(path, contents=''):
    dirname = os.path.dirname(path)
    if dirname and not os.path.isdir(dirname):
        os.makedirs(dirname)
    with open(path, 'w') as f:
        f.write(contents)


class FakeVCS(VCS):
    """Records calls and returns canned answers instead of running git"""

    def __init__(self, commit='abc123', diff_text='--- a/x\n+++ b/x\n',
                 apply_result=None, fail=None):
        self.commit = commit
        self.diff_text = diff_text
        self.apply_result = apply_result or ApplyResult(True, None)
        self.fail = fail or ()
        self.calls = []

    def _maybe_fail(self, name):
        if name in self.fail:
            raise VCSError('{} failed'.format(name))

    def current_commit(self, path):
        self.calls.append(('current_commit', path))
        self._maybe_fail('current_commit')
        return self.commit

    def stage_all(self, path):
        self.calls.append(('stage_all', path))
        self._maybe_fail('stage_all')

    def diff(self, commit, path, output_path):
        self.calls.append(('diff', commit, path, output_path))
        self._maybe_fail('diff')
        write_file(output_path, self.diff_text)

    def apply(self, patch_path, path):
        self.calls.append(('apply', patch_path, path))
        self.applied_to = path
        self.applied_to_existed = os.path.isdir(path)
        return self.apply_result
