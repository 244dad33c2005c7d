import json
import os
import shutil
import tempfile
import unittest

from alignerr.exceptions import MissingStateError, SubmissionError
from alignerr.metadata import SubmissionMetadata, remove_markers

from tests.helpers import write_file


class TestSubmissionMetadata(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.tmp)

    def test_write_and_load(self):
        meta = SubmissionMetadata(commit_hash='deadbeef', task_id='task-1',
                                  archive_name='proj.tar',
                                  source_path='/src/proj')
        meta.write(self.tmp)

        with open(os.path.join(self.tmp, 'meta.json')) as f:
            raw = json.load(f)
        self.assertEqual(raw['commit-hash'], 'deadbeef')
        self.assertEqual(raw['task-id'], 'task-1')
        self.assertIn('created-at', raw)

        loaded = SubmissionMetadata.load_from_dir(self.tmp)
        self.assertEqual(loaded.commit_hash, 'deadbeef')
        self.assertEqual(loaded.task_id, 'task-1')
        self.assertEqual(loaded.archive_name, 'proj.tar')

    def test_writes_markers(self):
        SubmissionMetadata('deadbeef', 'task-1').write(self.tmp)

        with open(os.path.join(self.tmp, 'initial-hash.deadbeef')) as f:
            self.assertEqual(f.read(), 'deadbeef')
        with open(os.path.join(self.tmp, 'uuid.task-1')) as f:
            self.assertEqual(f.read(), 'task-1')

    def test_marker_fallback(self):
        write_file(os.path.join(self.tmp, 'initial-hash.cafe'), 'cafe')
        write_file(os.path.join(self.tmp, 'uuid.abc-123'), 'abc-123')

        loaded = SubmissionMetadata.load_from_dir(self.tmp)
        self.assertEqual(loaded.commit_hash, 'cafe')
        self.assertEqual(loaded.task_id, 'abc-123')

    def test_missing_directory(self):
        with self.assertRaises(MissingStateError) as ctx:
            SubmissionMetadata.load_from_dir(os.path.join(self.tmp, 'nope'))
        self.assertIn('init', ctx.exception.message)

    def test_missing_uuid_marker(self):
        write_file(os.path.join(self.tmp, 'initial-hash.cafe'), 'cafe')
        with self.assertRaises(MissingStateError) as ctx:
            SubmissionMetadata.load_from_dir(self.tmp)
        self.assertIn('UUID file not found', ctx.exception.message)

    def test_ambiguous_markers(self):
        write_file(os.path.join(self.tmp, 'initial-hash.a'))
        write_file(os.path.join(self.tmp, 'initial-hash.b'))
        write_file(os.path.join(self.tmp, 'uuid.x'))
        with self.assertRaises(SubmissionError):
            SubmissionMetadata.load_from_dir(self.tmp)

    def test_corrupt_meta(self):
        write_file(os.path.join(self.tmp, 'meta.json'), '{not json')
        with self.assertRaises(SubmissionError):
            SubmissionMetadata.load_from_dir(self.tmp)

    def test_unknown_key(self):
        write_file(os.path.join(self.tmp, 'meta.json'),
                   json.dumps({'commit-hash': 'a', 'task-id': 'b',
                               'surprise': 1}))
        with self.assertRaises(SubmissionError):
            SubmissionMetadata.load_from_dir(self.tmp)

    def test_remove_markers(self):
        SubmissionMetadata('deadbeef', 'task-1').write(self.tmp)
        write_file(os.path.join(self.tmp, 'keep.tar'))
        remove_markers(self.tmp)
        self.assertEqual(sorted(os.listdir(self.tmp)),
                         ['keep.tar', 'meta.json'])
