# -*- coding: utf-8 -*-
# Ultralight S3 Python Library for S3 Compatible Object Storage, (C)
# 2026 Ultralight S3 Authors.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from unittest import TestCase, mock

from ultralight_s3 import S3, ValidationError, sanitize_etag

from .s3_mocks import FakeS3Server


def new_client():
    return S3(
        access_key_id='AKIAEXAMPLE',
        secret_access_key='S3CR3T',
        endpoint='https://s3.example.com',
        bucket_name='my-bucket',
    )


class ObjectScenarioTest(TestCase):
    def setUp(self):
        patcher = mock.patch('urllib3.PoolManager')
        self.addCleanup(patcher.stop)
        self.server = FakeS3Server()
        patcher.start().return_value = self.server
        self.client = new_client()

    def test_put_then_get(self):
        self.client.put('k', 'Hello')
        self.assertEqual(self.client.get('k'), 'Hello')
        self.assertEqual(self.client.get_content_length('k'), 5)

    def test_missing_key(self):
        self.assertIsNone(self.client.get('missing'))
        self.assertFalse(self.client.file_exists('missing'))
        self.assertIsNone(self.client.get_etag('missing'))

    def test_conditional_reads(self):
        etag = self.client.put('k', 'Hello').etag
        self.assertEqual(self.client.get_etag('k'), etag)
        self.assertTrue(self.client.file_exists('k'))
        self.assertTrue(self.client.file_exists('k', {'if-match': etag}))
        self.assertIsNone(self.client.file_exists('k', {'if-match': 'stale'}))
        self.assertIsNone(self.client.get('k', {'if-none-match': etag}))
        self.assertEqual(self.client.get('k', {'if-match': etag}), 'Hello')
        result = self.client.get_object_with_etag('k')
        self.assertEqual((result.etag, result.data), (etag, 'Hello'))

    def test_get_non_utf8_data(self):
        self.client.put('bin', b'\xff\xfe\x00')
        self.assertEqual(self.client.get('bin'), '\ufffd\ufffd\x00')
        result = self.client.get_object_with_etag('bin')
        self.assertEqual(result.data, '\ufffd\ufffd\x00')

    def test_delete(self):
        self.client.put('k', 'Hello')
        self.assertTrue(self.client.delete('k'))
        self.assertFalse(self.client.file_exists('k'))
        self.assertTrue(self.client.delete('k'))

    def test_list(self):
        self.client.put('only.txt', 'x')
        result = self.client.list()
        self.assertIsInstance(result, list)
        self.assertEqual(len(result), 1)
        self.assertEqual(result[0]['key'], 'only.txt')
        self.assertEqual(sanitize_etag(result[0]['eTag']),
                         self.client.get_etag('only.txt'))

        self.client.put('dir/a.txt', 'a')
        self.client.put('dir/b.txt', 'b')
        self.assertEqual(
            [entry['key'] for entry in self.client.list()],
            ['dir/a.txt', 'dir/b.txt', 'only.txt'],
        )
        self.assertEqual(
            [entry['key'] for entry in self.client.list(delimiter='/')],
            ['only.txt'],
        )
        self.assertEqual(
            [entry['key'] for entry in self.client.list(prefix='dir/')],
            ['dir/a.txt', 'dir/b.txt'],
        )

    def test_list_nested_key(self):
        self.client.put('dir/a.txt', 'a')
        result = self.client.list()
        self.assertEqual(len(result), 1)
        self.assertEqual(result[0]['key'], 'dir/a.txt')

    def test_bucket(self):
        self.assertTrue(self.client.bucket_exists())
        self.client.bucket_name = 'other-bucket'
        self.assertFalse(self.client.bucket_exists())


class RangeTest(TestCase):
    def setUp(self):
        patcher = mock.patch('urllib3.PoolManager')
        self.addCleanup(patcher.stop)
        self.server = FakeS3Server()
        patcher.start().return_value = self.server
        self.client = new_client()
        self.client.put('stream.txt', 'This is a test for streaming')

    def test_range_end_is_exclusive(self):
        response = self.client.get_response('stream.txt', False, 0, 7)
        try:
            self.assertEqual(response.status, 206)
            self.assertEqual(b''.join(response.stream(3)), b'This is')
        finally:
            response.close()
            response.release_conn()
        call = self.server.calls[-1]
        self.assertEqual(call['headers']['Range'], 'bytes=0-6')
        self.assertFalse(call['preload_content'])

    def test_range_in_the_middle(self):
        response = self.client.get_response('stream.txt', False, 10, 14)
        self.assertEqual(response.read(), b'test')

    def test_whole_file_ignores_range(self):
        response = self.client.get_response('stream.txt', True, 0, 7)
        self.assertEqual(response.read(), b'This is a test for streaming')
        self.assertNotIn('Range', self.server.calls[-1]['headers'])

    def test_default_range_end(self):
        self.client.get_response('stream.txt', False)
        self.assertEqual(self.server.calls[-1]['headers']['Range'],
                         f'bytes=0-{5 * 1024 * 1024 - 1}')

    def test_range_validation(self):
        for range_from, range_to in ((0, 0), (7, 3), (-1, 5), ('0', 5),
                                     (0, 7.5)):
            with self.assertRaises(ValidationError):
                self.client.get_response('stream.txt', False, range_from,
                                         range_to)
        with self.assertRaises(ValidationError):
            self.client.get_response('stream.txt', 'no')
