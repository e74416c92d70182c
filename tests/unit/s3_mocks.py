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

import hashlib
import http.client
import threading
import uuid
from datetime import datetime, timezone
from unittest import TestCase
from urllib.parse import parse_qs, unquote, urlsplit
from xml.etree import ElementTree as ET

from urllib3 import HTTPHeaderDict

from ultralight_s3 import time

_ASSERT = TestCase()


class MockResponse:
    def __init__(self, method, url, headers, status_code,
                 response_headers=None, content=None):
        self.method = method
        self.url = url
        self.request_headers = HTTPHeaderDict(headers or {})
        self.status = status_code
        self.headers = HTTPHeaderDict(response_headers or {})
        self.data = content or b""
        self.reason = http.client.responses.get(status_code, "")
        self.released = False
        self.closed = False
        self._position = 0

    def read(self, amt=None, cache_content=False):
        end = len(self.data) if amt is None else self._position + amt
        chunk = self.data[self._position:end]
        self._position += len(chunk)
        return chunk

    def stream(self, amt=1024):
        chunk = self.read(amt)
        while chunk:
            yield chunk
            chunk = self.read(amt)

    def mock_verify(self, method, url, headers):
        _ASSERT.assertEqual(self.method, method)
        _ASSERT.assertEqual(self.url, url)
        headers = HTTPHeaderDict(headers)
        for header in self.request_headers:
            _ASSERT.assertEqual(self.request_headers[header], headers[header])

    def close(self):
        self.closed = True

    def release_conn(self):
        self.released = True


class MockConnection:
    def __init__(self):
        self.requests = []
        self.calls = []

    def mock_add_request(self, request):
        self.requests.append(request)

    def urlopen(self, method, url, body=None, headers=None,
                preload_content=True, **kwargs):
        self.calls.append(dict(
            method=method, url=url, body=body, headers=headers or {},
            preload_content=preload_content, **kwargs,
        ))
        return_request = self.requests.pop(0)
        return_request.mock_verify(method, url, headers or {})
        return return_request

    def clear(self):
        return


def _error(code, message, key=None):
    resource = f"<Key>{key}</Key>" if key else ""
    return (
        f'<?xml version="1.0" encoding="UTF-8"?>\n'
        f"<Error><Code>{code}</Code><Message>{message}</Message>"
        f"{resource}<RequestId>1</RequestId></Error>"
    ).encode()


class FakeS3Server(MockConnection):
    """In-memory S3 bucket answering urlopen() calls."""

    def __init__(self, bucket_name="my-bucket"):
        super().__init__()
        self.bucket_name = bucket_name
        self.bucket_created = True
        self.objects = {}
        self.uploads = {}
        self._lock = threading.Lock()

    def urlopen(self, method, url, body=None, headers=None,
                preload_content=True, **kwargs):
        headers = HTTPHeaderDict(headers or {})
        with self._lock:
            self.calls.append(dict(
                method=method, url=url, body=body, headers=headers,
                preload_content=preload_content, **kwargs,
            ))
            status, response_headers, content = self._handle(
                method, url, headers, body or b"",
            )
        if method == "HEAD":
            content = None
        return MockResponse(
            method, url, {}, status, response_headers, content,
        )

    def _handle(self, method, url, headers, body):
        if not headers.get("Authorization", "").startswith(
                "AWS4-HMAC-SHA256 Credential="):
            return 403, {}, _error("AccessDenied", "Access Denied")

        parts = urlsplit(url)
        query = {
            key: values[0] for key, values in
            parse_qs(parts.query, keep_blank_values=True).items()
        }
        bucket_name, _, key = parts.path.lstrip("/").partition("/")
        if unquote(bucket_name) != self.bucket_name:
            return 404, {}, _error("NoSuchBucket", "bucket not found")
        key = unquote(key)

        if not key:
            return self._handle_bucket(method, query)
        if "uploads" in query and method == "POST":
            return self._initiate(key)
        if "uploadId" in query:
            return self._handle_upload(method, key, query, body)
        if method == "PUT":
            return self._put(key, body, headers)
        if method == "DELETE":
            self.objects.pop(key, None)
            return 204, {}, None
        if method in ("GET", "HEAD"):
            return self._get(key, headers)
        return 405, {}, _error("MethodNotAllowed", "method not allowed")

    def _handle_bucket(self, method, query):
        if method == "PUT":
            self.bucket_created = True
            return 200, {}, None
        if "list-type" in query:
            return self._list(query) if method == "GET" else (200, {}, None)
        if "uploads" in query:
            return self._list_uploads()
        return 200, {}, None

    def _put(self, key, body, headers):
        etag = hashlib.md5(body).hexdigest()
        self.objects[key] = {
            "data": bytes(body),
            "etag": etag,
            "content_type": headers.get("Content-Type"),
            "last_modified": datetime(2026, 1, 2, 3, 4, 5, 0, timezone.utc),
        }
        return 200, {"ETag": f'"{etag}"'}, None

    def _get(self, key, headers):
        obj = self.objects.get(key)
        if obj is None:
            return 404, {}, _error("NoSuchKey", "key not found", key)

        etag = obj["etag"]
        if_match = headers.get("If-Match")
        if if_match is not None and if_match.strip('"') != etag:
            return 412, {}, _error("PreconditionFailed", "etag mismatch")
        if_none_match = headers.get("If-None-Match")
        if if_none_match is not None and if_none_match.strip('"') == etag:
            return 304, {"ETag": f'"{etag}"'}, None

        data = obj["data"]
        status = 200
        range_header = headers.get("Range")
        if range_header:
            start, _, end = range_header[len("bytes="):].partition("-")
            data = data[int(start):int(end) + 1]
            status = 206
        return status, {
            "ETag": f'"{etag}"',
            "Content-Length": str(len(data)),
            "Last-Modified": time.to_http_header(obj["last_modified"]),
            "Content-Type": obj["content_type"] or "",
        }, data

    def _list(self, query):
        prefix = query.get("prefix", "")
        delimiter = query.get("delimiter", "")
        max_keys = int(query.get("max-keys", "1000"))
        contents = []
        prefixes = set()
        for key in sorted(self.objects):
            if not key.startswith(prefix):
                continue
            rest = key[len(prefix):]
            if delimiter and delimiter in rest:
                prefixes.add(prefix + rest.split(delimiter)[0] + delimiter)
                continue
            obj = self.objects[key]
            contents.append(
                f"<Contents><Key>{key}</Key>"
                f"<LastModified>2026-01-02T03:04:05.000Z</LastModified>"
                f"<ETag>&quot;{obj['etag']}&quot;</ETag>"
                f"<Size>{len(obj['data'])}</Size>"
                f"<StorageClass>STANDARD</StorageClass></Contents>"
            )
        contents = contents[:max_keys]
        common = "".join(
            f"<CommonPrefixes><Prefix>{value}</Prefix></CommonPrefixes>"
            for value in sorted(prefixes)
        )
        return 200, {"Content-Type": "application/xml"}, (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            '<ListBucketResult '
            'xmlns="http://s3.amazonaws.com/doc/2006-03-01/">'
            f"<Name>{self.bucket_name}</Name><Prefix>{prefix}</Prefix>"
            f"<KeyCount>{len(contents)}</KeyCount>"
            f"<MaxKeys>{max_keys}</MaxKeys><IsTruncated>false</IsTruncated>"
            + "".join(contents) + common + "</ListBucketResult>"
        ).encode()

    def _list_uploads(self):
        uploads = "".join(
            f"<Upload><Key>{upload['key']}</Key>"
            f"<UploadId>{upload_id}</UploadId>"
            f"<Initiated>2026-01-02T03:04:05.000Z</Initiated></Upload>"
            for upload_id, upload in sorted(self.uploads.items())
        )
        return 200, {}, (
            "<ListMultipartUploadsResult>"
            f"<Bucket>{self.bucket_name}</Bucket>{uploads}"
            "</ListMultipartUploadsResult>"
        ).encode()

    def _initiate(self, key):
        upload_id = uuid.uuid4().hex
        self.uploads[upload_id] = {"key": key, "parts": {}}
        return 200, {}, (
            "<InitiateMultipartUploadResult>"
            f"<Bucket>{self.bucket_name}</Bucket><Key>{key}</Key>"
            f"<UploadId>{upload_id}</UploadId>"
            "</InitiateMultipartUploadResult>"
        ).encode()

    def _handle_upload(self, method, key, query, body):
        upload = self.uploads.get(query["uploadId"])
        if upload is None or upload["key"] != key:
            return 404, {}, _error("NoSuchUpload", "upload not found", key)

        if method == "PUT":
            etag = hashlib.md5(body).hexdigest()
            upload["parts"][int(query["partNumber"])] = (etag, bytes(body))
            return 200, {"ETag": f'"{etag}"'}, None

        if method == "DELETE":
            del self.uploads[query["uploadId"]]
            return 204, {}, None

        element = ET.fromstring(body)
        requested = [
            (int(part.findtext("{*}PartNumber")),
             part.findtext("{*}ETag").strip('"'))
            for part in element.findall("{*}Part")
        ]
        numbers = [number for number, _ in requested]
        if numbers != sorted(numbers):
            return 400, {}, _error("InvalidPartOrder", "parts not sorted")
        data = b""
        for number, etag in requested:
            stored = upload["parts"].get(number)
            if stored is None or stored[0] != etag:
                return 400, {}, _error("InvalidPart", "part not found")
            data += stored[1]
        del self.uploads[query["uploadId"]]
        etag = f"{hashlib.md5(data).hexdigest()}-{len(requested)}"
        self.objects[key] = {
            "data": data,
            "etag": etag,
            "content_type": None,
            "last_modified": datetime(2026, 1, 2, 3, 4, 5, 0, timezone.utc),
        }
        return 200, {}, (
            "<CompleteMultipartUploadResult>"
            f"<Location>https://s3.example.com/{self.bucket_name}/{key}"
            f"</Location><Bucket>{self.bucket_name}</Bucket>"
            f"<Key>{key}</Key><ETag>&quot;{etag}&quot;</ETag>"
            "</CompleteMultipartUploadResult>"
        ).encode()
