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

from concurrent.futures import ThreadPoolExecutor

from ultralight_s3 import S3, ProtocolError

client = S3(
    access_key_id="Q3AM3UQ867SPQQA43P2F",
    secret_access_key="zuf+tfteSlswRu7BJ86wekitnifILbZam1KYY3TG",
    endpoint="https://play.min.io",
    bucket_name="my-bucket",
)

PART_SIZE = client.max_request_size_in_bytes
data = b"x" * (PART_SIZE * 2 + 1024)
chunks = [data[i:i+PART_SIZE] for i in range(0, len(data), PART_SIZE)]

upload_id = client.initiate_multipart_upload("my-big-object")
try:
    with ThreadPoolExecutor(max_workers=4) as executor:
        parts = list(executor.map(
            lambda args: client.upload_part(
                "my-big-object", args[1], upload_id, args[0],
            ),
            enumerate(chunks, start=1),
        ))
    result = client.complete_multipart_upload(
        "my-big-object", upload_id, parts,
    )
    print(f"created {result.object_name} object; etag: {result.etag}")
except ProtocolError:
    client.abort_multipart_upload("my-big-object", upload_id)
    raise
