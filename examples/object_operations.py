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

from ultralight_s3 import S3

client = S3(
    access_key_id="Q3AM3UQ867SPQQA43P2F",
    secret_access_key="zuf+tfteSlswRu7BJ86wekitnifILbZam1KYY3TG",
    endpoint="https://play.min.io",
    bucket_name="my-bucket",
)

# Upload data.
result = client.put("my-object", "This is a test for streaming")
print(f"created {result.object_name} object; etag: {result.etag}")

# Get data of an object.
print(client.get("my-object"))

# Get data only if it changed.
data = client.get("my-object", {"if-none-match": result.etag})
print("not modified" if data is None else data)

# Get first 7 bytes of an object; range end is exclusive.
response = client.get_response("my-object", False, 0, 7)
try:
    print(response.read())
finally:
    response.close()
    response.release_conn()

# List objects under a prefix.
for entry in client.list(prefix="my-"):
    print(entry["key"], entry["size"])

print(client.file_exists("my-object"), client.get_content_length("my-object"))
client.delete("my-object")
