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

"""
Response data types of the S3 operations.
"""

from __future__ import absolute_import, annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional, Type, TypeVar

from urllib3._collections import HTTPHeaderDict

from .helpers import sanitize_etag
from .time import from_http_header

A = TypeVar("A", bound="ObjectMetadata")
B = TypeVar("B", bound="CompleteMultipartUploadResult")


@dataclass(frozen=True)
class Part:
    """Part information of a multipart upload."""
    part_number: int
    etag: str


@dataclass(frozen=True)
class ObjectMetadata:
    """Size, modification time and ETag of an object or listing."""
    size: int
    mtime: Optional[datetime]
    etag: Optional[str]

    @classmethod
    def fromheaders(cls: Type[A], headers: Mapping[str, str]) -> A:
        """Create new object with values from response headers."""
        return cls(
            size=int(headers.get("content-length") or 0),
            mtime=from_http_header(headers.get("last-modified")),
            etag=sanitize_etag(headers.get("etag")),
        )


@dataclass(frozen=True)
class ObjectWithETag:
    """Object text with its ETag; both None if not found or not matched."""
    etag: Optional[str] = None
    data: Optional[str] = None


@dataclass(frozen=True)
class ObjectWriteResult:
    """Result of a single-shot object upload."""
    bucket_name: str
    object_name: str
    etag: Optional[str]
    version_id: Optional[str]
    http_headers: HTTPHeaderDict


@dataclass(frozen=True)
class CompleteMultipartUploadResult:
    """CompleteMultipartUpload API result."""
    location: Optional[str] = None
    bucket_name: Optional[str] = None
    object_name: Optional[str] = None
    etag: Optional[str] = None

    @classmethod
    def fromdict(cls: Type[B], values: Mapping[str, Any]) -> B:
        """Create new object with values from decoded XML."""

        def _text(name):
            value = values.get(name)
            return value if isinstance(value, str) else None

        return cls(
            location=_text("location"),
            bucket_name=_text("bucket"),
            object_name=_text("key"),
            etag=sanitize_etag(_text("eTag")),
        )
