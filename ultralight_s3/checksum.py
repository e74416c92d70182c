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

"""Hash and HMAC providers used for request signing."""

from __future__ import annotations

import hashlib
import hmac
from abc import ABC, abstractmethod

UNSIGNED_PAYLOAD = "UNSIGNED-PAYLOAD"


def _to_bytes(data: str | bytes | bytearray) -> bytes:
    return data.encode() if isinstance(data, str) else bytes(data)


def hex_string(data: bytes) -> str:
    """Encodes the specified bytes to Base16 (hex) string."""
    return "".join(f"{b:02x}" for b in data)


class HashProvider(ABC):
    """
    SHA-256 digest and HMAC-SHA256 capability.

    The client never picks a crypto backend on its own; pass an instance of
    this interface to :class:`ultralight_s3.S3` to replace the default one.
    """

    @abstractmethod
    def digest(self, data: str | bytes | bytearray) -> str:
        """Return hex encoded SHA-256 of data."""

    @abstractmethod
    def sign(
            self,
            key: str | bytes | bytearray,
            data: str | bytes | bytearray,
    ) -> bytes:
        """Return raw HMAC-SHA256 of data keyed with key."""


class Sha256HashProvider(HashProvider):
    """HashProvider backed by hashlib and hmac."""

    def digest(self, data: str | bytes | bytearray) -> str:
        return hashlib.sha256(_to_bytes(data)).hexdigest()

    def sign(
            self,
            key: str | bytes | bytearray,
            data: str | bytes | bytearray,
    ) -> bytes:
        return hmac.new(_to_bytes(key), _to_bytes(data), hashlib.sha256).digest()
