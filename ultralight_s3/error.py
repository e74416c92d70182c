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
ultralight_s3.error
~~~~~~~~~~~~~~~~~~~

This module provides the exception classes raised by the client.

Not-found and precondition outcomes (404, 412, 304) on read paths are not
exceptions; they are returned as ``None`` or ``False``. Network failures
raised by urllib3 are propagated unchanged.

:license: Apache 2.0, see LICENSE for more details.

"""

from __future__ import absolute_import, annotations

from typing import Optional


class S3Exception(Exception):
    """Base ultralight_s3 exception."""


class ConfigurationError(S3Exception, TypeError):
    """Raised to indicate invalid client configuration."""


class ValidationError(S3Exception, TypeError):
    """Raised to indicate invalid arguments to an operation."""


class InvalidResponseError(S3Exception):
    """Raised to indicate that a successful response lacks expected data."""

    def __init__(self, status: int, message: str, body: Optional[str]):
        self._status = status
        self._message = message
        self._body = body
        super().__init__(
            f"{message}; Response code: {status}, Body: {body}",
        )

    def __reduce__(self):
        return type(self), (self._status, self._message, self._body)

    @property
    def status(self) -> int:
        """Get HTTP status code."""
        return self._status

    @property
    def body(self) -> Optional[str]:
        """Get response body."""
        return self._body


class ProtocolError(S3Exception):
    """
    Raised to indicate that the service answered with an error, either a
    non-2xx status the operation does not tolerate or an XML ``Error``
    document.
    """

    def __init__(
            self,
            status: int,
            code: str,
            message: str,
            body: Optional[str] = None,
    ):
        self._status = status
        self._code = code
        self._message = message
        self._body = body
        super().__init__(
            f"S3 request failed; status: {status}, code: {code}, "
            f"message: {message}, body: {body}"
        )

    def __reduce__(self):
        return type(self), (
            self._status, self._code, self._message, self._body,
        )

    @property
    def status(self) -> int:
        """Get HTTP status code."""
        return self._status

    @property
    def code(self) -> str:
        """Get S3 error code."""
        return self._code

    @property
    def message(self) -> str:
        """Get S3 error message."""
        return self._message

    @property
    def body(self) -> Optional[str]:
        """Get raw response body."""
        return self._body

    def __repr__(self):
        return (
            f"ProtocolError(status={self._status!r}, code={self._code!r}, "
            f"message={self._message!r})"
        )
