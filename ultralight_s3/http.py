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

"""HTTP transport executing signed requests against S3 services."""

from __future__ import absolute_import, annotations

import os
from datetime import timedelta
from typing import Collection, Mapping, Optional

import certifi
import urllib3
from urllib3 import BaseHTTPResponse

from .error import ProtocolError
from .xml import decode, find_error


def _new_pool_manager() -> urllib3.PoolManager:
    """Create default HTTP client; urllib3 retries are disabled."""
    timeout = timedelta(minutes=5).seconds
    return urllib3.PoolManager(
        timeout=urllib3.util.Timeout(connect=timeout, read=timeout),
        maxsize=10,
        cert_reqs="CERT_REQUIRED",
        ca_certs=os.environ.get("SSL_CERT_FILE") or certifi.where(),
        retries=False,
    )


class Transport:
    """
    Send signed requests and classify responses.

    A status outside 2xx raises :class:`ProtocolError` unless the caller
    listed it in ``tolerated_status_codes``. Connection and timeout errors
    of urllib3 are not caught.
    """

    def __init__(
            self,
            http_client: Optional[urllib3.PoolManager] = None,
            request_abort_timeout_ms: Optional[float] = None,
    ):
        # Validate http client has correct base class.
        if http_client and not isinstance(
                http_client,
                urllib3.poolmanager.PoolManager):
            raise ValueError(
                "HTTP client should be instance of "
                "`urllib3.poolmanager.PoolManager`"
            )
        self._http = http_client or _new_pool_manager()
        self._request_abort_timeout_ms = request_abort_timeout_ms

    @property
    def request_abort_timeout_ms(self) -> Optional[float]:
        """Get per-request deadline in milliseconds."""
        return self._request_abort_timeout_ms

    @request_abort_timeout_ms.setter
    def request_abort_timeout_ms(self, value: Optional[float]):
        self._request_abort_timeout_ms = value

    def send(  # pylint: disable=too-many-arguments
            self,
            method: str,
            url: str,
            headers: Mapping[str, str],
            body: Optional[str | bytes | bytearray] = None,
            tolerated_status_codes: Collection[int] = (),
            preload_content: bool = True,
    ) -> BaseHTTPResponse:
        """Execute HTTP request and return the response."""
        if method in ("GET", "HEAD"):
            body = None
        if isinstance(body, str):
            body = body.encode()

        kwargs = {}
        if self._request_abort_timeout_ms:
            kwargs["timeout"] = urllib3.Timeout(
                total=self._request_abort_timeout_ms / 1000,
            )

        response = self._http.urlopen(
            method,
            url,
            body=body,
            headers=dict(headers),
            preload_content=preload_content,
            **kwargs,
        )

        if (
                200 <= response.status < 300 or
                response.status in tolerated_status_codes
        ):
            return response

        raise self._to_error(response, preload_content)

    @staticmethod
    def _to_error(
            response: BaseHTTPResponse,
            preload_content: bool,
    ) -> ProtocolError:
        """Build ProtocolError from a failed response."""
        data = (
            response.data if preload_content
            else response.read(cache_content=True)
        )
        response.release_conn()
        body = data.decode(errors="replace") if data else ""

        code = response.headers.get("x-amz-error-code")
        message = response.headers.get("x-amz-error-message")
        if (not code or not message) and body.lstrip().startswith("<"):
            try:
                error = find_error(decode(body)) or {}
            except ValueError:
                error = {}
            code = code or error.get("code")
            message = message or error.get("message")

        return ProtocolError(
            response.status,
            code if isinstance(code, str) and code else "Unknown",
            (
                message if isinstance(message, str) and message
                else response.reason or ""
            ),
            body,
        )
