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

# pylint: disable=too-many-lines,too-many-public-methods
# pylint: disable=too-many-arguments,too-many-positional-arguments

"""
Simple Storage Service (aka S3) client to perform object and multipart
upload operations on one bucket of an S3 compatible service.
"""

from __future__ import absolute_import, annotations

import functools
import logging
import platform
from dataclasses import replace
from typing import Any, Collection, Mapping, Optional, Sequence

import urllib3
from urllib3 import BaseHTTPResponse

from . import __title__, __version__, time
from .checksum import HashProvider
from .config import ClientConfig, Logger
from .datatypes import (CompleteMultipartUploadResult, ObjectMetadata,
                        ObjectWithETag, ObjectWriteResult, Part)
from .error import (ConfigurationError, InvalidResponseError, ProtocolError,
                    ValidationError)
from .helpers import (DEFAULT_CONTENT_TYPE, LIST_TYPE, MAX_MULTIPART_COUNT,
                      MIN_PART_SIZE, XML_CONTENT_TYPE, check_data, check_key,
                      check_non_empty_string, check_opts,
                      check_positive_integer, check_string,
                      headers_to_strings, sanitize_etag, sanitize_log_data,
                      split_conditional_headers)
from .http import Transport
from .signer import sign_v4_s3
from .xml import Element, SubElement, decode, find_error, getbytes

_DEFAULT_USER_AGENT = (
    f"UltralightS3 ({platform.system()}; {platform.machine()}) "
    f"{__title__}/{__version__}"
)
_LOGGER = logging.getLogger(__package__)
_NOT_FOUND_OR_NOT_MATCHED = (404, 412, 304)
_LIST_METHODS = ("GET", "HEAD")


def _logs_validation_error(func):
    """Log ValidationError raised by a client method before re-raising."""

    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        except ValidationError as exc:
            self._log(  # pylint: disable=protected-access
                "error", str(exc), operation=func.__name__,
            )
            raise

    return wrapper


def _check_list_args(delimiter: Any, prefix: Any, method: Any, opts: Any):
    """Check arguments shared by listing operations."""
    check_string(delimiter, "delimiter")
    check_string(prefix, "prefix")
    if method not in _LIST_METHODS:
        raise ValidationError("method must be either GET or HEAD")
    check_opts(opts)


class S3:
    """
    Simple Storage Service (aka S3) client bound to one bucket.

    The client holds validated, immutable configuration and a thread-safe
    urllib3 pool only; every call works on call-scoped values, so one
    instance can be shared by several threads, e.g. to upload parts of a
    multipart upload concurrently. No request is retried.

    Args:
        access_key_id (str):
            Access key (aka user ID) of the account.

        secret_access_key (str):
            Secret key (aka password) of the account.

        endpoint (str):
            Service URL, e.g. ``https://<account>.r2.cloudflarestorage.com``.

        bucket_name (str):
            Name of the bucket every operation works on.

        region (str, default="auto"):
            Region used in the signature scope.

        max_request_size_in_bytes (int, default=5MiB):
            Default end of ranged reads; must be at least 5MiB.

        request_abort_timeout_ms (Optional[float], default=None):
            Deadline of each request in milliseconds.

        logger (Optional[Logger], default=None):
            Object with ``info``, ``warning`` and ``error`` methods receiving
            structured entries; the ``ultralight_s3`` logger if not given.

        hash_provider (Optional[HashProvider], default=None):
            SHA-256 and HMAC implementation; hashlib based if not given.

        http_client (Optional[urllib3.PoolManager], default=None):
            Customized HTTP client.

    Example:
        >>> from ultralight_s3 import S3
        >>> client = S3(
        ...     access_key_id="Q3AM3UQ867SPQQA43P2F",
        ...     secret_access_key="zuf+tfteSlswRu7BJ86wekitnifILbZam1KYY3TG",
        ...     endpoint="https://play.min.io",
        ...     bucket_name="my-bucket",
        ... )
        >>> result = client.put("hello.txt", "Hello")
        >>> client.get("hello.txt")
        'Hello'
    """

    def __init__(
            self,
            access_key_id: str,
            secret_access_key: str,
            endpoint: str,
            bucket_name: str,
            region: str = "auto",
            max_request_size_in_bytes: int = MIN_PART_SIZE,
            request_abort_timeout_ms: Optional[float] = None,
            logger: Optional[Logger] = None,
            hash_provider: Optional[HashProvider] = None,
            http_client: Optional[urllib3.PoolManager] = None,
    ):
        self._config = ClientConfig(
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            endpoint=endpoint,
            bucket_name=bucket_name,
            region=region,
            max_request_size_in_bytes=max_request_size_in_bytes,
            request_abort_timeout_ms=request_abort_timeout_ms,
            logger=logger,
            hash_provider=hash_provider,
        )
        self._transport = Transport(http_client, request_abort_timeout_ms)

    @property
    def config(self) -> ClientConfig:
        """Get client configuration."""
        return self._config

    @config.setter
    def config(self, value: ClientConfig):
        if not isinstance(value, ClientConfig):
            raise ConfigurationError(
                "config must be an instance of ClientConfig",
            )
        self._config = value
        self._transport.request_abort_timeout_ms = (
            value.request_abort_timeout_ms
        )

    @property
    def bucket_name(self) -> str:
        """Get bucket name."""
        return self._config.bucket_name

    @bucket_name.setter
    def bucket_name(self, value: str):
        self.config = replace(self._config, bucket_name=value)

    @property
    def region(self) -> str:
        """Get region."""
        return self._config.region

    @region.setter
    def region(self, value: str):
        self.config = replace(self._config, region=value)

    @property
    def endpoint(self) -> str:
        """Get endpoint."""
        return self._config.endpoint

    @endpoint.setter
    def endpoint(self, value: str):
        self.config = replace(self._config, endpoint=value)

    @property
    def max_request_size_in_bytes(self) -> int:
        """Get default end of ranged reads."""
        return self._config.max_request_size_in_bytes

    @max_request_size_in_bytes.setter
    def max_request_size_in_bytes(self, value: int):
        self.config = replace(self._config, max_request_size_in_bytes=value)

    def _log(self, level: str, message: str, **data: Any):
        """Send structured, secret-redacted entry to the logger."""
        config = self._config
        entry = {
            "timestamp": time.to_iso8601utc(time.utcnow()),
            "level": level,
            "message": message,
            **sanitize_log_data(data),
            "context": {
                "bucket_name": config.bucket_name,
                "region": config.region,
                "endpoint": config.endpoint,
                "access_key_id": config.access_key_id[:4] + "...",
            },
        }
        getattr(config.logger or _LOGGER, level)(entry)

    def _execute(
            self,
            method: str,
            object_name: Optional[str] = None,
            query: Optional[Mapping[str, Any]] = None,
            headers: Optional[Mapping[str, str]] = None,
            body: Optional[bytes] = None,
            tolerated_status_codes: Collection[int] = (),
            preload_content: bool = True,
    ) -> BaseHTTPResponse:
        """Sign and send request."""
        config = self._config
        headers = dict(headers or {})
        headers["User-Agent"] = _DEFAULT_USER_AGENT
        if method in ["PUT", "POST"]:
            headers["Content-Length"] = str(len(body or b""))

        request = sign_v4_s3(
            method=method,
            endpoint=config.endpoint_url,
            bucket_name=config.bucket_name,
            object_name=object_name,
            query=query,
            headers=headers,
            body=body,
            access_key=config.access_key_id,
            secret_key=config.secret_access_key,
            region=config.region,
            hash_provider=config.hash_provider,
        )
        self._log(
            "info",
            f"Sending {method} request",
            url=request.url,
            headers=headers_to_strings(request.headers, titled_key=True),
        )

        try:
            response = self._transport.send(
                method,
                request.url,
                request.headers,
                body=body,
                tolerated_status_codes=tolerated_status_codes,
                preload_content=preload_content,
            )
        except ProtocolError as exc:
            self._log(
                "error",
                f"{method} request failed",
                url=request.url,
                status=exc.status,
                code=exc.code,
                error_message=exc.message,
                body=exc.body,
            )
            raise

        if not 200 <= response.status < 300:
            self._log(
                "info",
                f"{method} request returned tolerated status",
                url=request.url,
                status=response.status,
            )
        return response

    def _parse_document(
            self,
            response: BaseHTTPResponse,
            root: str,
            always_array: Sequence[str] = (),
    ) -> dict:
        """Decode XML response and return the element named root."""
        body = response.data.decode() if response.data else ""
        try:
            document = decode(body, always_array) if body else {}
        except ValueError as exc:
            raise InvalidResponseError(
                response.status, f"malformed XML response; {exc}", body,
            ) from exc
        error = find_error(document)
        if error is not None:
            exc = ProtocolError(
                response.status,
                str(error.get("code") or "Unknown"),
                str(error.get("message") or ""),
                body,
            )
            self._log(
                "error",
                "Error document in response",
                status=exc.status,
                code=exc.code,
                error_message=exc.message,
            )
            raise exc
        result = document.get(root) if isinstance(document, dict) else None
        return result if isinstance(result, dict) else {}

    @_logs_validation_error
    def get(
            self,
            key: str,
            opts: Optional[Mapping[str, Any]] = None,
    ) -> Optional[str]:
        """
        Get data of an object as text.

        Args:
            key (str):
                Object key.

            opts (Optional[Mapping[str, Any]], default=None):
                Conditional headers ``if-match``, ``if-none-match``,
                ``if-modified-since`` and ``if-unmodified-since`` (in any
                letter case; datetimes are formatted as HTTP dates); all
                other entries are sent as query parameters.

        Returns:
            Optional[str]:
                Object data, or None if the object does not exist or the
                condition does not hold (404, 412 or 304).

        Example:
            >>> data = client.get("my-object", {"if-none-match": etag})
        """
        check_key(key)
        check_opts(opts)
        headers, query = split_conditional_headers(opts)
        response = self._execute(
            "GET",
            key,
            query=query,
            headers=headers,
            tolerated_status_codes=_NOT_FOUND_OR_NOT_MATCHED,
        )
        if response.status in _NOT_FOUND_OR_NOT_MATCHED:
            return None
        return response.data.decode(errors="replace")

    @_logs_validation_error
    def get_object_with_etag(
            self,
            key: str,
            opts: Optional[Mapping[str, Any]] = None,
    ) -> ObjectWithETag:
        """
        Get data of an object as text along with its sanitized ETag. Both
        are None if the object does not exist or the condition does not
        hold.
        """
        check_key(key)
        check_opts(opts)
        headers, query = split_conditional_headers(opts)
        response = self._execute(
            "GET",
            key,
            query=query,
            headers=headers,
            tolerated_status_codes=_NOT_FOUND_OR_NOT_MATCHED,
        )
        if response.status in _NOT_FOUND_OR_NOT_MATCHED:
            return ObjectWithETag()
        return ObjectWithETag(
            etag=sanitize_etag(response.headers.get("etag")),
            data=response.data.decode(errors="replace"),
        )

    @_logs_validation_error
    def get_etag(
            self,
            key: str,
            opts: Optional[Mapping[str, Any]] = None,
    ) -> Optional[str]:
        """Get sanitized ETag of an object, or None on 404, 412 or 304."""
        check_key(key)
        check_opts(opts)
        headers, query = split_conditional_headers(opts)
        response = self._execute(
            "HEAD",
            key,
            query=query,
            headers=headers,
            tolerated_status_codes=_NOT_FOUND_OR_NOT_MATCHED,
        )
        if response.status in _NOT_FOUND_OR_NOT_MATCHED:
            return None
        return sanitize_etag(response.headers.get("etag"))

    @_logs_validation_error
    def get_response(
            self,
            key: str,
            whole_file: bool = True,
            range_from: int = 0,
            range_to: Optional[int] = None,
            opts: Optional[Mapping[str, Any]] = None,
    ) -> BaseHTTPResponse:
        """
        Get streaming response of an object or of a byte range of it.

        Args:
            key (str):
                Object key.

            whole_file (bool, default=True):
                Read the whole object; range_from and range_to are ignored.

            range_from (int, default=0):
                Offset of the first byte to read.

            range_to (Optional[int], default=None):
                Offset one past the last byte to read (exclusive), i.e. the
                request carries ``Range: bytes={range_from}-{range_to - 1}``.
                Defaults to ``max_request_size_in_bytes``.

            opts (Optional[Mapping[str, Any]], default=None):
                Conditional headers and extra query parameters.

        Returns:
            urllib3.BaseHTTPResponse:
                Unread response; the caller must close it and release the
                connection.

        Example:
            >>> response = client.get_response("my-object", False, 0, 7)
            >>> try:
            ...     print(response.read())
            ... finally:
            ...     response.close()
            ...     response.release_conn()
        """
        check_key(key)
        check_opts(opts)
        if not isinstance(whole_file, bool):
            raise ValidationError("whole_file must be a boolean")
        if range_to is None:
            range_to = self._config.max_request_size_in_bytes
        headers, query = split_conditional_headers(opts)
        if not whole_file:
            if (
                    isinstance(range_from, bool) or
                    not isinstance(range_from, int) or range_from < 0
            ):
                raise ValidationError(
                    "range_from must be a non-negative integer",
                )
            if (
                    isinstance(range_to, bool) or
                    not isinstance(range_to, int) or range_to <= range_from
            ):
                raise ValidationError(
                    "range_to must be an integer greater than range_from",
                )
            headers["Range"] = f"bytes={range_from}-{range_to - 1}"
        return self._execute(
            "GET", key, query=query, headers=headers, preload_content=False,
        )

    @_logs_validation_error
    def put(
            self,
            key: str,
            data: str | bytes | bytearray,
            content_type: str = DEFAULT_CONTENT_TYPE,
    ) -> ObjectWriteResult:
        """
        Upload data to an object in a single request.

        Args:
            key (str):
                Object key; a key ending with "/" and empty data make a
                folder marker.

            data (str | bytes | bytearray):
                Object data, strings are UTF-8 encoded.

            content_type (str, default="application/octet-stream"):
                Content type of the object.

        Returns:
            ObjectWriteResult:
                Sanitized ETag, version ID and response headers.

        Example:
            >>> result = client.put("my-object", b"hello")
            >>> print(result.etag)
        """
        check_key(key)
        check_data(data)
        check_non_empty_string(content_type, "content_type")
        body = data.encode() if isinstance(data, str) else bytes(data)
        response = self._execute(
            "PUT", key, headers={"Content-Type": content_type}, body=body,
        )
        return ObjectWriteResult(
            bucket_name=self._config.bucket_name,
            object_name=key,
            etag=sanitize_etag(response.headers.get("etag")),
            version_id=response.headers.get("x-amz-version-id"),
            http_headers=response.headers,
        )

    @_logs_validation_error
    def delete(self, key: str) -> bool:
        """
        Delete an object. Deleting a missing object succeeds too; use
        :meth:`file_exists` first if the prior state matters.
        """
        check_key(key)
        self._execute("DELETE", key, tolerated_status_codes=(404,))
        return True

    @_logs_validation_error
    def file_exists(
            self,
            key: str,
            opts: Optional[Mapping[str, Any]] = None,
    ) -> Optional[bool]:
        """
        Check if an object exists.

        Returns:
            Optional[bool]:
                True if it exists, False on 404 and None if a conditional
                header in opts did not hold (412 or 304).
        """
        check_key(key)
        check_opts(opts)
        headers, query = split_conditional_headers(opts)
        response = self._execute(
            "HEAD",
            key,
            query=query,
            headers=headers,
            tolerated_status_codes=_NOT_FOUND_OR_NOT_MATCHED,
        )
        if response.status == 404:
            return False
        if response.status in _NOT_FOUND_OR_NOT_MATCHED:
            return None
        return True

    @_logs_validation_error
    def get_content_length(self, key: str) -> int:
        """Get size of an object; 0 if Content-Length is not returned."""
        check_key(key)
        response = self._execute("HEAD", key)
        return int(response.headers.get("content-length") or 0)

    def bucket_exists(self) -> bool:
        """Check if the configured bucket exists."""
        response = self._execute("HEAD", tolerated_status_codes=(404,))
        return response.status == 200

    def create_bucket(self) -> bool:
        """
        Create the configured bucket. A location constraint is sent unless
        region is "auto" or "us-east-1".
        """
        region = self._config.region
        body = None
        headers = {}
        if region not in ("auto", "us-east-1"):
            element = Element("CreateBucketConfiguration")
            SubElement(element, "LocationConstraint", region)
            body = getbytes(element)
            headers["Content-Type"] = XML_CONTENT_TYPE
        response = self._execute("PUT", headers=headers, body=body)
        return response.status == 200

    @_logs_validation_error
    def list(
            self,
            delimiter: str = "",
            prefix: str = "",
            max_keys: int = 1000,
            method: str = "GET",
            opts: Optional[Mapping[str, Any]] = None,
    ) -> list[dict] | ObjectMetadata:
        """
        List objects of the bucket with ListObjectsV2 S3 API; one page only.

        Args:
            delimiter (str, default=""):
                Delimiter grouping keys; keys below it are not listed. The
                empty default lists recursively.

            prefix (str, default=""):
                Key prefix to filter on.

            max_keys (int, default=1000):
                Maximum number of entries.

            method (str, default="GET"):
                "GET" for entries or "HEAD" for response metadata.

            opts (Optional[Mapping[str, Any]], default=None):
                Extra query parameters.

        Returns:
            list[dict] | ObjectMetadata:
                Decoded ``Contents`` entries (always a list, possibly empty)
                with keys like ``key``, ``size``, ``eTag`` and
                ``lastModified``; ObjectMetadata for "HEAD".

        Example:
            >>> for entry in client.list(prefix="photos/"):
            ...     print(entry["key"], entry["size"])
        """
        _check_list_args(delimiter, prefix, method, opts)
        check_positive_integer(max_keys, "max_keys")
        query = {"list-type": LIST_TYPE, "max-keys": str(max_keys)}
        if delimiter:
            query["delimiter"] = delimiter
        if prefix:
            query["prefix"] = prefix
        query.update(opts or {})

        response = self._execute(method, query=query)
        if method == "HEAD":
            return ObjectMetadata.fromheaders(response.headers)
        result = self._parse_document(
            response, "listBucketResult", ("contents",),
        )
        return result.get("contents", [])

    @_logs_validation_error
    def list_multipart_uploads(
            self,
            delimiter: str = "",
            prefix: str = "",
            method: str = "GET",
            opts: Optional[Mapping[str, Any]] = None,
    ) -> list[dict] | ObjectMetadata:
        """
        List in-flight multipart uploads of the bucket; one page only.
        Entries carry ``key``, ``uploadId`` and ``initiated``.
        """
        _check_list_args(delimiter, prefix, method, opts)
        query = {"uploads": ""}
        if delimiter:
            query["delimiter"] = delimiter
        if prefix:
            query["prefix"] = prefix
        query.update(opts or {})

        response = self._execute(method, query=query)
        if method == "HEAD":
            return ObjectMetadata.fromheaders(response.headers)
        result = self._parse_document(
            response, "listMultipartUploadsResult", ("upload",),
        )
        return result.get("upload", [])

    @_logs_validation_error
    def initiate_multipart_upload(
            self,
            key: str,
            content_type: str = DEFAULT_CONTENT_TYPE,
    ) -> str:
        """
        Start a multipart upload.

        Returns:
            str:
                Upload ID to pass to :meth:`upload_part`,
                :meth:`complete_multipart_upload` and
                :meth:`abort_multipart_upload`.
        """
        check_key(key)
        check_non_empty_string(content_type, "content_type")
        response = self._execute(
            "POST",
            key,
            query={"uploads": ""},
            headers={"Content-Type": content_type},
        )
        result = self._parse_document(
            response, "initiateMultipartUploadResult",
        )
        upload_id = result.get("uploadId")
        if not isinstance(upload_id, str) or not upload_id:
            self._log("error", "Upload ID not found in response", key=key)
            raise InvalidResponseError(
                response.status,
                "upload ID not found in response",
                response.data.decode(),
            )
        return upload_id

    @_logs_validation_error
    def upload_part(
            self,
            key: str,
            data: str | bytes | bytearray,
            upload_id: str,
            part_number: int,
            opts: Optional[Mapping[str, Any]] = None,
    ) -> Part:
        """
        Upload one part of a multipart upload. Parts with distinct numbers
        may be uploaded in any order and from several threads.

        Args:
            key (str):
                Object key.

            data (str | bytes | bytearray):
                Part data; all parts but the last must be at least 5MiB.

            upload_id (str):
                Upload ID from :meth:`initiate_multipart_upload`.

            part_number (int):
                Part number between 1 and 10000.

            opts (Optional[Mapping[str, Any]], default=None):
                Extra query parameters.

        Returns:
            Part:
                Part number and sanitized ETag of the uploaded part.

        Example:
            >>> with ThreadPoolExecutor() as executor:
            ...     parts = list(executor.map(
            ...         lambda args: client.upload_part(
            ...             "big", args[1], upload_id, args[0],
            ...         ),
            ...         enumerate(chunks, start=1),
            ...     ))
        """
        check_key(key)
        check_data(data)
        check_non_empty_string(upload_id, "upload_id")
        check_positive_integer(part_number, "part_number")
        if part_number > MAX_MULTIPART_COUNT:
            raise ValidationError(
                f"part_number must not be greater than {MAX_MULTIPART_COUNT}",
            )
        check_opts(opts)
        query = {"partNumber": str(part_number), "uploadId": upload_id}
        query.update(opts or {})
        body = data.encode() if isinstance(data, str) else bytes(data)
        response = self._execute("PUT", key, query=query, body=body)
        etag = sanitize_etag(response.headers.get("etag"))
        if not etag:
            raise InvalidResponseError(
                response.status, "ETag not found in response", None,
            )
        return Part(part_number=part_number, etag=etag)

    @_logs_validation_error
    def complete_multipart_upload(
            self,
            key: str,
            upload_id: str,
            parts: Sequence[Part],
    ) -> CompleteMultipartUploadResult:
        """
        Complete a multipart upload. Parts are sent in ascending part
        number order whatever order they are given in.

        Example:
            >>> result = client.complete_multipart_upload(
            ...     "big", upload_id, parts,
            ... )
            >>> print(result.etag)
        """
        check_key(key)
        check_non_empty_string(upload_id, "upload_id")
        if isinstance(parts, (str, bytes)) or not isinstance(parts, Sequence):
            raise ValidationError("parts must be a non-empty sequence")
        if not parts:
            raise ValidationError("parts must be a non-empty sequence")
        for part in parts:
            if (
                    not isinstance(part, Part) or
                    isinstance(part.part_number, bool) or
                    not isinstance(part.part_number, int) or
                    not isinstance(part.etag, str)
            ):
                raise ValidationError(
                    "each part must have an integer part_number and "
                    "a string etag"
                )

        element = Element("CompleteMultipartUpload")
        for part in sorted(parts, key=lambda part: part.part_number):
            tag = SubElement(element, "Part")
            SubElement(tag, "PartNumber", str(part.part_number))
            SubElement(tag, "ETag", '"' + sanitize_etag(part.etag) + '"')
        response = self._execute(
            "POST",
            key,
            query={"uploadId": upload_id},
            headers={"Content-Type": XML_CONTENT_TYPE},
            body=getbytes(element),
        )
        return CompleteMultipartUploadResult.fromdict(
            self._parse_document(response, "completeMultipartUploadResult"),
        )

    @_logs_validation_error
    def abort_multipart_upload(self, key: str, upload_id: str):
        """
        Abort a multipart upload. Aborting an unknown upload raises
        ProtocolError; treat it as best-effort cleanup.
        """
        check_key(key)
        check_non_empty_string(upload_id, "upload_id")
        self._execute("DELETE", key, query={"uploadId": upload_id})
