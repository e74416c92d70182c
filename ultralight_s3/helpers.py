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

# pylint: disable=too-many-lines

"""Helper functions."""

from __future__ import absolute_import, annotations

import re
import urllib.parse
from datetime import datetime
from typing import Any, Mapping, Optional

from . import time
from .error import ValidationError

MIN_PART_SIZE = 5 * 1024 * 1024  # 5MiB
MAX_MULTIPART_COUNT = 10000  # 10000 parts
LIST_TYPE = "2"
DEFAULT_CONTENT_TYPE = "application/octet-stream"
XML_CONTENT_TYPE = "application/xml"
REDACTED = "[REDACTED]"

_SENSITIVE_KEYS = {"accesskeyid", "secretaccesskey", "sessiontoken",
                   "password", "authorization"}
_CONDITIONAL_HEADERS = ("if-match", "if-none-match", "if-modified-since",
                        "if-unmodified-since")
_ETAG_QUOTES_REGEX = re.compile(
    r'(?:"|&quot;|&#34;)(.*)(?:"|&quot;|&#34;)', re.DOTALL,
)


def quote(
        resource: str,
        safe: str = "/",
        encoding: str | None = None,
        errors: str | None = None,
) -> str:
    """
    Percent-encode resource path. Only unreserved characters of RFC 3986
    and characters in safe are left as is.
    """
    return urllib.parse.quote(
        resource,
        safe=safe,
        encoding=encoding,
        errors=errors,
    ).replace("%7E", "~")


def queryencode(
        query: str,
        safe: str = "",
        encoding: str | None = None,
        errors: str | None = None,
) -> str:
    """Encode query parameter key or value; ! ' ( ) * are encoded too."""
    return quote(query, safe, encoding, errors)


def url_replace(
        url: urllib.parse.SplitResult,
        scheme: Optional[str] = None,
        netloc: Optional[str] = None,
        path: Optional[str] = None,
        query: Optional[str] = None,
        fragment: Optional[str] = None,
) -> urllib.parse.SplitResult:
    """Return new URL with replaced properties in given URL."""
    return urllib.parse.SplitResult(
        scheme if scheme is not None else url.scheme,
        netloc if netloc is not None else url.netloc,
        path if path is not None else url.path,
        query if query is not None else url.query,
        fragment if fragment is not None else url.fragment,
    )


def parse_endpoint(endpoint: str) -> urllib.parse.SplitResult:
    """Parse endpoint URL string; raise ValueError if it is not usable."""

    url = urllib.parse.urlsplit(endpoint.strip())

    if url.scheme.lower() not in ["http", "https"]:
        raise ValueError("scheme in endpoint must be http or https")

    url = url_replace(url, scheme=url.scheme.lower())

    if not url.hostname:
        raise ValueError("host in endpoint must not be empty")

    if url.path and url.path != "/":
        raise ValueError("path in endpoint is not allowed")

    url = url_replace(url, path="")

    if url.query:
        raise ValueError("query in endpoint is not allowed")

    if url.fragment:
        raise ValueError("fragment in endpoint is not allowed")

    try:
        url.port
    except ValueError as exc:
        raise ValueError("invalid port") from exc

    if url.username or url.password:
        raise ValueError("user info in endpoint is not allowed")

    return url


def headers_to_strings(
        headers: Mapping[str, str | list[str] | tuple[str]],
        titled_key: bool = False,
) -> str:
    """Convert HTTP headers to multi-line string with signature masked."""
    values = []
    for key, value in headers.items():
        key = key.title() if titled_key else key
        for item in value if isinstance(value, (list, tuple)) else [value]:
            item = re.sub(
                r"Credential=([^/]+)",
                "Credential=*REDACTED*",
                re.sub(r"Signature=([0-9a-f]+)", "Signature=*REDACTED*", item),
            )
            values.append(f"{key}: {item}")
    return "\n".join(values)


def sanitize_etag(etag: Optional[str]) -> Optional[str]:
    """
    Strip one pair of surrounding double quotes, or their HTML entity forms
    &quot; and &#34;, from an ETag value. A quote on one end only is kept.

    >>> sanitize_etag('"d41d8cd98f00b204e9800998ecf8427e"')
    'd41d8cd98f00b204e9800998ecf8427e'
    """
    if etag is None:
        return None
    match = _ETAG_QUOTES_REGEX.fullmatch(etag)
    return match.group(1) if match else etag


def sanitize_log_data(data: Any) -> Any:
    """Return a copy of data with credential-like entries redacted."""
    if isinstance(data, Mapping):
        return {
            key: (
                REDACTED
                if re.sub(r"[-_]", "", str(key)).lower() in _SENSITIVE_KEYS
                else sanitize_log_data(value)
            )
            for key, value in data.items()
        }
    if isinstance(data, (list, tuple)):
        return [sanitize_log_data(value) for value in data]
    return data


def split_conditional_headers(
        opts: Optional[Mapping[str, Any]],
) -> tuple[dict[str, str], dict[str, str]]:
    """
    Split conditional request options (If-Match, If-None-Match,
    If-Modified-Since and If-Unmodified-Since) from query parameters.
    """
    headers: dict[str, str] = {}
    query: dict[str, str] = {}
    for key, value in (opts or {}).items():
        if key.lower() in _CONDITIONAL_HEADERS:
            headers[key.lower()] = (
                time.to_http_header(value) if isinstance(value, datetime)
                else str(value)
            )
        else:
            query[key] = str(value)
    return headers, query


def check_non_empty_string(value: Any, name: str):
    """Check value is a non-empty string."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{name} must be a non-empty string")


def check_key(key: Any):
    """Check object key."""
    check_non_empty_string(key, "key")


def check_string(value: Any, name: str):
    """Check value is a string, empty allowed."""
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be a string")


def check_positive_integer(value: Any, name: str):
    """Check value is a positive int, bool excluded."""
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"{name} must be a positive integer")


def check_opts(opts: Any):
    """Check optional options mapping."""
    if opts is not None and not isinstance(opts, Mapping):
        raise ValidationError("opts must be a mapping")


def check_data(data: Any):
    """Check object data."""
    if not isinstance(data, (str, bytes, bytearray)):
        raise ValidationError("data must be bytes, bytearray or string")
