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
ultralight_s3.signer
~~~~~~~~~~~~~~~~~~~~

This module implements AWS Signature version '4' for S3 requests.

Every helper is a pure function of its arguments; :func:`sign_v4_s3` copies
the caller's headers and returns a new :class:`SignedRequest`.

:license: Apache 2.0, see LICENSE for more details.

"""

from __future__ import absolute_import, annotations

import re
from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional
from urllib.parse import SplitResult, urlunsplit

from . import time
from .checksum import UNSIGNED_PAYLOAD, HashProvider, hex_string
from .helpers import queryencode, quote, url_replace

SIGN_V4_ALGORITHM = "AWS4-HMAC-SHA256"
_SERVICE_NAME = "s3"
_MULTI_SPACE_REGEX = re.compile(r"( +)")
_REPLACED_HEADERS = ("authorization", "host", "x-amz-date",
                     "x-amz-content-sha256")


@dataclass(frozen=True)
class SignedRequest:
    """Signed URL and headers of one request."""
    method: str
    url: str
    headers: dict[str, str]


def _get_scope(date: datetime, region: str, service_name: str) -> str:
    """Get scope string."""
    return f"{time.to_signer_date(date)}/{region}/{service_name}/aws4_request"


def _get_path(bucket_name: str, object_name: Optional[str] = None) -> str:
    """Get URI path of bucket and optional object."""
    path = "/" + quote(bucket_name, safe="")
    if object_name:
        path += "/" + quote(object_name)
    return path


def _get_canonical_headers(headers: Mapping[str, str]) -> tuple[str, str]:
    """Get canonical headers and signed headers."""

    ordered_headers = {}
    for key, value in headers.items():
        key = key.lower()
        if key not in (
                "authorization",
                "user-agent",
        ):
            ordered_headers[key] = _MULTI_SPACE_REGEX.sub(
                " ", str(value).strip(),
            )

    ordered_headers = OrderedDict(sorted(ordered_headers.items()))
    signed_headers = ";".join(ordered_headers.keys())
    canonical_headers = "\n".join(
        [f"{key}:{value}" for key, value in ordered_headers.items()],
    )
    return canonical_headers, signed_headers


def _get_canonical_query_string(query: Optional[Mapping[str, Any]]) -> str:
    """Get canonical query string, also used as the request URL query."""

    pairs = sorted(
        (queryencode(str(key)), queryencode(str(value)))
        for key, value in (query or {}).items()
    )
    return "&".join(f"{key}={value}" for key, value in pairs)


def _get_canonical_request_hash(  # pylint: disable=too-many-arguments
        method: str,
        path: str,
        canonical_query_string: str,
        headers: Mapping[str, str],
        content_sha256: str,
        hash_provider: HashProvider,
) -> tuple[str, str]:
    """Get canonical request hash and signed headers."""
    canonical_headers, signed_headers = _get_canonical_headers(headers)

    # CanonicalRequest =
    #   HTTPRequestMethod + '\n' +
    #   CanonicalURI + '\n' +
    #   CanonicalQueryString + '\n' +
    #   CanonicalHeaders + '\n\n' +
    #   SignedHeaders + '\n' +
    #   HexEncode(Hash(RequestPayload))
    canonical_request = (
        f"{method}\n"
        f"{path or '/'}\n"
        f"{canonical_query_string}\n"
        f"{canonical_headers}\n\n"
        f"{signed_headers}\n"
        f"{content_sha256}"
    )
    return hash_provider.digest(canonical_request), signed_headers


def _get_string_to_sign(
        date: datetime,
        scope: str,
        canonical_request_hash: str,
) -> str:
    """Get string-to-sign."""
    return (
        f"{SIGN_V4_ALGORITHM}\n{time.to_amz_date(date)}\n{scope}\n"
        f"{canonical_request_hash}"
    )


def _get_signing_key(
        secret_key: str,
        date: datetime,
        region: str,
        service_name: str,
        hash_provider: HashProvider,
) -> bytes:
    """Get signing key."""

    date_key = hash_provider.sign(
        "AWS4" + secret_key, time.to_signer_date(date),
    )
    date_region_key = hash_provider.sign(date_key, region)
    date_region_service_key = hash_provider.sign(date_region_key, service_name)
    return hash_provider.sign(date_region_service_key, "aws4_request")


def _get_signature(
        signing_key: bytes,
        string_to_sign: str,
        hash_provider: HashProvider,
) -> str:
    """Get signature."""
    return hex_string(hash_provider.sign(signing_key, string_to_sign))


def _get_authorization(
        access_key: str,
        scope: str,
        signed_headers: str,
        signature: str,
) -> str:
    """Get authorization."""
    return (
        f"{SIGN_V4_ALGORITHM} Credential={access_key}/{scope}, "
        f"SignedHeaders={signed_headers}, Signature={signature}"
    )


def get_content_sha256(
        body: Optional[str | bytes | bytearray],
        hash_provider: HashProvider,
) -> str:
    """Get payload hash; UNSIGNED-PAYLOAD for an empty body."""
    return hash_provider.digest(body) if body else UNSIGNED_PAYLOAD


def sign_v4_s3(  # pylint: disable=too-many-arguments,too-many-locals
        method: str,
        endpoint: SplitResult,
        bucket_name: str,
        object_name: Optional[str],
        query: Optional[Mapping[str, Any]],
        headers: Optional[Mapping[str, str]],
        body: Optional[str | bytes | bytearray],
        access_key: str,
        secret_key: str,
        region: str,
        hash_provider: HashProvider,
        date: Optional[datetime] = None,
) -> SignedRequest:
    """
    Do signature V4 of given request for S3 service.

    Headers named Authorization, Host, x-amz-date and x-amz-content-sha256
    in any letter case are replaced by computed values.
    """

    date = date or time.utcnow()
    path = _get_path(bucket_name, object_name)
    canonical_query_string = _get_canonical_query_string(query)
    url = url_replace(endpoint, path=path, query=canonical_query_string)
    content_sha256 = get_content_sha256(body, hash_provider)

    signed_headers_map = {
        key: str(value) for key, value in (headers or {}).items()
        if key.lower() not in _REPLACED_HEADERS
    }
    signed_headers_map["Host"] = url.netloc
    signed_headers_map["x-amz-content-sha256"] = content_sha256
    signed_headers_map["x-amz-date"] = time.to_amz_date(date)

    scope = _get_scope(date, region, _SERVICE_NAME)
    canonical_request_hash, signed_headers = _get_canonical_request_hash(
        method,
        path,
        canonical_query_string,
        signed_headers_map,
        content_sha256,
        hash_provider,
    )
    string_to_sign = _get_string_to_sign(date, scope, canonical_request_hash)
    signing_key = _get_signing_key(
        secret_key, date, region, _SERVICE_NAME, hash_provider,
    )
    signature = _get_signature(signing_key, string_to_sign, hash_provider)
    signed_headers_map["Authorization"] = _get_authorization(
        access_key, scope, signed_headers, signature,
    )
    return SignedRequest(
        method=method,
        url=urlunsplit(url),
        headers=signed_headers_map,
    )
