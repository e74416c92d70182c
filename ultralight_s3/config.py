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

"""Client configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional
from urllib.parse import SplitResult

from typing_extensions import Protocol, runtime_checkable

from .checksum import HashProvider, Sha256HashProvider
from .error import ConfigurationError
from .helpers import MIN_PART_SIZE, parse_endpoint


@runtime_checkable
class Logger(Protocol):
    """Logging capability accepted by the client, e.g. logging.Logger."""

    def info(self, msg: Any, *args: Any, **kwargs: Any) -> Any:
        """Log an informational entry."""

    def warning(self, msg: Any, *args: Any, **kwargs: Any) -> Any:
        """Log a warning entry."""

    def error(self, msg: Any, *args: Any, **kwargs: Any) -> Any:
        """Log an error entry."""


@dataclass(frozen=True)
class ClientConfig:
    """
    Validated, immutable client settings.

    =========================  ============================================
    Field                      Default
    =========================  ============================================
    access_key_id              required, non-empty string
    secret_access_key          required, non-empty string
    endpoint                   required, http or https URL without path
    bucket_name                required, non-empty string
    region                     ``"auto"``
    max_request_size_in_bytes  5 MiB, must not be lower
    request_abort_timeout_ms   None (no per-request deadline)
    logger                     None (``ultralight_s3`` package logger)
    hash_provider              None (:class:`Sha256HashProvider`)
    =========================  ============================================
    """

    access_key_id: str
    secret_access_key: str = field(repr=False)
    endpoint: str
    bucket_name: str
    region: str = "auto"
    max_request_size_in_bytes: int = MIN_PART_SIZE
    request_abort_timeout_ms: Optional[float] = None
    logger: Optional[Logger] = field(default=None, compare=False)
    hash_provider: Optional[HashProvider] = field(default=None, compare=False)
    endpoint_url: SplitResult = field(
        init=False, repr=False, compare=False,
    )

    def __post_init__(self):
        for name in ("access_key_id", "secret_access_key", "endpoint",
                     "bucket_name", "region"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ConfigurationError(f"{name} must be a non-empty string")

        try:
            object.__setattr__(
                self, "endpoint_url", parse_endpoint(self.endpoint),
            )
        except ValueError as exc:
            raise ConfigurationError(f"invalid endpoint; {exc}") from exc

        size = self.max_request_size_in_bytes
        if isinstance(size, bool) or not isinstance(size, int):
            raise ConfigurationError(
                "max_request_size_in_bytes must be an integer",
            )
        if size < MIN_PART_SIZE:
            raise ConfigurationError(
                f"max_request_size_in_bytes must be at least {MIN_PART_SIZE}",
            )

        timeout = self.request_abort_timeout_ms
        if timeout is not None and (
                isinstance(timeout, bool) or
                not isinstance(timeout, (int, float)) or timeout <= 0
        ):
            raise ConfigurationError(
                "request_abort_timeout_ms must be a positive number",
            )

        if self.logger is not None and not isinstance(self.logger, Logger):
            raise ConfigurationError(
                "logger must provide info, warning and error methods",
            )

        if self.hash_provider is None:
            object.__setattr__(self, "hash_provider", Sha256HashProvider())
        elif not isinstance(self.hash_provider, HashProvider):
            raise ConfigurationError(
                "hash_provider must be an instance of HashProvider",
            )
