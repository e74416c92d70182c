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
ultralight_s3 - Light S3 client for S3 compatible object storage

    >>> from ultralight_s3 import S3
    >>> client = S3(
    ...     access_key_id="Q3AM3UQ867SPQQA43P2F",
    ...     secret_access_key="zuf+tfteSlswRu7BJ86wekitnifILbZam1KYY3TG",
    ...     endpoint="https://play.min.io",
    ...     bucket_name="my-bucket",
    ... )
    >>> result = client.put("hello.txt", "Hello")
    >>> for entry in client.list():
    ...     print(entry["key"], entry["size"])

:license: Apache 2.0, see LICENSE for more details.
"""

import logging

__title__ = "ultralight-s3"
__author__ = "Ultralight S3 Authors"
__version__ = "0.1.0"
__license__ = "Apache 2.0"
__copyright__ = "Copyright 2026 Ultralight S3 Authors"

logging.getLogger(__name__).addHandler(logging.NullHandler())

# pylint: disable=unused-import,useless-import-alias,wrong-import-position
from .api import S3 as S3
from .checksum import HashProvider as HashProvider
from .checksum import Sha256HashProvider as Sha256HashProvider
from .config import ClientConfig as ClientConfig
from .config import Logger as Logger
from .datatypes import Part as Part
from .error import ConfigurationError as ConfigurationError
from .error import InvalidResponseError as InvalidResponseError
from .error import ProtocolError as ProtocolError
from .error import S3Exception as S3Exception
from .error import ValidationError as ValidationError
from .helpers import sanitize_etag as sanitize_etag
