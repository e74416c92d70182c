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
XML encoding and decoding functions.

:func:`decode` turns an S3 XML document into nested dicts, lists, strings
and booleans::

    >>> decode("<Result><Key>a</Key><Key>b</Key><Empty/></Result>")
    {'result': {'key': ['a', 'b'], 'empty': True}}

Tag names become keys with the first character lower-cased, text is
unescaped, an empty self-closing element becomes ``True`` and repeated
siblings become a list. Names given in ``always_array`` are lists even
when a single sibling is present.
"""

from __future__ import annotations

import io
import re
from typing import Any, Iterable, Optional, Union
from xml.etree import ElementTree as ET

_S3_NAMESPACE = "http://s3.amazonaws.com/doc/2006-03-01/"

_TOKEN_REGEX = re.compile(
    r"<!\[CDATA\[(?P<cdata>.*?)\]\]>"
    r"|<!--.*?-->"
    r"|<\?.*?\?>"
    r"|<![^>]*>"
    r"|<(?P<close>/)?\s*(?P<name>[^\s/<>]+)"
    r"(?:\"[^\"]*\"|'[^']*'|[^'\"<>])*?(?P<selfclose>/)?\s*>"
    r"|(?P<text>[^<]+)",
    re.DOTALL,
)
_ENTITY_REGEX = re.compile(
    r"&(?:(?P<name>quot|apos|lt|gt|amp)|#(?P<dec>\d+)|#[xX](?P<hex>[0-9a-fA-F]+));"
)
_ENTITIES = {"quot": '"', "apos": "'", "lt": "<", "gt": ">", "amp": "&"}

_START, _END, _EMPTY, _TEXT = range(4)

Value = Union[str, bool, dict, list]


def unescape(text: str) -> str:
    """Replace predefined and numeric XML entities in text."""

    def _replace(match: re.Match) -> str:
        if match.group("name"):
            return _ENTITIES[match.group("name")]
        if match.group("dec"):
            return chr(int(match.group("dec")))
        return chr(int(match.group("hex"), 16))

    return _ENTITY_REGEX.sub(_replace, text)


def _key(name: str) -> str:
    """Drop namespace prefix and lower-case the first character."""
    name = name.rsplit(":", 1)[-1]
    return name[:1].lower() + name[1:]


def _tokenize(text: str) -> list[tuple[int, str]]:
    """Split XML text into start, end, empty element and text tokens."""
    tokens = []
    pos = 0
    while pos < len(text):
        match = _TOKEN_REGEX.match(text, pos)
        if not match:
            raise ValueError(f"malformed XML at position {pos}")
        pos = match.end()
        if match.group("cdata") is not None:
            tokens.append((_TEXT, match.group("cdata")))
        elif match.group("text") is not None:
            tokens.append((_TEXT, unescape(match.group("text"))))
        elif match.group("name"):
            if match.group("close"):
                tokens.append((_END, match.group("name")))
            elif match.group("selfclose"):
                tokens.append((_EMPTY, match.group("name")))
            else:
                tokens.append((_START, match.group("name")))
        # comments, declarations and processing instructions are skipped
    return tokens


class _Parser:
    """Recursive-descent parser over the token list."""

    def __init__(self, tokens: list[tuple[int, str]], always_array: set[str]):
        self._tokens = tokens
        self._index = 0
        self._always_array = always_array

    def _add(self, children: dict[str, Value], name: str, value: Value):
        key = _key(name)
        if key in self._always_array:
            children.setdefault(key, []).append(value)  # type: ignore
        elif key not in children:
            children[key] = value
        elif isinstance(children[key], list):
            children[key].append(value)  # type: ignore
        else:
            children[key] = [children[key], value]

    def parse(self, end_name: Optional[str] = None) -> Value:
        """Parse content up to the end tag of end_name, or to end of input."""
        children: dict[str, Value] = {}
        texts: list[str] = []
        has_elements = False
        while self._index < len(self._tokens):
            kind, value = self._tokens[self._index]
            self._index += 1
            if kind == _TEXT:
                texts.append(value)
            elif kind == _EMPTY:
                has_elements = True
                self._add(children, value, True)
            elif kind == _START:
                has_elements = True
                self._add(children, value, self.parse(value))
            elif value != end_name:
                raise ValueError(f"unexpected closing tag </{value}>")
            else:
                return children if has_elements else "".join(texts)
        if end_name is not None:
            raise ValueError(f"unclosed tag <{end_name}>")
        return children if has_elements else "".join(texts)


def decode(
        data: str | bytes,
        always_array: Iterable[str] = ("contents",),
) -> Value:
    """Decode XML text or UTF-8 bytes into nested Python values."""
    text = data.decode("utf-8") if isinstance(data, bytes) else data
    parser = _Parser(_tokenize(text), {_key(name) for name in always_array})
    return parser.parse()


def Element(  # pylint: disable=invalid-name
    tag: str,
    namespace: str = _S3_NAMESPACE,
) -> ET.Element:
    """Create ElementTree.Element with tag and namespace."""
    return ET.Element(tag, {"xmlns": namespace} if namespace else {})


def SubElement(  # pylint: disable=invalid-name
    parent: ET.Element, tag: str, text: Optional[str] = None
) -> ET.Element:
    """Create ElementTree.SubElement on parent with tag and text."""
    element = ET.SubElement(parent, tag)
    if text is not None:
        element.text = text
    return element


def getbytes(element: ET.Element) -> bytes:
    """Convert ElementTree.Element to bytes."""
    with io.BytesIO() as data:
        ET.ElementTree(element).write(
            data,
            encoding=None,
            xml_declaration=False,
        )
        return data.getvalue()


def find_error(document: Any) -> Optional[dict]:
    """Return the decoded ``Error`` element of a document, if any."""
    if isinstance(document, dict) and isinstance(document.get("error"), dict):
        return document["error"]
    return None
