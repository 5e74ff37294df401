"""Bracketed field path parsing.

Paths address fields of nested schemas::

    "phone"                  -> [FieldName("phone")]
    "phone[number]"          -> [FieldName("phone"), FieldName("number")]
    "[phone][number]"        -> same as above
    "items[0][price]"        -> [FieldName("items"), ArrayIndex(0), FieldName("price")]
"""

import re
from dataclasses import dataclass
from typing import Union

from .errors import InvalidPathError


@dataclass(frozen=True)
class FieldName:
    name: str


@dataclass(frozen=True)
class ArrayIndex:
    index: int


PathToken = Union[FieldName, ArrayIndex]

_SEGMENT = re.compile(r"\[([^\[\]]*)\]")
_INDEX = re.compile(r"[0-9]+")


def _token(segment: str) -> PathToken:
    if _INDEX.fullmatch(segment):
        return ArrayIndex(int(segment))
    return FieldName(segment)


def parse_path(path: str) -> list[PathToken]:
    """Split a bracketed path into tokens.

    Raises:
        InvalidPathError: If the path is empty, has unbalanced brackets or
            contains an empty segment.
    """
    if not path:
        raise InvalidPathError(path, "Empty path")

    opening = path.count("[")
    closing = path.count("]")
    if opening > closing:
        raise InvalidPathError(path, "Missing closing ']'")
    if closing > opening:
        raise InvalidPathError(path, "Missing opening '['")

    head, bracket, rest = path.partition("[")
    tokens: list[PathToken] = []
    if head:
        if "]" in head:
            raise InvalidPathError(path, "Missing opening '['")
        tokens.append(FieldName(head))

    if bracket:
        rest = bracket + rest
        position = 0
        for match in _SEGMENT.finditer(rest):
            if match.start() != position:
                raise InvalidPathError(path, "Unexpected characters between brackets")
            if not match.group(1):
                raise InvalidPathError(path, "Empty segment")
            tokens.append(_token(match.group(1)))
            position = match.end()
        if position != len(rest):
            raise InvalidPathError(path, "Unexpected characters after ']'")

    return tokens
