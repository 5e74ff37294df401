"""Reusable regular expressions and named string formats.

Every pattern here can be used directly as a field's ``regex`` constraint::

    from schemakit import Schema, String
    from schemakit.patterns import EMAIL

    schema = Schema({"email": {"type": String, "regex": EMAIL}})

The :data:`FORMATS` registry backs the ``format`` constraint.
"""

import re
from typing import Callable

ALPHA = re.compile(r"^[a-zA-Z]+$")

ALPHANUMERIC = re.compile(r"^[a-zA-Z0-9]+$")

# Alphanumeric plus "_" and "-"
EXT_ALPHANUMERIC = re.compile(r"^[a-zA-Z0-9_-]+$")

EMAIL = re.compile(
    r"^([\w-]+(?:\.[\w-]+)*)@((?:[\w-]+\.)*\w[\w-]{0,66})\.([a-z]{2,6}(?:\.[a-z]{2})?)$",
    re.IGNORECASE,
)

IPV4 = re.compile(
    r"^((25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\.){3}(25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)$"
)

IPV6 = re.compile(r"^([0-9A-Fa-f]{1,4})?::?([0-9A-Fa-f]{1,4})?(:[0-9A-Fa-f]{1,4}){0,7}$")

HOSTNAME = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9-.]{1,61}[a-zA-Z0-9](?:\.[a-zA-Z]{2,})+$")

DATE = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])-(0[1-9]|1[0-9]|2[0-9]|3[0-1])$")

DATE_TIME = re.compile(
    r"^(\d{4})-(0[1-9]|1[0-2])-(0[1-9]|1[0-9]|2[0-9]|3[0-1])"
    r"T(0[0-9]|1[0-9]|2[0-3]):([0-5][0-9]):([0-5][0-9])(\.[0-9]{1,3})?"
    r"(?:Z|[+-](0[0-9]|1[0-9]|2[0-3]):([0-5][0-9]))?$"
)

TIME = re.compile(
    r"^(0[0-9]|1[0-9]|2[0-3]):([0-5][0-9]):([0-5][0-9])(\.[0-9]{1,3})?"
    r"(?:Z|[+-](0[0-9]|1[0-9]|2[0-3]):([0-5][0-9]))$"
)

URI = re.compile(
    r"^(mailto:|news:|tel:|urn:|[^ :/?#\r\n]+://)([^ /?#\r\n]+)([^ ?#\r\n]*)(\?[^ #\r\n]*)?(#(.*))?$"
)

UUID = re.compile(r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$")

FormatValidator = Callable[[str], bool]


def _matches(pattern: re.Pattern[str]) -> FormatValidator:
    return lambda value: pattern.match(value) is not None


FORMATS: dict[str, FormatValidator] = {
    "date": _matches(DATE),
    "date-time": _matches(DATE_TIME),
    "email": _matches(EMAIL),
    "hostname": _matches(HOSTNAME),
    "ipv4": _matches(IPV4),
    "ipv6": _matches(IPV6),
    "time": _matches(TIME),
    "uri": _matches(URI),
    "uuid": _matches(UUID),
}
