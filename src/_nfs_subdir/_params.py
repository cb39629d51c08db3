# Copyright 2025 The NFS Subdir Provisioner Project
# See LICENSE file for licensing details.

"""Parsing and bounds checking for mode, id and boolean parameters."""

import re

from _nfs_subdir._constants import DEFAULT_MODE, MAX_ID, MAX_MODE
from _nfs_subdir._errors import InvalidParameterError

_OCTAL_RE = re.compile(r"[+-]?[0-7]+")
_DECIMAL_RE = re.compile(r"[+-]?[0-9]+")

_TRUE_VALUES = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_VALUES = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def parse_mode(mode: str) -> int:
    """Parse an octal permission string, defaulting to 0777 when empty."""
    if mode == "":
        return DEFAULT_MODE
    if not _OCTAL_RE.fullmatch(mode):
        raise InvalidParameterError(f"invalid mode {mode}: not an octal number")
    value = int(mode, 8)
    if value < 0 or value > MAX_MODE:
        raise InvalidParameterError(f"mode must be between 0 and 0777, got {mode}")
    return value


def parse_id(value: str) -> int:
    """Parse a decimal uid/gid, defaulting to 0 (root) when empty."""
    if value == "":
        return 0
    if not _DECIMAL_RE.fullmatch(value):
        raise InvalidParameterError(f"invalid id {value}: not a decimal number")
    parsed = int(value, 10)
    if parsed < 0 or parsed > MAX_ID:
        raise InvalidParameterError(f"id must be between 0 and {MAX_ID}, got {value}")
    return parsed


def parse_bool(value: str) -> bool:
    """Parse 1/0, t/f or true/false (lower, upper or title case)."""
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise InvalidParameterError(f"invalid boolean {value!r}")
