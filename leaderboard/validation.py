"""Submission sanity checks applied before scores reach the cache."""

from __future__ import annotations

import re
from typing import Any

_NAME_RE = re.compile(r"^[A-Za-z0-9 ]+$")


class ValidationError(Exception):
    pass


def clean_name(v: Any, *, max_len: int = 12) -> str:
    if not isinstance(v, str):
        raise ValidationError("Invalid Name")
    name = v.strip()[:max_len]
    if not name or not _NAME_RE.match(name):
        raise ValidationError("Invalid Name")
    return name


def clean_score(v: Any, *, lo: int = 0, hi: int = 200) -> int:
    # bool is an int subclass; reject it along with floats and strings.
    if isinstance(v, bool) or not isinstance(v, int):
        raise ValidationError("Invalid Score")
    if v < lo or v > hi:
        raise ValidationError("Invalid Score")
    return v


def parse_submission(body: Any, *, max_len: int = 12, lo: int = 0, hi: int = 200) -> tuple[str, int]:
    if not isinstance(body, dict):
        raise ValidationError("body must be object")
    return clean_name(body.get("name"), max_len=max_len), clean_score(body.get("score"), lo=lo, hi=hi)
