from __future__ import annotations

import re
from typing import Any

from garage_api.errors import InvalidInput

_EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_RE.match(email))


def missing(record: Any, *fields: str) -> list[str]:
    return [
        f"{field.replace('_', ' ')} is required" for field in fields if not getattr(record, field)
    ]


def raise_if(problems: list[str]) -> None:
    # One error listing every problem, so clients can fix a payload in one round trip.
    if problems:
        raise InvalidInput("; ".join(problems))
