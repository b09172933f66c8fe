"""
MISSING marks a keyword argument the caller did not send.

Partial-update service methods compare against it with ``is`` so that an
explicit None (e.g. removing a break or a room) stays distinguishable from an
omitted field.
"""

import enum
from typing import Any


class _Missing(enum.Enum):
    MISSING = "MISSING"

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing.MISSING
