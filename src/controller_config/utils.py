from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

__all__ = ["_frozen_data", "EMPTY_DATA"]

EMPTY_DATA: Mapping[str, str] = MappingProxyType({})


def _frozen_data(data: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    """Return a read-only copy of a config map's data; None becomes empty."""
    if not data:
        return EMPTY_DATA
    return MappingProxyType(dict(data))
