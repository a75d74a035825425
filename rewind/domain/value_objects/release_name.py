"""
Release Name Value Object

Architectural Intent:
- Immutable, validated identifier of a release
- Same rules as a DNS subdomain label set, capped so derived object names fit
"""

import re
from dataclasses import dataclass

MAX_RELEASE_NAME_LENGTH = 53

_RELEASE_NAME_RE = re.compile(
    r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*$"
)


def is_valid_release_name(name: str) -> bool:
    if not name or len(name) > MAX_RELEASE_NAME_LENGTH:
        return False
    return bool(_RELEASE_NAME_RE.match(name))


@dataclass(frozen=True)
class ReleaseName:
    """
    Value Object representing the name of a release.
    """
    value: str

    def __post_init__(self) -> None:
        if not is_valid_release_name(self.value):
            raise ValueError(f"Invalid release name: {self.value!r}")

    def __str__(self) -> str:
        return self.value
