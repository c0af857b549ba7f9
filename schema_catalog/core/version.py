"""
Version identity for schema snapshots.

A version string decodes into one of three kinds, tried in this order:

- **Semver**: semantic versions (``1.0.0``, ``2.1.0-beta.1``)
- **Date**: ISO calendar days (``2024-01-15``)
- **Custom**: any other string, compared lexicographically

Versions of different kinds order by kind precedence (Semver < Date < Custom).
Within a kind the natural order applies: semver precedence, calendar order,
string order.
"""

import functools
import re
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Iterable, List, Optional, Tuple

from .date_only import encode_date_only, parse_date_only

SEMVER_PATTERN = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)


class VersionKind(Enum):
    """Kinds of version identifiers, in precedence order."""

    SEMVER = "semver"
    DATE = "date"
    CUSTOM = "custom"


_KIND_PRECEDENCE = {
    VersionKind.SEMVER: 0,
    VersionKind.DATE: 1,
    VersionKind.CUSTOM: 2,
}


@dataclass(frozen=True)
class Semver:
    """Parsed semantic version."""

    major: int
    minor: int
    patch: int
    prerelease: Tuple[Any, ...] = ()
    build: Tuple[str, ...] = ()

    @classmethod
    def parse(cls, value: str) -> Optional["Semver"]:
        match = SEMVER_PATTERN.match(value)
        if not match:
            return None
        major, minor, patch, prerelease, build = match.groups()
        return cls(
            major=int(major),
            minor=int(minor),
            patch=int(patch),
            prerelease=tuple(
                int(part) if part.isdigit() else part
                for part in prerelease.split(".")
            )
            if prerelease
            else (),
            build=tuple(build.split(".")) if build else (),
        )

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    def precedence_key(self) -> tuple:
        """
        Sort key implementing semver precedence.

        Build metadata is ignored. A pre-release sorts before its release;
        numeric identifiers sort before alphanumeric ones.
        """
        if not self.prerelease:
            return (self.major, self.minor, self.patch, 1, ())
        identifiers = tuple(
            (0, part, "") if isinstance(part, int) else (1, 0, part)
            for part in self.prerelease
        )
        return (self.major, self.minor, self.patch, 0, identifiers)


@functools.total_ordering
class Version:
    """
    Immutable version identifier.

    Keeps the parsed value next to the original string so ``encode`` is
    lossless.
    """

    __slots__ = ("kind", "value", "raw")

    def __init__(self, kind: VersionKind, value: Any, raw: str):
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "value", value)
        object.__setattr__(self, "raw", raw)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Version objects are immutable")

    @classmethod
    def decode(cls, value: Any) -> "Version":
        """
        Decode a version string.

        Never fails for strings: anything that is neither semver nor a date
        becomes a Custom version.

        Examples:
            >>> Version.decode("1.2.0").kind
            <VersionKind.SEMVER: 'semver'>
            >>> Version.decode("2024-01-15").kind
            <VersionKind.DATE: 'date'>
            >>> Version.decode("beta").kind
            <VersionKind.CUSTOM: 'custom'>
        """
        if isinstance(value, Version):
            return value
        if isinstance(value, date):
            return cls.from_date(value)
        if not isinstance(value, str):
            if isinstance(value, int) and not isinstance(value, bool):
                value = str(value)
            else:
                raise TypeError(f"Cannot decode version from {type(value).__name__}")

        semver = Semver.parse(value)
        if semver is not None:
            return cls(VersionKind.SEMVER, semver, value)

        day = parse_date_only(value)
        if day is not None:
            return cls(VersionKind.DATE, day, value)

        return cls(VersionKind.CUSTOM, value, value)

    @classmethod
    def from_date(cls, value: date) -> "Version":
        return cls(VersionKind.DATE, value, encode_date_only(value))

    def encode(self) -> str:
        return self.raw

    def sort_key(self) -> tuple:
        if self.kind is VersionKind.SEMVER:
            inner: Any = self.value.precedence_key()
        else:
            inner = self.value
        return (_KIND_PRECEDENCE[self.kind], inner)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.kind is other.kind and self.sort_key() == other.sort_key()

    def __lt__(self, other: Any) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __hash__(self) -> int:
        return hash(self.sort_key())

    def __str__(self) -> str:
        return self.raw

    def __repr__(self) -> str:
        return f"Version({self.kind.value}, {self.raw!r})"


def decode(value: Any) -> Version:
    """Decode a version string into a Version."""
    return Version.decode(value)


def encode(version: Version) -> str:
    """Return the original string of a version."""
    return version.encode()


def order(a: Version, b: Version) -> int:
    """
    Compare two versions.

    Returns:
        -1 when ``a`` sorts before ``b``, 1 when after, 0 when equivalent.
    """
    key_a, key_b = a.sort_key(), b.sort_key()
    if key_a < key_b:
        return -1
    if key_a > key_b:
        return 1
    return 0


def sort_versions(versions: Iterable[Version], newest_first: bool = False) -> List[Version]:
    """Sort versions ascending, or newest first when requested."""
    return sorted(versions, key=lambda version: version.sort_key(), reverse=newest_first)
