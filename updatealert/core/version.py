"""Dotted version identifiers and numeric comparison.

Catalog versions and OS versions are plain dotted integers ("2.4.1",
"13.0"). Comparison is numeric per component, never lexicographic, and
missing trailing components count as zero: "1.2" == "1.2.0".
"""

from dataclasses import dataclass, field
from enum import Enum
from itertools import zip_longest

from packaging.version import Version, InvalidVersion


class ParseFailure(ValueError):
    """Raised when a string is not a plain dotted version."""


class Ordering(Enum):
    LESS = -1
    EQUAL = 0
    GREATER = 1


@dataclass(frozen=True, eq=False)
class VersionIdentifier:
    """Immutable sequence of non-negative integer components."""

    components: tuple[int, ...]
    text: str = field(default="", compare=False)

    @staticmethod
    def parse(raw: str) -> 'VersionIdentifier':
        """Parse "2.4.1" (or "v2.4.1"). Raises ParseFailure on anything else.

        Pre-releases, post-releases, dev builds, local labels and epochs are
        rejected: a catalog never publishes those as the current version.
        """
        if not isinstance(raw, str):
            raise ParseFailure(f"Version must be a string, got {type(raw).__name__}")
        text = raw.strip()
        if text[:1] in ('v', 'V'):
            text = text[1:]
        if not text[:1].isdigit():
            raise ParseFailure(f"Invalid version: {raw!r}")
        try:
            parsed = Version(text)
        except InvalidVersion as e:
            raise ParseFailure(f"Invalid version: {raw!r}") from e
        if parsed.epoch or str(parsed) != parsed.base_version:
            raise ParseFailure(f"Not a plain release version: {raw!r}")
        return VersionIdentifier(components=tuple(parsed.release), text=text)

    def _normalized(self) -> tuple[int, ...]:
        parts = list(self.components)
        while parts and parts[-1] == 0:
            parts.pop()
        return tuple(parts) or (0,)

    def __eq__(self, other):
        if not isinstance(other, VersionIdentifier):
            return NotImplemented
        return compare(self, other) is Ordering.EQUAL

    def __hash__(self):
        return hash(self._normalized())

    def __str__(self):
        return self.text or ".".join(str(c) for c in self.components)


def compare(a: VersionIdentifier, b: VersionIdentifier) -> Ordering:
    """Compare component-wise after zero-padding the shorter side."""
    for left, right in zip_longest(a.components, b.components, fillvalue=0):
        if left < right:
            return Ordering.LESS
        if left > right:
            return Ordering.GREATER
    return Ordering.EQUAL
