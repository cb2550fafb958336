"""Exception types shared by the coordinate converter, loaders, and sweep."""

from __future__ import annotations


class CoordinateError(ValueError):
    """Base class for coordinates rejected by the converter."""


class OutOfRange(CoordinateError):
    """A coordinate component lies outside the function's domain.

    This is always a caller bug and is never recovered from.
    """

    def __init__(self, name: str, value: int, minimum: int, maximum: int) -> None:
        super().__init__(f"{name}: {value} (expected {minimum}..{maximum})")
        self.name = name
        self.value = value


class InvalidRegion(CoordinateError):
    """A coordinate falls in a reserved block of the standard.

    Sweeps over fixed blocks treat this as "skip this coordinate".
    """

    def __init__(self, plane: int, row: int) -> None:
        super().__init__(f"plane {plane}, row {row} is reserved")
        self.plane = plane
        self.row = row


class LookupParseSkipped(ValueError):
    """One exception-table line could not be parsed and was skipped."""

    def __init__(self, line_number: int, line: str) -> None:
        super().__init__(f"line {line_number}: unparsable entry {line!r}")
        self.line_number = line_number
        self.line = line
