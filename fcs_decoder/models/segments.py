from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Tuple

from fcs_decoder.errors import OffsetParseError


Segment = Tuple[int, int]


@dataclass(frozen=True)
class SegmentOffsets:
    """
    Inclusive byte ranges of the TEXT, DATA and ANALYSIS segments.

    Notes
    - All offsets are non-negative and relative to the start of the file.
    - A ``(0, 0)`` pair means "absent". ANALYSIS is frequently absent.
    - ``(0, 0)`` for DATA means the true range did not fit in the 8-digit
      HEADER fields and must be taken from ``$BEGINDATA`` / ``$ENDDATA``.
    """
    text_start: int
    text_end: int
    data_start: int
    data_end: int
    analysis_start: int = 0
    analysis_end: int = 0

    def __post_init__(self) -> None:
        for name, value in zip(_FIELDS, self.as_tuple()):
            if value < 0:
                raise OffsetParseError(f"{name} offset is negative ({value})")
        for label, (start, end) in (("TEXT", self.text), ("DATA", self.data), ("ANALYSIS", self.analysis)):
            if (start, end) != (0, 0) and start > end:
                raise OffsetParseError(f"{label} segment starts after it ends ({start} > {end})")

    def as_tuple(self) -> Tuple[int, int, int, int, int, int]:
        return (
            self.text_start,
            self.text_end,
            self.data_start,
            self.data_end,
            self.analysis_start,
            self.analysis_end,
        )

    @property
    def text(self) -> Segment:
        return (self.text_start, self.text_end)

    @property
    def data(self) -> Segment:
        return (self.data_start, self.data_end)

    @property
    def analysis(self) -> Segment:
        return (self.analysis_start, self.analysis_end)

    @property
    def data_overflowed(self) -> bool:
        """True when the HEADER left both DATA offsets at zero."""
        return self.data_start == 0 and self.data_end == 0

    @property
    def has_analysis(self) -> bool:
        return self.analysis != (0, 0)

    def with_data(self, start: int, end: int) -> "SegmentOffsets":
        return replace(self, data_start=int(start), data_end=int(end))


_FIELDS = ("text_start", "text_end", "data_start", "data_end", "analysis_start", "analysis_end")


@dataclass(frozen=True)
class FcsHeader:
    """Parsed HEADER segment: version tag plus segment offsets."""
    version: str
    offsets: SegmentOffsets
    warnings: Tuple[str, ...] = ()
