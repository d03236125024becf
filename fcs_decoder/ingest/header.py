from __future__ import annotations

import logging
import re
import warnings as _warnings
from typing import BinaryIO, List, Mapping, Optional

from fcs_decoder.errors import MissingKeywordError, OffsetParseError, UnsupportedVersionWarning
from fcs_decoder.ingest.config import FcsReaderConfig
from fcs_decoder.ingest.source import read_exact
from fcs_decoder.ingest.text import TextSegmentParser
from fcs_decoder.models.segments import FcsHeader, SegmentOffsets


logger = logging.getLogger(__name__)

SUPPORTED_VERSIONS = ("FCS3.0", "FCS3.1")

_VERSION_SIZE = 6
_OFFSETS_AT = 10
_FIELD_SIZE = 8
_N_FIELDS = 6
# fields 4 and 5 (0-based) are the ANALYSIS pair
_FIRST_OPTIONAL_FIELD = 4

_DIGITS = re.compile(r"\d+", flags=re.ASCII)


def parse_offset(value: str, what: str) -> int:
    """Parse a whitespace-padded ASCII decimal offset."""
    txt = value.strip()
    if not _DIGITS.fullmatch(txt):
        raise OffsetParseError(f"{what}: {value!r} is not a valid byte offset")
    return int(txt)


class HeaderReader:
    """
    Reader for the fixed-layout HEADER segment.

    Layout:
      - bytes 0-5: version tag (FCS3.0 and FCS3.1 are recognized; others only warn)
      - bytes 10-57: six 8-character ASCII integers, TEXT / DATA / ANALYSIS start and end

    Blank ANALYSIS fields read as 0. When both DATA offsets are 0 the DATA
    segment is too large for the HEADER and its range is taken from the
    $BEGINDATA / $ENDDATA keywords of the TEXT segment.
    """

    def __init__(
        self,
        config: Optional[FcsReaderConfig] = None,
        text_parser: Optional[TextSegmentParser] = None,
    ):
        self.config = config or FcsReaderConfig()
        self.text_parser = text_parser or TextSegmentParser(self.config)

    def read(self, source: BinaryIO) -> FcsHeader:
        warnings: List[str] = []

        raw_version = read_exact(source, 0, _VERSION_SIZE, "HEADER version")
        version = raw_version.decode("ascii", errors="replace")
        if version not in SUPPORTED_VERSIONS:
            msg = f"{version} files are not guaranteed to work"
            _warnings.warn(msg, UnsupportedVersionWarning, stacklevel=2)
            warnings.append(msg)

        raw = read_exact(source, _OFFSETS_AT, _FIELD_SIZE * _N_FIELDS, "HEADER offsets")
        values: List[int] = []
        for i in range(_N_FIELDS):
            field = raw[i * _FIELD_SIZE:(i + 1) * _FIELD_SIZE].decode("ascii", errors="replace")
            # some cytometers reserve the ANALYSIS bytes but leave them blank
            if i >= _FIRST_OPTIONAL_FIELD and not field.strip():
                values.append(0)
                continue
            values.append(parse_offset(field, f"HEADER field {i + 1}"))

        offsets = SegmentOffsets(*values)
        if offsets.data_overflowed:
            offsets = self._recover_data_offsets(source, offsets)
            warnings.append(
                f"DATA offsets taken from $BEGINDATA/$ENDDATA: [{offsets.data_start}, {offsets.data_end}]"
            )

        logger.debug("HEADER %s: offsets=%s", version, offsets.as_tuple())
        return FcsHeader(version=version, offsets=offsets, warnings=tuple(warnings))

    def _recover_data_offsets(self, source: BinaryIO, offsets: SegmentOffsets) -> SegmentOffsets:
        keywords = self.text_parser.parse(source, offsets.text_start, offsets.text_end)
        start = _keyword_offset(keywords, "$BEGINDATA")
        end = _keyword_offset(keywords, "$ENDDATA")
        return offsets.with_data(start, end)


def _keyword_offset(keywords: Mapping[str, str], key: str) -> int:
    if key not in keywords:
        raise MissingKeywordError(key)
    return parse_offset(keywords[key], key)


def read_segment_offsets(source: BinaryIO, config: Optional[FcsReaderConfig] = None) -> SegmentOffsets:
    """Return the six segment offsets of an open FCS stream."""
    return HeaderReader(config).read(source).offsets
