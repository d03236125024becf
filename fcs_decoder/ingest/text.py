from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import BinaryIO, Dict, List, Mapping, Optional, Tuple

from fcs_decoder.errors import CorruptTextError
from fcs_decoder.ingest.config import FcsReaderConfig
from fcs_decoder.ingest.source import read_span


logger = logging.getLogger(__name__)

_PADDING = " \t\r\n\x00"


@dataclass(frozen=True)
class TextSegment:
    """Parsed TEXT segment: delimiter, read-only keyword dictionary and findings."""
    delimiter: str
    keywords: Mapping[str, str] = field(repr=False)
    warnings: Tuple[str, ...] = ()


def grab_word(text: str, pos: int, delimiter: str) -> Tuple[str, int, bool]:
    """
    Read one delimited word starting at ``pos``.

    A doubled delimiter is an escaped literal delimiter and stays inside the
    word. Returns ``(word, next_pos, terminated)``; ``terminated`` is False
    when the text ran out before a closing delimiter.
    """
    n = len(text)
    parts: List[str] = []
    while True:
        idx = text.find(delimiter, pos)
        if idx < 0:
            parts.append(text[pos:])
            return "".join(parts), n, False
        parts.append(text[pos:idx])
        if idx + 1 < n and text[idx + 1] == delimiter:
            parts.append(delimiter)
            pos = idx + 2
            continue
        return "".join(parts), idx + 1, True


class TextSegmentParser:
    """
    Parser for the primary TEXT segment.

    Contract:
      - the first character is the delimiter; it is never content
      - keys and values alternate, each closed by the delimiter
      - a doubled delimiter is one literal delimiter character
      - keys are uppercased (keywords are case-insensitive), values are kept verbatim
      - a repeated keyword overwrites the earlier one unless the config forbids it
    """

    def __init__(self, config: Optional[FcsReaderConfig] = None):
        self.config = config or FcsReaderConfig()

    def read(self, source: BinaryIO, start: int, end: int) -> TextSegment:
        if end < start:
            raise CorruptTextError(f"TEXT segment is empty (start={start}, end={end})")
        raw = read_span(source, start, end, "TEXT segment")
        logger.debug("TEXT segment: %d bytes at [%d, %d]", len(raw), start, end)
        return self.parse_bytes(raw)

    def parse(self, source: BinaryIO, start: int, end: int) -> Mapping[str, str]:
        return self.read(source, start, end).keywords

    def parse_bytes(self, raw: bytes) -> TextSegment:
        if not raw:
            raise CorruptTextError("TEXT segment is empty")

        warnings: List[str] = []
        text = self._decode(raw, warnings)

        delimiter = text[0]
        keywords: Dict[str, str] = {}
        n = len(text)
        pos = 1
        while pos < n:
            key, pos, _ = grab_word(text, pos, delimiter)
            if pos >= n:
                if key.strip(_PADDING):
                    self._dangling(key, warnings)
                break
            value, pos, terminated = grab_word(text, pos, delimiter)
            if not terminated:
                warnings.append(f"TEXT segment ends without a closing delimiter after keyword {key.upper()}")

            key = key.upper()
            if key in keywords:
                if not self.config.allow_duplicate_keywords:
                    raise CorruptTextError(f"keyword {key} appears more than once in TEXT")
                warnings.append(f"keyword {key} repeated; kept the later value {value!r}")
            keywords[key] = value

        logger.debug("TEXT segment: delimiter=%r, %d keywords", delimiter, len(keywords))
        return TextSegment(
            delimiter=delimiter,
            keywords=MappingProxyType(keywords),
            warnings=tuple(warnings),
        )

    def _decode(self, raw: bytes, warnings: List[str]) -> str:
        try:
            return raw.decode(self.config.text_encoding)
        except UnicodeDecodeError as e:
            warnings.append(f"TEXT segment is not valid {self.config.text_encoding} ({e.reason}); decoded as ISO-8859-1")
            return raw.decode("latin-1")

    def _dangling(self, key: str, warnings: List[str]) -> None:
        if not self.config.allow_dangling_keyword:
            raise CorruptTextError(f"keyword {key.upper()!r} has no value (odd number of words in TEXT)")
        warnings.append(f"dropped dangling keyword {key.upper()!r} without a value")
