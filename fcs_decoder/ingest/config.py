from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FcsReaderConfig:
    """
    Reader configuration shared by the HEADER, TEXT and DATA stages.

    text_encoding:
      Encoding tried first for the TEXT segment. Bytes that do not decode
      fall back to ISO-8859-1 and a warning is recorded.
    allow_dangling_keyword:
      - False: a final keyword without a value is a CorruptTextError.
      - True: the dangling keyword is dropped and a warning is recorded.
    allow_duplicate_keywords:
      - True: a repeated keyword overwrites the earlier value (warning recorded).
      - False: a repeated keyword is a CorruptTextError.
    strict_tot:
      - True: a $TOT that disagrees with the decoded event count is a CorruptDataError.
      - False: the mismatch is only recorded as a warning.
    name_prefix:
      Label prefix for parameters without $PnN (parameter 3 becomes "P3").
    """
    text_encoding: str = "utf-8"
    allow_dangling_keyword: bool = False
    allow_duplicate_keywords: bool = True
    strict_tot: bool = False
    name_prefix: str = "P"
