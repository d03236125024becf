"""Shared fixtures: synthetic FCS files assembled in memory."""

from __future__ import annotations

from typing import Dict, Mapping

import pytest


def _escape(s: str, delimiter: str) -> str:
    return s.replace(delimiter, delimiter * 2)


def _render_text(keywords: Mapping[str, str], delimiter: str) -> bytes:
    body = "".join(
        f"{_escape(k, delimiter)}{delimiter}{_escape(v, delimiter)}{delimiter}" for k, v in keywords.items()
    )
    return (delimiter + body).encode("utf-8")


def build_fcs(
    keywords: Mapping[str, str],
    data: bytes = b"",
    *,
    version: str = "FCS3.1",
    delimiter: str = "/",
    overflow: bool = False,
    blank_analysis: bool = False,
    text_start: int = 256,
) -> bytes:
    """
    Assemble a minimal FCS file: HEADER, TEXT right after it, DATA right after TEXT.

    overflow:
        write 0 for both DATA offsets in the HEADER and put the real range in
        $BEGINDATA / $ENDDATA, as writers do for very large files.
    blank_analysis:
        leave the ANALYSIS offset fields as spaces instead of "0".

    Empty ``data`` is written as DATA offsets 0, 0 (a zero-event file); combine
    with ``overflow`` so $BEGINDATA / $ENDDATA carry the same zeros.
    """
    kws: Dict[str, str] = dict(keywords)
    if overflow:
        # fixed width placeholders so the TEXT length does not change when filled in
        kws["$BEGINDATA"] = "0" * 12
        kws["$ENDDATA"] = "0" * 12

    text = _render_text(kws, delimiter)
    text_end = text_start + len(text) - 1
    data_start = text_end + 1
    data_end = data_start + len(data) - 1
    if not data:
        data_start = data_end = 0

    if overflow:
        kws["$BEGINDATA"] = f"{data_start:012d}"
        kws["$ENDDATA"] = f"{data_end:012d}"
        text = _render_text(kws, delimiter)

    fields = [text_start, text_end]
    fields += [0, 0] if overflow else [data_start, data_end]
    header = version.ljust(6)[:6] + " " * 4 + "".join(f"{v:>8}" for v in fields)
    header += " " * 16 if blank_analysis else f"{0:>8}{0:>8}"
    header = header.ljust(text_start)
    return header.encode("ascii") + text + data


@pytest.fixture
def make_fcs():
    return build_fcs


@pytest.fixture
def float_keywords() -> Dict[str, str]:
    return {
        "$PAR": "2",
        "$P1N": "FSC",
        "$P2N": "SSC",
        "$P1B": "32",
        "$P2B": "32",
        "$DATATYPE": "F",
        "$BYTEORD": "1,2,3,4",
        "$MODE": "L",
        "$TOT": "2",
    }
