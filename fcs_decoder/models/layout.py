from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Tuple

from fcs_decoder.errors import (
    CorruptDataError,
    CorruptTextError,
    MissingKeywordError,
    NonUniformBitWidthError,
)


def _required(keywords: Mapping[str, str], key: str) -> str:
    try:
        return keywords[key]
    except KeyError:
        raise MissingKeywordError(key) from None


def _parse_count(value: str, key: str) -> int:
    txt = value.strip()
    if not txt.isascii() or not txt.isdigit():
        raise CorruptTextError(f"{key} must be a non-negative integer, got {value!r}")
    return int(txt)


def parameter_bit_widths(keywords: Mapping[str, str], n_params: int) -> Tuple[int, ...]:
    """
    Return the ``$PnB`` bit width of every parameter, in parameter order.

    Raises MissingKeywordError when a ``$PnB`` keyword is absent and
    NonUniformBitWidthError when a width is not an integer (``*`` marks
    delimited ASCII data, which the decoder does not handle).
    """
    widths: List[int] = []
    for i in range(1, n_params + 1):
        key = f"$P{i}B"
        raw = _required(keywords, key).strip()
        if not raw.isascii() or not raw.isdigit():
            raise NonUniformBitWidthError(f"{key}={raw!r} is not an integer bit width")
        widths.append(int(raw))
    return tuple(widths)


@dataclass(frozen=True)
class DataLayout:
    """
    Validated subset of the TEXT keywords that drives DATA decoding.

    The raw keyword dictionary stays available on the FlowSample; this
    structure only holds what the decoder needs, already converted.

    n_params:
        ``$PAR``, number of parameters (matrix rows).
    names:
        ``$PnN`` for each parameter. Missing names are replaced by
        ``<name_prefix><n>`` and reported in ``warnings``.
    datatype, byteord:
        ``$DATATYPE`` and ``$BYTEORD`` exactly as written.
    bit_widths:
        ``$PnB`` per parameter. Empty for float data that omits them.
    n_events:
        ``$TOT`` if declared, else None.
    """
    n_params: int
    names: Tuple[str, ...]
    datatype: str
    byteord: str
    bit_widths: Tuple[int, ...] = ()
    n_events: Optional[int] = None
    warnings: Tuple[str, ...] = ()

    @classmethod
    def from_keywords(cls, keywords: Mapping[str, str], name_prefix: str = "P") -> "DataLayout":
        n_params = _parse_count(_required(keywords, "$PAR"), "$PAR")
        if n_params <= 0:
            raise CorruptDataError(f"$PAR must be positive, got {n_params}")

        datatype = _required(keywords, "$DATATYPE")
        byteord = _required(keywords, "$BYTEORD")

        warnings: List[str] = []
        names: List[str] = []
        for i in range(1, n_params + 1):
            name = keywords.get(f"$P{i}N")
            if name is None:
                name = f"{name_prefix}{i}"
                warnings.append(f"$P{i}N is missing; parameter {i} labeled '{name}'")
            names.append(name)

        seen: Dict[str, int] = {}
        for i, name in enumerate(names, start=1):
            if name in seen:
                warnings.append(
                    f"$P{i}N={name!r} repeats the label of parameter {seen[name]}; "
                    f"selecting '{name}' returns every row with that label"
                )
            else:
                seen[name] = i

        if datatype == "I":
            bit_widths = parameter_bit_widths(keywords, n_params)
        else:
            # float widths are implied by the type; $PnB is informative only
            try:
                bit_widths = parameter_bit_widths(keywords, n_params)
            except (MissingKeywordError, NonUniformBitWidthError):
                bit_widths = ()

        tot = keywords.get("$TOT")
        n_events = _parse_count(tot, "$TOT") if tot is not None else None

        return cls(
            n_params=n_params,
            names=tuple(names),
            datatype=datatype,
            byteord=byteord,
            bit_widths=bit_widths,
            n_events=n_events,
            warnings=tuple(warnings),
        )

    def uniform_bit_width(self) -> int:
        """
        Return the single bit width shared by all parameters.

        Mixed widths, widths that are not a multiple of 8, and widths above
        64 bits are not implemented.
        """
        distinct = sorted(set(self.bit_widths))
        if len(distinct) != 1:
            raise NonUniformBitWidthError(
                f"Uneven bit widths across parameters are not implemented: {distinct}"
            )
        width = distinct[0]
        if width <= 0 or width % 8 != 0:
            raise NonUniformBitWidthError(f"Bit width {width} is not divisible by 8; not implemented.")
        if width > 64:
            raise NonUniformBitWidthError(f"Bit width {width} exceeds 64 bits; not implemented.")
        return width
