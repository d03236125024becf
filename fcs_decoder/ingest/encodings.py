"""Element encodings of the DATA segment.

The DATA segment is a flat run of equally sized elements. Each encoding knows
its element width and how to turn raw bytes in a given byte order into values,
both one element at a time (``decode_element``) and for a whole buffer
(``decode``). Matrix assembly in :mod:`fcs_decoder.ingest.data` is written once
against this interface.

Floats are IEEE values whose width is fixed by the type, so reading them in
the declared order and converting to native order is enough. Integers may use
any byte-aligned width (24 or 40 bits exist in the wild) that has no numpy
scalar type, so they are rebuilt from individual bytes by shifting.
"""

from __future__ import annotations

import struct
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Mapping, Union

import numpy as np

from fcs_decoder.errors import UnsupportedByteOrderError, UnsupportedDataTypeError
from fcs_decoder.models.layout import DataLayout


# $BYTEORD -> numpy/struct byte-order character
BYTE_ORDERS: Mapping[str, str] = {
    "1,2,3,4": "<",
    "4,3,2,1": ">",
}


def byte_order_for(byteord: str) -> str:
    try:
        return BYTE_ORDERS[byteord]
    except KeyError:
        raise UnsupportedByteOrderError(
            f"Unsupported byte order $BYTEORD={byteord!r}; expected one of {sorted(BYTE_ORDERS)}"
        ) from None


class ElementEncoding(ABC):
    """One element type of the DATA segment."""

    name: str
    width: int

    @abstractmethod
    def decode_element(self, chunk: bytes, order: str) -> Union[int, float]:
        """Value of one element of exactly ``width`` bytes."""

    @abstractmethod
    def decode(self, raw: bytes, order: str) -> np.ndarray:
        """All elements of ``raw``, whose length is a multiple of ``width``."""


@dataclass(frozen=True)
class FloatEncoding(ElementEncoding):
    """IEEE-754 float32 (width 4) or float64 (width 8)."""
    width: int

    @property
    def name(self) -> str:
        return f"float{8 * self.width}"

    @property
    def _code(self) -> str:
        return "f" if self.width == 4 else "d"

    def decode_element(self, chunk: bytes, order: str) -> float:
        return struct.unpack(order + self._code, chunk)[0]

    def decode(self, raw: bytes, order: str) -> np.ndarray:
        stored = np.frombuffer(raw, dtype=np.dtype(f"{order}f{self.width}"))
        # swap to native order (no-op when the file already matches)
        return stored.astype(np.dtype(f"=f{self.width}"))


@dataclass(frozen=True)
class UIntEncoding(ElementEncoding):
    """Unsigned integer of ``width`` bytes, reassembled byte by byte."""
    width: int

    @property
    def name(self) -> str:
        return f"uint{8 * self.width}"

    @property
    def dtype(self) -> np.dtype:
        for size in (1, 2, 4, 8):
            if self.width <= size:
                return np.dtype(f"=u{size}")
        raise ValueError(f"no unsigned integer type holds {self.width} bytes")

    def _shifts(self, order: str) -> List[int]:
        # little-endian: byte j is worth 8*j bits; big-endian: 8*(w-1-j)
        if order == "<":
            return [8 * j for j in range(self.width)]
        return [8 * (self.width - 1 - j) for j in range(self.width)]

    def decode_element(self, chunk: bytes, order: str) -> int:
        return sum(b << s for b, s in zip(chunk, self._shifts(order)))

    def decode(self, raw: bytes, order: str) -> np.ndarray:
        groups = np.frombuffer(raw, dtype=np.uint8).reshape(-1, self.width).astype(np.uint64)
        shifts = np.asarray(self._shifts(order), dtype=np.uint64)
        values = (groups << shifts).sum(axis=1, dtype=np.uint64)
        return values.astype(self.dtype)


def encoding_for(layout: DataLayout) -> ElementEncoding:
    """Pick the element encoding declared by ``$DATATYPE`` (and ``$PnB`` for integers)."""
    if layout.datatype == "D":
        return FloatEncoding(8)
    if layout.datatype == "F":
        return FloatEncoding(4)
    if layout.datatype == "I":
        return UIntEncoding(layout.uniform_bit_width() // 8)
    raise UnsupportedDataTypeError(
        f"$DATATYPE={layout.datatype!r} is not supported; only integer (I), float (F) and double (D) data are implemented."
    )
