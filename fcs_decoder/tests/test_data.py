"""Tests for the DATA stage and the element encodings.

Covers:
- float32 / float64 in both byte orders
- byte-by-byte integer reassembly for 8- to 64-bit widths
- unsupported data types, byte orders and bit widths
- element-count and $TOT consistency checks
"""

from __future__ import annotations

import io
import struct

import numpy as np
import pytest

from fcs_decoder.errors import (
    CorruptDataError,
    MissingKeywordError,
    NonUniformBitWidthError,
    UnsupportedByteOrderError,
    UnsupportedDataTypeError,
)
from fcs_decoder.ingest.config import FcsReaderConfig
from fcs_decoder.ingest.data import DataSegmentDecoder
from fcs_decoder.ingest.encodings import (
    ElementEncoding,
    FloatEncoding,
    UIntEncoding,
    byte_order_for,
    encoding_for,
)
from fcs_decoder.models.layout import DataLayout


def _int_keywords(n_params: int, bits: int, byteord: str = "1,2,3,4") -> dict:
    kws = {"$PAR": str(n_params), "$DATATYPE": "I", "$BYTEORD": byteord}
    for i in range(1, n_params + 1):
        kws[f"$P{i}N"] = f"CH{i}"
        kws[f"$P{i}B"] = str(bits)
    return kws


def _decode(raw: bytes, keywords: dict, config: FcsReaderConfig | None = None):
    return DataSegmentDecoder(config).decode(io.BytesIO(raw), 0, len(raw) - 1, keywords)


# -----------------------------------------------------------------------
# float data
# -----------------------------------------------------------------------


def test_float32_little_endian(float_keywords) -> None:
    values = [1.5, -2.25, 3.0, 1024.125]  # event-major: (FSC, SSC) per event
    raw = np.asarray(values, dtype="<f4").tobytes()
    assert len(raw) == 16

    sample = _decode(raw, float_keywords)
    assert sample.data.shape == (2, 2)
    assert sample.params == ("FSC", "SSC")
    np.testing.assert_array_equal(sample["FSC"], np.asarray([1.5, 3.0], dtype=np.float32))
    np.testing.assert_array_equal(sample["SSC"], np.asarray([-2.25, 1024.125], dtype=np.float32))
    assert sample.data.values.dtype == np.float32
    assert list(sample.data.columns) == [1, 2]
    assert sample.data.index.name == "param"


def test_float32_big_endian(float_keywords) -> None:
    kws = dict(float_keywords, **{"$BYTEORD": "4,3,2,1"})
    raw = np.asarray([0.5, 8.0, -1.0, 2.0], dtype=">f4").tobytes()
    sample = _decode(raw, kws)
    np.testing.assert_array_equal(sample.data.to_numpy(), np.asarray([[0.5, -1.0], [8.0, 2.0]], dtype=np.float32))


@pytest.mark.parametrize("byteord, code", [("1,2,3,4", "<f8"), ("4,3,2,1", ">f8")])
def test_float64(float_keywords, byteord: str, code: str) -> None:
    kws = dict(float_keywords, **{"$DATATYPE": "D", "$BYTEORD": byteord, "$P1B": "64", "$P2B": "64", "$TOT": "3"})
    values = np.asarray([1e-3, 2e6, -7.5, 0.0, 123456.789, 42.0])
    sample = _decode(values.astype(code).tobytes(), kws)
    assert sample.data.values.dtype == np.float64
    assert sample.n_events == 3
    np.testing.assert_array_equal(sample["FSC"], values[0::2])
    np.testing.assert_array_equal(sample["SSC"], values[1::2])


def test_float_data_without_bit_widths(float_keywords) -> None:
    kws = {k: v for k, v in float_keywords.items() if not k.endswith("B")}
    sample = _decode(np.asarray([1.0, 2.0], dtype="<f4").tobytes(), kws)
    assert sample.n_events == 1


# -----------------------------------------------------------------------
# integer data
# -----------------------------------------------------------------------


def test_uint16_big_endian_reassembly() -> None:
    sample = _decode(bytes([0x00, 0x01, 0x00, 0x02]), _int_keywords(2, 16, "4,3,2,1"))
    assert sample.data.shape == (2, 1)
    assert sample["CH1"].tolist() == [1]
    assert sample["CH2"].tolist() == [2]


def test_uint16_little_endian_reassembly() -> None:
    sample = _decode(bytes([0x01, 0x00, 0x02, 0x01]), _int_keywords(2, 16, "1,2,3,4"))
    assert sample["CH1"].tolist() == [1]
    assert sample["CH2"].tolist() == [0x0102]
    assert sample.data.values.dtype == np.uint16


@pytest.mark.parametrize("bits, dtype", [(8, np.uint8), (16, np.uint16), (32, np.uint32)])
@pytest.mark.parametrize("byteord, prefix", [("1,2,3,4", "<"), ("4,3,2,1", ">")])
def test_standard_integer_widths(bits: int, dtype, byteord: str, prefix: str) -> None:
    values = np.arange(12, dtype=np.uint64) * 7 + 5
    raw = values.astype(f"{prefix}u{bits // 8}").tobytes()
    sample = _decode(raw, _int_keywords(3, bits, byteord))
    assert sample.data.shape == (3, 4)
    assert sample.data.values.dtype == dtype
    np.testing.assert_array_equal(sample.data.to_numpy(), values.reshape(4, 3).T)


def test_uint24_reassembly() -> None:
    le = bytes([0x01, 0x02, 0x03, 0xFF, 0xFF, 0xFF])
    sample = _decode(le, _int_keywords(2, 24, "1,2,3,4"))
    assert sample["CH1"].tolist() == [0x030201]
    assert sample["CH2"].tolist() == [0xFFFFFF]
    assert sample.data.values.dtype == np.uint32

    sample = _decode(le, _int_keywords(2, 24, "4,3,2,1"))
    assert sample["CH1"].tolist() == [0x010203]


@pytest.mark.parametrize("bits", [40, 48, 64])
@pytest.mark.parametrize("byteord, endian", [("1,2,3,4", "little"), ("4,3,2,1", "big")])
def test_wide_integer_widths(bits: int, byteord: str, endian: str) -> None:
    top = (1 << bits) - 1
    values = [0, 1, 0x0102030405, top, top - 0xFF, 1 << (bits - 1)]
    raw = b"".join(v.to_bytes(bits // 8, endian) for v in values)
    sample = _decode(raw, _int_keywords(2, bits, byteord))
    assert sample.data.values.dtype == np.uint64
    assert sample.data.shape == (2, 3)
    assert sample["CH1"].tolist() == values[0::2]
    assert sample["CH2"].tolist() == values[1::2]


def test_mixed_bit_widths_not_implemented() -> None:
    kws = _int_keywords(2, 16)
    kws["$P2B"] = "32"
    with pytest.raises(NonUniformBitWidthError) as ei:
        _decode(bytes(12), kws)
    assert isinstance(ei.value, NotImplementedError)


@pytest.mark.parametrize("bits", ["12", "10", "0", "*", "128"])
def test_unaligned_bit_width_not_implemented(bits: str) -> None:
    kws = _int_keywords(2, 16)
    kws["$P1B"] = kws["$P2B"] = bits
    with pytest.raises(NonUniformBitWidthError):
        _decode(bytes(12), kws)


def test_integer_data_requires_bit_widths() -> None:
    kws = _int_keywords(2, 16)
    del kws["$P2B"]
    with pytest.raises(MissingKeywordError):
        _decode(bytes(4), kws)


# -----------------------------------------------------------------------
# declared layout errors
# -----------------------------------------------------------------------


@pytest.mark.parametrize("datatype", ["A", "f", ""])
def test_unsupported_data_type(float_keywords, datatype: str) -> None:
    kws = dict(float_keywords, **{"$DATATYPE": datatype})
    with pytest.raises(UnsupportedDataTypeError):
        _decode(bytes(16), kws)


@pytest.mark.parametrize("byteord", ["3,4,1,2", "1,2", "4,3,2,1 ", "big"])
def test_unsupported_byte_order(float_keywords, byteord: str) -> None:
    kws = dict(float_keywords, **{"$BYTEORD": byteord})
    with pytest.raises(UnsupportedByteOrderError):
        _decode(bytes(16), kws)


def test_unsupported_byte_order_for_integers() -> None:
    with pytest.raises(UnsupportedByteOrderError):
        _decode(bytes(4), _int_keywords(2, 16, "2,1"))


def test_element_count_not_multiple_of_par(float_keywords) -> None:
    raw = np.asarray([1.0, 2.0, 3.0], dtype="<f4").tobytes()
    with pytest.raises(CorruptDataError, match="DATA and TEXT sections don't match"):
        _decode(raw, float_keywords)


def test_partial_element(float_keywords) -> None:
    with pytest.raises(CorruptDataError):
        _decode(bytes(10), float_keywords)


def test_integer_count_uses_resolved_width() -> None:
    # 6 bytes of 16-bit data is 3 elements; with 3 parameters that is one event
    sample = _decode(bytes(6), _int_keywords(3, 16))
    assert sample.data.shape == (3, 1)
    with pytest.raises(CorruptDataError):
        _decode(bytes(6), _int_keywords(2, 16))


def test_missing_par(float_keywords) -> None:
    kws = dict(float_keywords)
    del kws["$PAR"]
    with pytest.raises(MissingKeywordError):
        _decode(bytes(16), kws)


def test_tot_mismatch_is_a_warning(float_keywords) -> None:
    kws = dict(float_keywords, **{"$TOT": "5"})
    sample = _decode(bytes(16), kws)
    assert sample.n_events == 2
    assert any("$TOT=5" in w for w in sample.warnings)


def test_tot_mismatch_strict(float_keywords) -> None:
    kws = dict(float_keywords, **{"$TOT": "5"})
    with pytest.raises(CorruptDataError):
        _decode(bytes(16), kws, FcsReaderConfig(strict_tot=True))


def test_zero_length_data_range_is_empty() -> None:
    # offsets 0, 0 point at the version tag; nothing there may be decoded
    stream = io.BytesIO(b"FCS3.1" + bytes(58))
    kws = dict(_int_keywords(1, 8), **{"$TOT": "0"})
    sample = DataSegmentDecoder().decode(stream, 0, 0, kws)
    assert sample.data.shape == (1, 0)
    assert sample.warnings == ()


def test_zero_length_float_data_is_not_corrupt(float_keywords) -> None:
    kws = dict(float_keywords, **{"$TOT": "0"})
    sample = DataSegmentDecoder().decode(io.BytesIO(b"FCS3.1" + bytes(58)), 0, 0, kws)
    assert sample.data.shape == (2, 0)
    assert sample.params == ("FSC", "SSC")


def test_missing_parameter_name_gets_default_label(float_keywords) -> None:
    kws = dict(float_keywords)
    del kws["$P2N"]
    sample = _decode(bytes(16), kws)
    assert sample.params == ("FSC", "P2")
    assert any("$P2N" in w for w in sample.warnings)


def test_duplicate_parameter_names_warn(float_keywords) -> None:
    kws = dict(float_keywords, **{"$P2N": "FSC"})
    sample = _decode(np.asarray([1.0, 2.0], dtype="<f4").tobytes(), kws)
    assert sample.params == ("FSC", "FSC")
    assert any("$P2N='FSC'" in w for w in sample.warnings)
    assert sample["FSC"].ndim == 2


# -----------------------------------------------------------------------
# encodings
# -----------------------------------------------------------------------


def test_decode_element_matches_vectorized_decode() -> None:
    enc = UIntEncoding(3)
    chunk = bytes([0x10, 0x20, 0x30])
    assert enc.decode_element(chunk, "<") == 0x302010
    assert enc.decode_element(chunk, ">") == 0x102030
    assert enc.decode(chunk, ">").tolist() == [0x102030]

    f = FloatEncoding(4)
    assert f.decode_element(struct.pack(">f", -0.75), ">") == -0.75
    assert FloatEncoding(8).decode_element(struct.pack("<d", 1e300), "<") == 1e300


def test_encoding_for_layout(float_keywords) -> None:
    layout = DataLayout.from_keywords(float_keywords)
    assert encoding_for(layout) == FloatEncoding(4)
    layout = DataLayout.from_keywords(_int_keywords(4, 24))
    enc = encoding_for(layout)
    assert enc == UIntEncoding(3)
    assert enc.name == "uint24"
    assert byte_order_for("4,3,2,1") == ">"


def test_encoding_without_decode_cannot_be_built() -> None:
    class HalfEncoding(ElementEncoding):
        name = "half"
        width = 2

        def decode_element(self, chunk: bytes, order: str) -> float:
            return 0.0

    with pytest.raises(TypeError):
        HalfEncoding()
