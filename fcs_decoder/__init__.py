"""fcs_decoder -- reader for flow-cytometry standard (FCS) data files.

This package provides tools for:
- Locating the TEXT, DATA and ANALYSIS segments from the FCS HEADER
- Parsing the TEXT segment into an uppercased keyword dictionary
- Decoding list-mode DATA (float32, float64, byte-aligned unsigned integers,
  either byte order) into a labeled parameter x event matrix

Key principles:
- Pure reader: files are never written or modified
- No partial results: a decode either returns a complete FlowSample or raises an FcsError
- Non-fatal findings are kept on the result in ``FlowSample.warnings``

Main subpackages:
- ingest: HEADER / TEXT / DATA stages and the FcsReader driver
- models: Data models (SegmentOffsets, DataLayout, FlowSample)
- scripts: command-line inspection of FCS files
"""

from fcs_decoder.errors import (
    CorruptDataError,
    CorruptTextError,
    FcsError,
    FcsWarning,
    MissingKeywordError,
    NonUniformBitWidthError,
    OffsetParseError,
    TruncatedFileError,
    UnsupportedByteOrderError,
    UnsupportedDataTypeError,
    UnsupportedVersionWarning,
)
from fcs_decoder.ingest.config import FcsReaderConfig
from fcs_decoder.ingest.reader import FcsReader, read_fcs
from fcs_decoder.models import DataLayout, FcsHeader, FlowSample, SegmentOffsets

__version__ = "0.1.0"

__all__ = [
    "CorruptDataError",
    "CorruptTextError",
    "DataLayout",
    "FcsError",
    "FcsHeader",
    "FcsReader",
    "FcsReaderConfig",
    "FcsWarning",
    "FlowSample",
    "MissingKeywordError",
    "NonUniformBitWidthError",
    "OffsetParseError",
    "SegmentOffsets",
    "TruncatedFileError",
    "UnsupportedByteOrderError",
    "UnsupportedDataTypeError",
    "UnsupportedVersionWarning",
    "read_fcs",
]
