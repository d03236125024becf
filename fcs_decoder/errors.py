"""Error and warning types raised while decoding FCS files.

Every fatal condition aborts the whole decode: the readers raise at the point
of detection and never return a partial sample. Non-fatal findings are
collected as plain strings on the result (``FlowSample.warnings``); the only
condition that is also emitted through :mod:`warnings` is an unrecognized
version tag.
"""

from __future__ import annotations


class FcsError(ValueError):
    """Base class for fatal FCS decoding errors."""


class OffsetParseError(FcsError):
    """A HEADER offset field (or a DATA offset keyword) is not a valid integer."""


class UnsupportedByteOrderError(FcsError):
    """``$BYTEORD`` is neither ``1,2,3,4`` nor ``4,3,2,1``."""


class UnsupportedDataTypeError(FcsError):
    """``$DATATYPE`` is not one of ``I``, ``F`` or ``D``."""


class NonUniformBitWidthError(FcsError, NotImplementedError):
    """
    Integer parameters declare differing or non byte-aligned widths.

    This is a limitation of the decoder, not a format violation.
    """


class CorruptTextError(FcsError):
    """The TEXT segment cannot be turned into a keyword dictionary."""


class MissingKeywordError(CorruptTextError):
    """A keyword needed for decoding is absent from the TEXT segment."""

    def __init__(self, keyword: str):
        super().__init__(f"required keyword {keyword} is missing from the TEXT segment")
        self.keyword = keyword


class CorruptDataError(FcsError):
    """The DATA segment does not match what the TEXT segment declares."""


class TruncatedFileError(CorruptDataError):
    """A segment extends past the end of the byte source."""


class FcsWarning(UserWarning):
    """Base class for non-fatal FCS findings."""


class UnsupportedVersionWarning(FcsWarning):
    """The version tag is not one of the versions this reader was built for."""
