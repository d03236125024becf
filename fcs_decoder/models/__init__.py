from .segments import FcsHeader, SegmentOffsets
from .layout import DataLayout, parameter_bit_widths
from .frames import FlowSample

__all__ = [
    "FcsHeader",
    "SegmentOffsets",
    "DataLayout",
    "parameter_bit_widths",
    "FlowSample",
]
