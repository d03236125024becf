"""Ingest package - the three decoding stages and the driver that chains them.

This package handles:
- Reading the fixed-layout HEADER (version tag and segment offsets)
- Parsing the delimited TEXT segment into a keyword dictionary
- Decoding the binary DATA segment into a parameter x event matrix

Key classes:
- HeaderReader: HEADER -> FcsHeader (with DATA offsets recovered from TEXT when needed)
- TextSegmentParser: TEXT -> read-only keyword mapping
- DataSegmentDecoder: DATA + keywords -> FlowSample
- FcsReader: runs the three stages on one file or stream

Design principle:
- The byte source belongs to the caller; stages only seek and read
- Fatal problems raise immediately, non-fatal ones travel as warnings on the result
"""
