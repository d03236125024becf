from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from fcs_decoder.ingest.config import FcsReaderConfig
from fcs_decoder.ingest.data import DataSegmentDecoder
from fcs_decoder.ingest.header import HeaderReader
from fcs_decoder.ingest.source import Source, open_source
from fcs_decoder.ingest.text import TextSegmentParser
from fcs_decoder.models.frames import FlowSample


logger = logging.getLogger(__name__)


class FcsReader:
    """
    Reader for FCS 3.0 / 3.1 list-mode files.

    Runs HEADER -> TEXT -> DATA strictly in sequence on one byte source.
    Each stage seeks to its own offsets before reading, so the source must not
    be shared with another reader while a decode is running.

    HARD REQUIREMENT:
      - either a complete FlowSample is returned or an FcsError is raised
      - the ANALYSIS segment is located (offsets kept) but never parsed
    """

    def __init__(self, config: Optional[FcsReaderConfig] = None):
        self.config = config or FcsReaderConfig()
        self.text_parser = TextSegmentParser(self.config)
        self.header_reader = HeaderReader(self.config, text_parser=self.text_parser)
        self.data_decoder = DataSegmentDecoder(self.config)

    def read(self, source: Source) -> FlowSample:
        """
        Decode ``source``, a file path or an open binary stream.

        A path is opened and closed here; a stream is only positioned and read.
        """
        with open_source(source) as (stream, path):
            header = self.header_reader.read(stream)
            offsets = header.offsets
            text = self.text_parser.read(stream, offsets.text_start, offsets.text_end)
            sample = self.data_decoder.decode(stream, offsets.data_start, offsets.data_end, text.keywords)

        warnings = header.warnings + text.warnings + sample.warnings
        logger.debug(
            "decoded %s: %d params x %d events, %d warnings",
            path or "<stream>",
            sample.n_params,
            sample.n_events,
            len(warnings),
        )
        return replace(
            sample,
            source_path=path,
            version=header.version,
            offsets=offsets,
            warnings=warnings,
        )


def read_fcs(source: Source, config: Optional[FcsReaderConfig] = None) -> FlowSample:
    """Decode one FCS file into a FlowSample."""
    return FcsReader(config).read(source)
