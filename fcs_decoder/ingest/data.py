from __future__ import annotations

import logging
from typing import BinaryIO, List, Mapping, Optional

import numpy as np
import pandas as pd

from fcs_decoder.errors import CorruptDataError
from fcs_decoder.ingest.config import FcsReaderConfig
from fcs_decoder.ingest.encodings import ElementEncoding, byte_order_for, encoding_for
from fcs_decoder.ingest.source import read_span
from fcs_decoder.models.frames import FlowSample
from fcs_decoder.models.layout import DataLayout


logger = logging.getLogger(__name__)


class DataSegmentDecoder:
    """
    Decoder for list-mode DATA segments.

    Contract:
      - $DATATYPE selects the element encoding: D (float64), F (float32), I (unsigned integer)
      - integer data needs one uniform, byte-aligned $PnB across all parameters
      - $BYTEORD must be 1,2,3,4 (little-endian) or 4,3,2,1 (big-endian)
      - element k belongs to parameter k mod $PAR; the element count must divide evenly
      - a DATA range of (0, 0) marks an empty segment (zero events), not one byte at offset 0
    """

    def __init__(self, config: Optional[FcsReaderConfig] = None):
        self.config = config or FcsReaderConfig()

    def decode(
        self,
        source: BinaryIO,
        start: int,
        end: int,
        keywords: Mapping[str, str],
    ) -> FlowSample:
        layout = DataLayout.from_keywords(keywords, name_prefix=self.config.name_prefix)
        encoding = encoding_for(layout)
        order = byte_order_for(layout.byteord)
        logger.debug("DATA segment: [%d, %d], %s (%s)", start, end, encoding.name, layout.byteord)

        if (start, end) == (0, 0) or end < start:
            raw = b""
        else:
            raw = read_span(source, start, end, "DATA segment")
        return self.decode_bytes(raw, layout, encoding, order, keywords)

    def decode_bytes(
        self,
        raw: bytes,
        layout: DataLayout,
        encoding: ElementEncoding,
        order: str,
        keywords: Mapping[str, str],
    ) -> FlowSample:
        warnings: List[str] = list(layout.warnings)

        if len(raw) % encoding.width != 0:
            raise CorruptDataError(
                f"FCS file is corrupt. DATA and TEXT sections don't match: "
                f"{len(raw)} bytes is not a whole number of {encoding.name} elements."
            )
        flat = encoding.decode(raw, order)

        n_params = layout.n_params
        if flat.size % n_params != 0:
            raise CorruptDataError(
                f"FCS file is corrupt. DATA and TEXT sections don't match: "
                f"{flat.size} values for $PAR={n_params}."
            )
        n_events = flat.size // n_params

        if layout.n_events is not None and layout.n_events != n_events:
            msg = f"$TOT={layout.n_events} but DATA holds {n_events} events"
            if self.config.strict_tot:
                raise CorruptDataError(msg)
            warnings.append(msg)

        # event-major on disk: row i of the matrix is flat[i::n_params]
        matrix = flat.reshape(n_events, n_params).T
        data = pd.DataFrame(
            np.ascontiguousarray(matrix),
            index=pd.Index(layout.names, name="param"),
            columns=pd.RangeIndex(1, n_events + 1, name="event"),
        )
        return FlowSample(data=data, keywords=keywords, warnings=tuple(warnings))
