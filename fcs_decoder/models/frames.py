from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Tuple

import numpy as np
import pandas as pd

from fcs_decoder.models.segments import SegmentOffsets


@dataclass(frozen=True)
class FlowSample:
    """
    In-memory representation of one decoded FCS file.

    Notes
    - ``data`` has one row per parameter (index ``param``, labels from ``$PnN``)
      and one column per event (columns ``event``, numbered from 1).
    - ``keywords`` is the read-only TEXT dictionary, keys uppercased.
    - ``warnings`` collects every non-fatal finding from HEADER, TEXT and DATA.
    """
    data: pd.DataFrame = field(repr=False)
    keywords: Mapping[str, str] = field(repr=False)
    source_path: Optional[Path] = None
    version: Optional[str] = None
    offsets: Optional[SegmentOffsets] = None
    warnings: Tuple[str, ...] = ()

    @property
    def n_params(self) -> int:
        return int(self.data.shape[0])

    @property
    def n_events(self) -> int:
        return int(self.data.shape[1])

    @property
    def params(self) -> Tuple[str, ...]:
        return tuple(str(p) for p in self.data.index)

    def __getitem__(self, name: str) -> np.ndarray:
        """
        Events of parameter ``name`` as a 1-D array.

        If several parameters share the label (a warning is recorded when the
        layout is read), a 2-D array with one row per matching parameter is
        returned; use ``data.iloc`` to pick one by position.
        """
        if name not in self.data.index:
            raise KeyError(name)
        return self.data.loc[name].to_numpy()

    def __contains__(self, name: object) -> bool:
        return name in self.data.index

    def to_events(self) -> pd.DataFrame:
        """Event-major view: one row per event, one column per parameter."""
        return self.data.T
