"""
Inspect FCS files from the command line.

Prints the version tag, segment offsets and parameter summary of a file,
optionally every TEXT keyword, and can export the decoded events as CSV
(one row per event, one column per parameter).

Examples
--------
    python -m fcs_decoder.scripts.inspect_fcs sample.fcs
    python -m fcs_decoder.scripts.inspect_fcs sample.fcs --keywords
    python -m fcs_decoder.scripts.inspect_fcs sample.fcs --csv sample.csv
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

from fcs_decoder.errors import FcsError
from fcs_decoder.ingest.config import FcsReaderConfig
from fcs_decoder.ingest.reader import FcsReader
from fcs_decoder.models.frames import FlowSample


def summarize(sample: FlowSample) -> List[str]:
    """Human-readable summary lines for one decoded sample."""
    lines = [f"file: {sample.source_path}", f"version: {sample.version}"]
    if sample.offsets is not None:
        o = sample.offsets
        lines.append(f"TEXT: [{o.text_start}, {o.text_end}]")
        lines.append(f"DATA: [{o.data_start}, {o.data_end}]")
        if o.has_analysis:
            lines.append(f"ANALYSIS: [{o.analysis_start}, {o.analysis_end}] (not parsed)")
    lines.append(f"parameters: {sample.n_params}")
    lines.append(f"events: {sample.n_events}")
    lines.append("names: " + ", ".join(sample.params))
    for w in sample.warnings:
        lines.append(f"[warn] {w}")
    return lines


def main(argv: Optional[Sequence[str]] = None) -> int:
    import argparse
    import textwrap

    p = argparse.ArgumentParser(
        prog="python -m fcs_decoder.scripts.inspect_fcs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=textwrap.dedent(
            """\
            Decode an FCS 3.0/3.1 file and print a summary.

            Integer data must use one byte-aligned bit width for all parameters.
            """
        ),
    )
    p.add_argument("file", help="FCS file to decode")
    p.add_argument("--keywords", action="store_true", help="Print every TEXT keyword and value")
    p.add_argument("--csv", default=None, help="Write decoded events to this CSV file")
    p.add_argument(
        "--allow-dangling-keyword",
        action="store_true",
        help="Drop a final TEXT keyword without value instead of failing",
    )
    p.add_argument("--strict-tot", action="store_true", help="Fail when $TOT disagrees with the DATA segment")

    ns = p.parse_args(list(argv) if argv is not None else None)

    cfg = FcsReaderConfig(
        allow_dangling_keyword=bool(ns.allow_dangling_keyword),
        strict_tot=bool(ns.strict_tot),
    )
    try:
        sample = FcsReader(cfg).read(Path(ns.file))
    except (FcsError, FileNotFoundError) as e:
        print(f"[error] {ns.file}: {type(e).__name__}: {e}")
        return 1

    for line in summarize(sample):
        print(line)

    if ns.keywords:
        for key, value in sample.keywords.items():
            print(f"{key} = {value}")

    if ns.csv:
        out = Path(ns.csv).expanduser()
        sample.to_events().to_csv(out, index=False)
        print(f"wrote: {out}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
