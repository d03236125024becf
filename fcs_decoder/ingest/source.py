from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Tuple, Union

from fcs_decoder.errors import TruncatedFileError


Source = Union[str, Path, BinaryIO]


@contextmanager
def open_source(source: Source) -> Iterator[Tuple[BinaryIO, Optional[Path]]]:
    """
    Yield ``(stream, path)`` for a file path or an already-open binary stream.

    A path is opened here and closed on exit. A stream belongs to the caller:
    it is handed through untouched and never closed.
    """
    if isinstance(source, (str, Path)):
        path = Path(source).expanduser().resolve()
        if not path.exists():
            raise FileNotFoundError(str(path))
        with path.open("rb") as fh:
            yield fh, path
    else:
        yield source, None


def read_exact(stream: BinaryIO, offset: int, size: int, what: str) -> bytes:
    """Seek to ``offset`` and read exactly ``size`` bytes."""
    stream.seek(offset)
    raw = stream.read(size)
    if len(raw) != size:
        raise TruncatedFileError(
            f"{what}: expected {size} bytes at offset {offset}, got {len(raw)} (file truncated?)"
        )
    return raw


def read_span(stream: BinaryIO, start: int, end: int, what: str) -> bytes:
    """Read the inclusive byte range ``[start, end]``."""
    return read_exact(stream, start, end - start + 1, what)
