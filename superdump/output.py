"""
Output destinations for dump scripts.
"""

import gzip
import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, Optional

STDOUT = '-'


def resolve_output_path(path: Optional[str], compress: bool) -> Optional[Path]:
    """Return the file the dump goes to, or None for stdout."""
    if not path or path == STDOUT:
        return None
    output_path = Path(path)
    if compress and output_path.suffix != '.gz':
        output_path = Path(str(output_path) + '.gz')
    return output_path


@contextmanager
def open_output(path: Optional[str] = None, compress: bool = False) -> Iterator[tuple[str, BinaryIO]]:
    """Open the byte sink a dump is written to.

    Yields ``(label, sink)``. Without a path (or with ``-``) the sink is
    stdout, which is left open afterwards.
    """
    output_path = resolve_output_path(path, compress)

    if output_path is None:
        stdout = sys.stdout.buffer
        if compress:
            with gzip.GzipFile(fileobj=stdout, mode='wb') as sink:
                yield '<stdout>', sink
        else:
            try:
                yield '<stdout>', stdout
            finally:
                stdout.flush()
        return

    output_path.parent.mkdir(parents=True, exist_ok=True)
    logging.debug(f"Writing dump to {output_path}")

    if compress:
        sink = gzip.open(output_path, 'wb')
    else:
        sink = open(output_path, 'wb')

    with sink:
        yield str(output_path), sink
