"""Reading and writing documents.

On disk a document is its lines, each followed by exactly one ``\\n``.
Text is UTF-8 with ``surrogateescape``, so bytes that are not valid UTF-8
survive a load/save round trip unchanged.
"""

import logging
import os
import tempfile
from dataclasses import dataclass, field
from typing import Iterable, List

from .constants import EditorConstants

logger = logging.getLogger(__name__)


@dataclass
class LoadResult:
    lines: List[str] = field(default_factory=list)
    truncated_rows: List[int] = field(default_factory=list)  # Rows cut at the length limit

    @property
    def truncated(self) -> bool:
        return bool(self.truncated_rows)


def read_lines(filename: str, max_line_length: int = EditorConstants.MAX_LINE_LENGTH) -> LoadResult:
    """Read a file line by line, stripping terminators.

    A line longer than ``max_line_length`` keeps only its first
    ``max_line_length`` characters; the rest of that physical line is
    dropped and the row is recorded in ``truncated_rows``.

    Raises OSError if the file cannot be read.
    """
    result = LoadResult()
    with open(filename, 'r', encoding=EditorConstants.ENCODING,
              errors=EditorConstants.ENCODING_ERRORS, newline='\n') as f:
        for physical in f:
            text = physical.rstrip('\r\n')
            if len(text) > max_line_length:
                text = text[:max_line_length]
                result.truncated_rows.append(len(result.lines))
            result.lines.append(text)
    if result.truncated:
        logger.warning("%s: %d line(s) truncated at %d characters (first at row %d)",
                       filename, len(result.truncated_rows), max_line_length,
                       result.truncated_rows[0] + 1)
    return result


def serialize(lines: Iterable[str]) -> bytes:
    return "".join(line + "\n" for line in lines).encode(
        EditorConstants.ENCODING, EditorConstants.ENCODING_ERRORS)


def write_lines(filename: str, lines: Iterable[str]) -> int:
    """Write the lines to ``filename`` atomically; return the bytes written.

    The data goes to a temporary file in the target directory which then
    replaces the target, so a failed save never damages the old file.
    Raises OSError on failure, after removing the temporary file.
    """
    data = serialize(lines)
    dir_name = os.path.dirname(filename) or '.'
    suffix = os.path.splitext(filename)[1]
    temp_filename = None
    try:
        with tempfile.NamedTemporaryFile(mode='wb', dir=dir_name, suffix=suffix,
                                         delete=False) as temp_file:
            temp_filename = temp_file.name
            temp_file.write(data)
            temp_file.flush()
            os.fsync(temp_file.fileno())
        os.replace(temp_filename, filename)
    except OSError:
        if temp_filename and os.path.exists(temp_filename):
            try:
                os.remove(temp_filename)
            except OSError:
                logger.warning("Could not remove temporary file %s", temp_filename)
        raise
    return len(data)
