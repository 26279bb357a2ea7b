"""Detect whether a file is an OpenAPI document without parsing it."""

import re
from pathlib import Path

OPENAPI_LINE = re.compile(r"^openapi:\s*[0-9]+\.[0-9]+\.[0-9]+")


def is_openapi_spec(file_path: Path) -> bool:
    """Return True if any line of the file declares an OpenAPI version.

    The file is read line by line and scanning stops at the first match.
    Undecodable bytes are replaced, so binary files simply never match.
    I/O errors propagate to the caller.
    """
    with open(file_path, encoding="utf-8", errors="replace") as fh:
        for line in fh:
            if OPENAPI_LINE.match(line):
                return True
    return False
