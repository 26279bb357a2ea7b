"""Data models shared by the bundler, validator and problem report.

Problems are produced per file and never own any part of the
document tree they describe.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel

Severity = Literal["error", "warn"]


class Location(BaseModel):
    """Where a problem was found: a file and a JSON pointer inside it."""

    source: str
    pointer: str = "#/"


class Problem(BaseModel):
    """A single diagnostic reported while bundling one file."""

    rule_id: str
    severity: Severity
    message: str
    location: list[Location] = []


class Totals(BaseModel):
    errors: int = 0
    warnings: int = 0
    ignored: int = 0


class BundleResult(BaseModel):
    """Output of bundling one root document."""

    document: dict | None
    problems: list[Problem] = []
    file_dependencies: list[Path] = []
