"""
Bulk import of roots and schemes from newline-delimited text.

Formats:
- roots: one root per line (e.g. "كتب")
- schemes: one "name|rule" pair per line (e.g. "فَاعِل|1َا2ِ3")

Blank lines and lines starting with '#' are ignored. Every other line
yields one ImportEntry; a bad line is counted as skipped and the
import goes on.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Iterator, List, Optional, Tuple, Union

if TYPE_CHECKING:
    from .engine import MorphologyEngine, OperationResult

logger = logging.getLogger(__name__)


@dataclass
class ImportEntry:
    line_number: int
    text: str
    added: bool
    reason: Optional[str] = None


@dataclass
class ImportReport:
    entries: List[ImportEntry] = field(default_factory=list)

    @property
    def added(self) -> int:
        return sum(1 for e in self.entries if e.added)

    @property
    def skipped(self) -> int:
        return sum(1 for e in self.entries if not e.added)

    def __str__(self) -> str:
        return f"{self.added} added, {self.skipped} skipped"


def _content_lines(lines: Iterable[str]) -> Iterator[Tuple[int, str]]:
    for number, line in enumerate(lines, 1):
        line = line.strip()
        if not line or line.startswith('#'):
            continue
        yield number, line


def _entry(number: int, line: str, result: 'OperationResult') -> ImportEntry:
    if not result.ok:
        logger.warning(f"Line {number} skipped ({result.status.value}): {line}")
    return ImportEntry(number, line, result.ok, result.reason)


def import_roots(engine: 'MorphologyEngine', lines: Iterable[str]) -> ImportReport:
    report = ImportReport()
    for number, line in _content_lines(lines):
        report.entries.append(_entry(number, line, engine.register_root(line)))
    logger.info(f"Root import: {report}")
    return report


def parse_scheme_line(line: str) -> Tuple[str, str]:
    """Split 'name|rule'. Raises ValueError when the separator is missing."""
    if '|' not in line:
        raise ValueError("expected 'name|rule'")
    name, rule = line.split('|', 1)
    name, rule = name.strip(), rule.strip()
    if not name:
        raise ValueError("scheme name is empty")
    return name, rule


def import_schemes(engine: 'MorphologyEngine', lines: Iterable[str]) -> ImportReport:
    report = ImportReport()
    for number, line in _content_lines(lines):
        try:
            name, rule = parse_scheme_line(line)
        except ValueError as e:
            logger.warning(f"Line {number} skipped (malformed): {line}")
            report.entries.append(ImportEntry(number, line, False, str(e)))
            continue
        report.entries.append(_entry(number, line, engine.register_scheme(name, rule)))
    logger.info(f"Scheme import: {report}")
    return report


def read_lines(source: Union[str, Path]) -> List[str]:
    with open(source, 'r', encoding='utf-8') as f:
        return f.read().splitlines()
