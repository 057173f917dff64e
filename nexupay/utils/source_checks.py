"""
Static Source Checks

FLOW OVERVIEW
- load_manifest(path) → list of SourceExpectation from a JSON manifest:
  [{"name": ..., "path": ..., "expected": {"imports": [...], "states": [...]}}]
- run_source_checks(expectations, root)
  • Read each file once and check that every expected identifier occurs in it.
  • A missing file fails every expectation of its entry.
  • Returns a SourceCheckReport with per-identifier results and totals.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Iterable

logger = logging.getLogger(__name__)


class SourceExpectation:
    """Identifiers that must appear in one source file."""

    def __init__(self, name: str, path: str, expected: Dict[str, List[str]]):
        self.name = name
        self.path = path
        self.expected = expected

    @classmethod
    def from_dict(cls, data):
        return cls(data.get('name') or data['path'], data['path'], data.get('expected') or {})


class CheckItem:
    def __init__(self, entry: str, category: str, identifier: str, passed: bool):
        self.entry = entry
        self.category = category
        self.identifier = identifier
        self.passed = passed


class SourceCheckReport:
    def __init__(self):
        self.items: List[CheckItem] = []
        self.missing_files: List[str] = []

    @property
    def total(self) -> int:
        return len(self.items)

    @property
    def passed(self) -> int:
        return sum(1 for item in self.items if item.passed)

    @property
    def failed(self) -> int:
        return self.total - self.passed

    @property
    def success_rate(self) -> float:
        return round(100.0 * self.passed / self.total, 1) if self.total else 100.0

    @property
    def ok(self) -> bool:
        return self.failed == 0 and not self.missing_files


def load_manifest(path) -> List[SourceExpectation]:
    with open(path, encoding='utf-8') as handle:
        data = json.load(handle)
    if not isinstance(data, list):
        raise ValueError('Manifest must be a JSON list of entries')
    return [SourceExpectation.from_dict(entry) for entry in data]


def run_source_checks(expectations: Iterable[SourceExpectation], root='.') -> SourceCheckReport:
    report = SourceCheckReport()
    root = Path(root)

    for expectation in expectations:
        try:
            content = (root / expectation.path).read_text(encoding='utf-8')
        except OSError as e:
            logger.error(f"❌ {expectation.name}: cannot read {expectation.path}: {str(e)}")
            report.missing_files.append(expectation.path)
            content = None

        for category, identifiers in expectation.expected.items():
            for identifier in identifiers:
                passed = content is not None and identifier in content
                report.items.append(CheckItem(expectation.name, category, identifier, passed))

    return report
