"""
Diagnostics module.

Per-node and per-edge problems never abort a generation run. They are
recovered locally and recorded here so callers and tests can audit every
skipped edge, dropped attribute and renamed field.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, List, Optional

logger = logging.getLogger(__name__)


class Severity(Enum):
    INFO = "info"
    WARNING = "warning"


class DiagnosticCode(Enum):
    """Categories of recoverable generation problems."""
    SKIPPED_EDGE = "skipped_edge"
    MIRRORED_EDGE = "mirrored_edge"
    DUPLICATE_NODE = "duplicate_node"
    RENAMED_CLASS = "renamed_class"
    MALFORMED_NODE = "malformed_node"
    DROPPED_MEMBER = "dropped_member"
    RESERVED_ATTRIBUTE = "reserved_attribute"
    ATTRIBUTE_COLLISION = "attribute_collision"
    DUPLICATE_ATTRIBUTE = "duplicate_attribute"
    FIELD_RENAMED = "field_renamed"
    MULTIPLE_SUPERCLASSES = "multiple_superclasses"
    INHERITANCE_CYCLE = "inheritance_cycle"
    INVALID_RELATIONSHIP = "invalid_relationship"
    MODEL_WARNING = "model_warning"


@dataclass(frozen=True)
class Diagnostic:
    """A single recorded generation problem."""

    code: DiagnosticCode
    message: str
    severity: Severity = Severity.WARNING
    node_id: Optional[str] = None
    edge_id: Optional[str] = None

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"


class DiagnosticLog:
    """
    Ordered collection of diagnostics.

    Entries are logged as they are recorded: warnings at WARNING level,
    informational entries at DEBUG level.
    """

    def __init__(self, entries: Optional[Iterable[Diagnostic]] = None):
        self.entries: List[Diagnostic] = list(entries or [])

    def add(
        self,
        code: DiagnosticCode,
        message: str,
        severity: Severity = Severity.WARNING,
        node_id: Optional[str] = None,
        edge_id: Optional[str] = None,
    ) -> Diagnostic:
        """
        Record a diagnostic.

        Args:
            code: Diagnostic category
            message: Human-readable description
            severity: Severity of the problem
            node_id: Node the problem belongs to, if any
            edge_id: Edge the problem belongs to, if any

        Returns:
            The recorded diagnostic
        """
        diagnostic = Diagnostic(code, message, severity, node_id, edge_id)
        self.entries.append(diagnostic)
        if severity == Severity.WARNING:
            logger.warning(str(diagnostic))
        else:
            logger.debug(str(diagnostic))
        return diagnostic

    def extend(self, diagnostics: Iterable[Diagnostic]) -> None:
        self.entries.extend(diagnostics)

    def by_code(self, code: DiagnosticCode) -> List[Diagnostic]:
        return [d for d in self.entries if d.code == code]

    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.entries if d.severity == Severity.WARNING]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)
