"""Result types produced by journal analysis."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Optional

from ledgerlsp.journal import Range


class DiagnosticSeverity(enum.IntEnum):
    ERROR = 0
    WARNING = 1
    INFO = 2
    HINT = 3


@dataclass
class Diagnostic:
    """A problem found in a journal, located by a source range."""

    range: Range = field(default_factory=Range)
    severity: DiagnosticSeverity = DiagnosticSeverity.ERROR
    message: str = ""
    code: str = ""


@dataclass
class PostingTemplate:
    """A posting remembered from a payee's latest transaction."""

    account: str = ""
    amount: str = ""
    commodity: str = ""
    commodity_left: bool = False


@dataclass
class AccountIndex:
    """Every known account, plus accounts grouped by each parent prefix."""

    all: list[str] = field(default_factory=list)
    by_prefix: dict[str, list[str]] = field(default_factory=dict)


@dataclass
class AnalysisResult:
    accounts: AccountIndex = field(default_factory=AccountIndex)
    payees: list[str] = field(default_factory=list)
    commodities: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    tag_values: dict[str, list[str]] = field(default_factory=dict)
    dates: list[str] = field(default_factory=list)
    payee_templates: dict[str, list[PostingTemplate]] = field(default_factory=dict)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    account_counts: dict[str, int] = field(default_factory=dict)
    payee_counts: dict[str, int] = field(default_factory=dict)
    commodity_counts: dict[str, int] = field(default_factory=dict)
    tag_counts: dict[str, int] = field(default_factory=dict)


@dataclass
class BalanceResult:
    """Outcome of checking one transaction; ``inferred_idx`` is -1 if none."""

    balanced: bool = True
    differences: dict[str, Decimal] = field(default_factory=dict)
    inferred_idx: int = -1


@dataclass
class ExternalDeclarations:
    """Account and commodity names declared outside the analysed journal."""

    accounts: Optional[Iterable[str]] = None
    commodities: Optional[Iterable[str]] = None

    def __post_init__(self) -> None:
        self.accounts = set(self.accounts or ())
        self.commodities = set(self.commodities or ())