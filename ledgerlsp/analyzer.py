"""Journal analysis: collected names, counts and diagnostics."""

from __future__ import annotations

from collections import Counter
from decimal import Decimal
from typing import Iterable, Iterator, Optional

from ledgerlsp.analysis_types import (
    AccountIndex,
    AnalysisResult,
    BalanceResult,
    Diagnostic,
    DiagnosticSeverity,
    ExternalDeclarations,
    PostingTemplate,
)
from ledgerlsp.balance import check_balance
from ledgerlsp.indexer import (
    add_account_to_index,
    collect_account_counts,
    collect_accounts,
    collect_commodities,
    collect_commodity_counts,
    collect_dates,
    collect_payee_counts,
    collect_payee_templates,
    collect_payees,
    collect_tag_counts,
    collect_tag_values,
    collect_tags,
)
from ledgerlsp.journal import (
    AccountDirective,
    CommodityDirective,
    Journal,
    Range,
    Transaction,
)
from ledgerlsp.resolved import ResolvedJournal

_PREDEFINED_ACCOUNT_TYPES = frozenset(
    {"assets", "liabilities", "equity", "expenses", "revenues", "income"}
)


def _decimal_string(value: Decimal) -> str:
    if value == 0:
        return "0"
    return format(value.normalize(), "f")


def _declared_accounts(journal: Journal) -> set[str]:
    return {
        d.account.name for d in journal.directives if isinstance(d, AccountDirective)
    }


def _declared_commodities(journal: Journal) -> set[str]:
    return {
        d.commodity.symbol
        for d in journal.directives
        if isinstance(d, CommodityDirective)
    }


def is_account_declared(account_name: str, declared: Iterable[str]) -> bool:
    """True for predefined top-level types, declared accounts and their subaccounts."""
    prefix = account_name.lower().split(":", 1)[0]
    if prefix in _PREDEFINED_ACCOUNT_TYPES:
        return True
    declared = set(declared)
    if account_name in declared:
        return True
    return any(account_name.startswith(name + ":") for name in declared)


def _undeclared_account_diagnostics(
    tx: Transaction, declared: set[str]
) -> list[Diagnostic]:
    return [
        Diagnostic(
            range=posting.range,
            severity=DiagnosticSeverity.WARNING,
            code="UNDECLARED_ACCOUNT",
            message=f"account '{posting.account.name}' is not declared",
        )
        for posting in tx.postings
        if not is_account_declared(posting.account.name, declared)
    ]


def _undeclared_commodity_diagnostics(
    tx: Transaction, declared: set[str]
) -> list[Diagnostic]:
    def used() -> Iterator[tuple[str, Range]]:
        for posting in tx.postings:
            if posting.amount is not None:
                yield posting.amount.commodity.symbol, posting.amount.commodity.range
            if posting.cost is not None:
                commodity = posting.cost.amount.commodity
                yield commodity.symbol, commodity.range
            if posting.balance_assertion is not None:
                commodity = posting.balance_assertion.amount.commodity
                yield commodity.symbol, commodity.range

    diagnostics = []
    seen: set[str] = set()
    for symbol, range_ in used():
        if symbol and symbol not in declared and symbol not in seen:
            seen.add(symbol)
            diagnostics.append(
                Diagnostic(
                    range=range_,
                    severity=DiagnosticSeverity.WARNING,
                    code="UNDECLARED_COMMODITY",
                    message=f"commodity '{symbol}' has no directive",
                )
            )
    return diagnostics


def _balance_diagnostic(tx: Transaction, result: BalanceResult) -> Diagnostic:
    if result.inferred_idx == -1 and not result.differences:
        return Diagnostic(
            range=tx.range,
            severity=DiagnosticSeverity.ERROR,
            code="MULTIPLE_INFERRED",
            message="transaction has multiple postings without amounts",
        )
    detail = "; ".join(
        f"{commodity} off by {_decimal_string(diff)}"
        for commodity, diff in result.differences.items()
    )
    return Diagnostic(
        range=tx.range,
        severity=DiagnosticSeverity.ERROR,
        code="UNBALANCED",
        message=f"transaction does not balance: {detail}",
    )


def _diagnose(
    transactions: Iterable[Transaction],
    declared_accounts: set[str],
    declared_commodities: set[str],
) -> list[Diagnostic]:
    diagnostics: list[Diagnostic] = []
    for tx in transactions:
        balance = check_balance(tx)
        if not balance.balanced:
            diagnostics.append(_balance_diagnostic(tx, balance))
        if declared_accounts:
            diagnostics.extend(_undeclared_account_diagnostics(tx, declared_accounts))
        if declared_commodities:
            diagnostics.extend(
                _undeclared_commodity_diagnostics(tx, declared_commodities)
            )
    return diagnostics


def _journals(resolved: ResolvedJournal) -> list[Journal]:
    journals = [resolved.primary] if resolved.primary is not None else []
    journals.extend(j for j in resolved.files.values() if j is not None)
    return journals


def _merge_unique(lists: Iterable[list[str]]) -> list[str]:
    return list(dict.fromkeys(item for items in lists for item in items))


def _merge_tag_values(journals: list[Journal]) -> dict[str, list[str]]:
    result: dict[str, list[str]] = {}
    for journal in journals:
        for name, values in collect_tag_values(journal).items():
            for value in values:
                merged = result.setdefault(name, [])
                if value not in merged:
                    merged.append(value)
    return result


def _merge_counts(counts: Iterable[dict[str, int]]) -> dict[str, int]:
    total: Counter[str] = Counter()
    for c in counts:
        total.update(c)
    return dict(total)


class Analyzer:
    """Collects completion data and diagnostics from journals."""

    def analyze(self, journal: Journal) -> AnalysisResult:
        return self.analyze_with_external_declarations(journal, ExternalDeclarations())

    def analyze_with_external_declarations(
        self, journal: Journal, external: Optional[ExternalDeclarations]
    ) -> AnalysisResult:
        """Analyse one journal, treating ``external`` names as declared too."""
        external = external or ExternalDeclarations()
        declared_accounts = _declared_accounts(journal) | set(external.accounts or ())
        declared_commodities = _declared_commodities(journal) | set(
            external.commodities or ()
        )
        return AnalysisResult(
            accounts=collect_accounts(journal),
            payees=collect_payees(journal),
            commodities=collect_commodities(journal),
            tags=collect_tags(journal),
            tag_values=collect_tag_values(journal),
            dates=collect_dates(journal),
            payee_templates=collect_payee_templates(journal),
            diagnostics=_diagnose(
                journal.transactions, declared_accounts, declared_commodities
            ),
            account_counts=collect_account_counts(journal),
            payee_counts=collect_payee_counts(journal),
            commodity_counts=collect_commodity_counts(journal),
            tag_counts=collect_tag_counts(journal),
        )

    def analyze_resolved(self, resolved: Optional[ResolvedJournal]) -> AnalysisResult:
        """Analyse a journal with its includes; diagnostics cover the primary only."""
        if resolved is None or resolved.primary is None:
            return AnalysisResult()

        journals = _journals(resolved)

        accounts = AccountIndex()
        for name in _merge_unique(collect_accounts(j).all for j in journals):
            add_account_to_index(accounts, name)

        templates: dict[str, list[PostingTemplate]] = {}
        for journal in resolved.files.values():
            if journal is not None:
                templates.update(collect_payee_templates(journal))
        templates.update(collect_payee_templates(resolved.primary))

        declared_accounts: set[str] = set()
        declared_commodities: set[str] = set()
        for journal in journals:
            declared_accounts |= _declared_accounts(journal)
            declared_commodities |= _declared_commodities(journal)

        return AnalysisResult(
            accounts=accounts,
            payees=_merge_unique(collect_payees(j) for j in journals),
            commodities=_merge_unique(collect_commodities(j) for j in journals),
            tags=_merge_unique(collect_tags(j) for j in journals),
            tag_values=_merge_tag_values(journals),
            dates=_merge_unique(collect_dates(j) for j in journals),
            payee_templates=templates,
            diagnostics=_diagnose(
                resolved.primary.transactions, declared_accounts, declared_commodities
            ),
            account_counts=_merge_counts(collect_account_counts(j) for j in journals),
            payee_counts=_merge_counts(collect_payee_counts(j) for j in journals),
            commodity_counts=_merge_counts(
                collect_commodity_counts(j) for j in journals
            ),
            tag_counts=_merge_counts(collect_tag_counts(j) for j in journals),
        )