"""Collection of accounts, payees, commodities, tags and dates from a journal."""

from __future__ import annotations

from collections import Counter
from decimal import Decimal
from typing import Iterator

from ledgerlsp.analysis_types import AccountIndex, PostingTemplate
from ledgerlsp.journal import (
    AccountDirective,
    CommodityDirective,
    CommodityPosition,
    Date,
    Journal,
    Tag,
    Transaction,
)


def _decimal_string(value: Decimal) -> str:
    if value == 0:
        return "0"
    return format(value.normalize(), "f")


def _payee_name(tx: Transaction) -> str:
    return tx.payee or tx.description


def _iter_tags(journal: Journal) -> Iterator[Tag]:
    for tx in journal.transactions:
        yield from tx.tags
        for comment in tx.comments:
            yield from comment.tags
        for posting in tx.postings:
            yield from posting.tags


def _unique(values: Iterator[str]) -> list[str]:
    return list(dict.fromkeys(v for v in values if v))


def add_account_to_index(idx: AccountIndex, name: str) -> None:
    """Append ``name`` to ``idx`` and to the list of each of its parent prefixes."""
    idx.all.append(name)
    parts = name.split(":")
    for depth in range(1, len(parts)):
        prefix = ":".join(parts[:depth]) + ":"
        idx.by_prefix.setdefault(prefix, []).append(name)


def collect_accounts(journal: Journal) -> AccountIndex:
    declared = (
        d.account.name for d in journal.directives if isinstance(d, AccountDirective)
    )
    posted = (p.account.name for tx in journal.transactions for p in tx.postings)

    idx = AccountIndex()
    for name in _unique(n for source in (declared, posted) for n in source):
        add_account_to_index(idx, name)
    return idx


def collect_payees(journal: Journal) -> list[str]:
    return _unique(_payee_name(tx) for tx in journal.transactions)


def _iter_commodities(journal: Journal) -> Iterator[str]:
    for d in journal.directives:
        if isinstance(d, CommodityDirective):
            yield d.commodity.symbol
    for tx in journal.transactions:
        for posting in tx.postings:
            if posting.amount is not None:
                yield posting.amount.commodity.symbol
            if posting.cost is not None:
                yield posting.cost.amount.commodity.symbol


def collect_commodities(journal: Journal) -> list[str]:
    return _unique(_iter_commodities(journal))


def collect_tags(journal: Journal) -> list[str]:
    return _unique(tag.name for tag in _iter_tags(journal))


def collect_payee_templates(journal: Journal) -> dict[str, list[PostingTemplate]]:
    """Postings of the last transaction seen for each payee."""
    result: dict[str, list[PostingTemplate]] = {}
    for tx in journal.transactions:
        payee = _payee_name(tx)
        if not payee:
            continue
        templates = []
        for posting in tx.postings:
            template = PostingTemplate(account=posting.account.name)
            amount = posting.amount
            if amount is not None:
                template.amount = amount.raw_quantity or _decimal_string(amount.quantity)
                template.commodity = amount.commodity.symbol
                template.commodity_left = amount.commodity.position == CommodityPosition.LEFT
            templates.append(template)
        result[payee] = templates
    return result


def format_date(d: Date) -> str:
    """ISO form of ``d``, or an empty string for a zero or out-of-range date."""
    if d.year == 0 and d.month == 0 and d.day == 0:
        return ""
    if not (1 <= d.month <= 12 and 1 <= d.day <= 31):
        return ""
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def collect_dates(journal: Journal) -> list[str]:
    return _unique(format_date(tx.date) for tx in journal.transactions)


def collect_tag_values(journal: Journal) -> dict[str, list[str]]:
    """Distinct values per tag name; a tag seen only without value maps to []."""
    result: dict[str, list[str]] = {}
    for tag in _iter_tags(journal):
        if not tag.name:
            continue
        values = result.setdefault(tag.name, [])
        if tag.value and tag.value not in values:
            values.append(tag.value)
    return result


def collect_account_counts(journal: Journal) -> dict[str, int]:
    return dict(Counter(
        p.account.name
        for tx in journal.transactions
        for p in tx.postings
        if p.account.name
    ))


def collect_payee_counts(journal: Journal) -> dict[str, int]:
    return dict(Counter(
        name for name in (_payee_name(tx) for tx in journal.transactions) if name
    ))


def collect_commodity_counts(journal: Journal) -> dict[str, int]:
    def symbols() -> Iterator[str]:
        for tx in journal.transactions:
            for posting in tx.postings:
                if posting.amount is not None:
                    yield posting.amount.commodity.symbol
                if posting.cost is not None:
                    yield posting.cost.amount.commodity.symbol

    return dict(Counter(s for s in symbols() if s))


def collect_tag_counts(journal: Journal) -> dict[str, int]:
    return dict(Counter(tag.name for tag in _iter_tags(journal) if tag.name))


def collect_tag_value_counts(journal: Journal) -> dict[str, dict[str, int]]:
    counts: dict[str, dict[str, int]] = {}
    for tag in _iter_tags(journal):
        if not tag.name or not tag.value:
            continue
        per_value = counts.setdefault(tag.name, {})
        per_value[tag.value] = per_value.get(tag.value, 0) + 1
    return counts