"""Transaction balance checks and per-account running balances."""

from __future__ import annotations

from collections import defaultdict
from decimal import Decimal
from typing import Iterable

from ledgerlsp.analysis_types import BalanceResult
from ledgerlsp.journal import Journal, Posting, Transaction, VirtualType

AccountBalances = dict[str, dict[str, Decimal]]


def _is_real(posting: Posting) -> bool:
    return posting.virtual in (VirtualType.NONE, VirtualType.BALANCED)


def _sum_by_commodity(postings: Iterable[Posting]) -> dict[str, Decimal]:
    balances: dict[str, Decimal] = defaultdict(Decimal)
    for posting in postings:
        amount = posting.amount
        if amount is None:
            continue
        cost = posting.cost
        if cost is not None:
            if cost.is_total:
                quantity = cost.amount.quantity
            else:
                quantity = cost.amount.quantity * abs(amount.quantity)
            if amount.quantity < 0:
                quantity = -quantity
            balances[cost.amount.commodity.symbol] += quantity
        else:
            balances[amount.commodity.symbol] += amount.quantity
    return dict(balances)


def check_balance(tx: Transaction) -> BalanceResult:
    """Check that the real postings of ``tx`` sum to zero per commodity."""
    result = BalanceResult()
    real = [p for p in tx.postings if _is_real(p)]
    inferred = [i for i, p in enumerate(real) if p.amount is None]

    if len(inferred) > 1:
        result.balanced = False
        return result

    if inferred:
        result.inferred_idx = inferred[-1]
        return result

    for commodity, total in _sum_by_commodity(real).items():
        if total != 0:
            result.balanced = False
            result.differences[commodity] = abs(total)
    return result


def calculate_account_balances_from_transactions(
    transactions: Iterable[Transaction],
) -> AccountBalances:
    """Sum posted amounts per account and commodity; inferred amounts are skipped."""
    balances: AccountBalances = {}
    for tx in transactions:
        for posting in tx.postings:
            amount = posting.amount
            if amount is None:
                continue
            per_commodity = balances.setdefault(posting.account.name, {})
            symbol = amount.commodity.symbol
            per_commodity[symbol] = per_commodity.get(symbol, Decimal(0)) + amount.quantity
    return balances


def calculate_account_balances(journal: Journal) -> AccountBalances:
    return calculate_account_balances_from_transactions(journal.transactions)