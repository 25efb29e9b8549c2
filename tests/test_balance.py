from decimal import Decimal

import pytest

from ledgerlsp.balance import (
    calculate_account_balances,
    calculate_account_balances_from_transactions,
    check_balance,
)
from ledgerlsp.journal import (
    Account,
    Amount,
    BalanceAssertion,
    Commodity,
    CommodityPosition,
    Cost,
    Journal,
    Posting,
    Transaction,
    VirtualType,
)


def amt(qty, symbol="$", position=CommodityPosition.LEFT):
    return Amount(quantity=Decimal(qty), commodity=Commodity(symbol=symbol, position=position))


def post(account, qty=None, symbol="$", cost=None, total=False, assertion=None,
         virtual=VirtualType.NONE):
    return Posting(
        account=Account(name=account),
        amount=None if qty is None else amt(qty, symbol),
        cost=None if cost is None else Cost(amount=amt(*cost), is_total=total),
        balance_assertion=None if assertion is None else BalanceAssertion(amount=amt(*assertion)),
        virtual=virtual,
    )


def tx(*postings, description="test"):
    return Transaction(description=description, postings=list(postings))


def test_simple_balanced():
    result = check_balance(tx(post("expenses:food", "50"), post("assets:cash", "-50")))
    assert result.balanced is True
    assert result.differences == {}


def test_inferred_amount():
    result = check_balance(tx(post("expenses:food", "50"), post("assets:cash")))
    assert result.balanced is True
    assert result.inferred_idx == 1


def test_unbalanced():
    result = check_balance(tx(post("expenses:food", "50"), post("assets:cash", "-40")))
    assert result.balanced is False
    assert result.differences["$"] == Decimal(10)


def test_multi_commodity_balanced():
    result = check_balance(tx(
        post("expenses:food", "50"),
        post("expenses:rent", "100", "EUR"),
        post("assets:cash", "-50"),
        post("assets:bank", "-100", "EUR"),
    ))
    assert result.balanced is True


def test_multi_commodity_unbalanced():
    result = check_balance(tx(
        post("expenses:food", "50"),
        post("expenses:rent", "100", "EUR"),
        post("assets:cash", "-50"),
        post("assets:bank", "-90", "EUR"),
    ))
    assert result.balanced is False
    assert result.differences["EUR"] == Decimal(10)


def test_multiple_inferred_is_error():
    result = check_balance(tx(post("expenses:food"), post("assets:cash")))
    assert result.balanced is False
    assert result.inferred_idx == -1
    assert result.differences == {}


def test_cost_unit_price():
    result = check_balance(tx(
        post("assets:stocks", "10", "AAPL", cost=("150", "$")),
        post("assets:cash", "-1500"),
    ))
    assert result.balanced is True


def test_cost_total_price():
    result = check_balance(tx(
        post("assets:stocks", "10", "AAPL", cost=("1500", "$"), total=True),
        post("assets:cash", "-1500"),
    ))
    assert result.balanced is True


def test_virtual_unbalanced_is_exempt():
    result = check_balance(tx(
        post("expenses:food", "50"),
        post("assets:cash", "-50"),
        post("budget:food", "-50", virtual=VirtualType.UNBALANCED),
    ))
    assert result.balanced is True


def test_zero_amounts():
    result = check_balance(tx(post("expenses:food", "0"), post("assets:cash", "0")))
    assert result.balanced is True


def test_negative_amounts():
    result = check_balance(tx(post("assets:cash", "100"), post("expenses:food", "-100")))
    assert result.balanced is True


@pytest.mark.parametrize(
    "postings, balanced",
    [
        ([post("expenses:food", "50"), post("assets:cash", "-50")], True),
        ([post("expenses:food", "50"), post("assets:cash")], True),
        ([post("expenses:food", "50"), post("assets:cash", "-40")], False),
        ([post("expenses:food", "30"), post("expenses:drinks", "20"),
          post("assets:cash", "-50")], True),
    ],
)
def test_table(postings, balanced):
    assert check_balance(tx(*postings)).balanced is balanced


def test_multi_currency_inferred():
    result = check_balance(tx(
        post("assets:bank", "1000", "RUB"),
        post("assets:cash", "100", "USD"),
        post("equity:opening"),
    ))
    assert result.balanced is True
    assert result.inferred_idx == 2


def test_multi_currency_with_balance_assertion():
    result = check_balance(tx(
        post("assets:bank", "1000", "RUB", assertion=("1000", "RUB")),
        post("assets:cash", "100", "USD", assertion=("100", "USD")),
        post("equity:opening"),
    ))
    assert result.balanced is True


def test_multi_currency_explicitly_balanced():
    result = check_balance(tx(
        post("assets:bank", "1000", "RUB"),
        post("assets:cash", "100", "USD"),
        post("equity:rub", "-1000", "RUB"),
        post("equity:usd", "-100", "USD"),
    ))
    assert result.balanced is True


def test_account_balances_single_transaction():
    journal = Journal(transactions=[tx(post("expenses:food", "50"), post("assets:cash", "-50"))])
    balances = calculate_account_balances(journal)
    assert balances["expenses:food"]["$"] == Decimal(50)
    assert balances["assets:cash"]["$"] == Decimal(-50)


def test_account_balances_multiple_transactions():
    journal = Journal(transactions=[
        tx(post("expenses:food", "50"), post("assets:cash", "-50"), description="grocery"),
        tx(post("expenses:food", "30"), post("assets:cash", "-30"), description="restaurant"),
    ])
    balances = calculate_account_balances(journal)
    assert balances["expenses:food"]["$"] == Decimal(80)
    assert balances["assets:cash"]["$"] == Decimal(-80)


def test_account_balances_multi_commodity():
    journal = Journal(transactions=[tx(
        post("expenses:food", "50"),
        post("expenses:food", "20", "EUR"),
        post("assets:cash", "-50"),
        post("assets:bank", "-20", "EUR"),
    )])
    balances = calculate_account_balances(journal)
    assert balances["expenses:food"]["$"] == Decimal(50)
    assert balances["expenses:food"]["EUR"] == Decimal(20)
    assert balances["assets:cash"]["$"] == Decimal(-50)
    assert balances["assets:bank"]["EUR"] == Decimal(-20)


def test_account_balances_inferred_amount_skipped():
    journal = Journal(transactions=[tx(post("expenses:food", "50"), post("assets:cash"))])
    balances = calculate_account_balances(journal)
    assert balances["expenses:food"]["$"] == Decimal(50)
    assert "assets:cash" not in balances


def test_account_balances_empty_journal():
    assert calculate_account_balances(Journal()) == {}


def test_account_balances_with_cost():
    journal = Journal(transactions=[tx(
        post("assets:stocks", "10", "AAPL", cost=("150", "$")),
        post("assets:cash", "-1500"),
    )])
    balances = calculate_account_balances(journal)
    assert balances["assets:stocks"]["AAPL"] == Decimal(10)
    assert balances["assets:cash"]["$"] == Decimal(-1500)


def test_account_balances_zero_balance():
    transactions = [
        tx(post("expenses:food", "50"), post("assets:cash", "-50"), description="buy"),
        tx(post("expenses:food", "-50"), post("assets:cash", "50"), description="refund"),
    ]
    balances = calculate_account_balances_from_transactions(transactions)
    assert balances["expenses:food"]["$"] == 0
    assert balances["assets:cash"]["$"] == 0