"""Syntax tree of a parsed journal: transactions, postings and directives."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional


@dataclass
class Position:
    """A location in source text (1-based line and column, 0-based offset)."""

    line: int = 0
    column: int = 0
    offset: int = 0


@dataclass
class Range:
    """A span of source text."""

    start: Position = field(default_factory=Position)
    end: Position = field(default_factory=Position)


class Status(enum.IntEnum):
    NONE = 0
    PENDING = 1
    CLEARED = 2


class VirtualType(enum.IntEnum):
    NONE = 0
    BALANCED = 1
    UNBALANCED = 2


class CommodityPosition(enum.IntEnum):
    LEFT = 0
    RIGHT = 1


@dataclass
class Date:
    year: int = 0
    month: int = 0
    day: int = 0
    range: Range = field(default_factory=Range)


@dataclass
class Account:
    name: str = ""
    range: Range = field(default_factory=Range)


@dataclass
class Commodity:
    symbol: str = ""
    position: CommodityPosition = CommodityPosition.LEFT
    range: Range = field(default_factory=Range)


@dataclass
class Amount:
    quantity: Decimal = field(default_factory=Decimal)
    raw_quantity: str = ""
    commodity: Commodity = field(default_factory=Commodity)
    range: Range = field(default_factory=Range)


@dataclass
class Cost:
    amount: Amount = field(default_factory=Amount)
    is_total: bool = False
    range: Range = field(default_factory=Range)


@dataclass
class BalanceAssertion:
    amount: Amount = field(default_factory=Amount)
    is_strict: bool = False
    is_inclusive: bool = False
    range: Range = field(default_factory=Range)


@dataclass
class Tag:
    name: str = ""
    value: str = ""
    range: Range = field(default_factory=Range)


@dataclass
class Comment:
    text: str = ""
    tags: list[Tag] = field(default_factory=list)
    range: Range = field(default_factory=Range)


@dataclass
class Posting:
    status: Status = Status.NONE
    account: Account = field(default_factory=Account)
    amount: Optional[Amount] = None
    balance_assertion: Optional[BalanceAssertion] = None
    cost: Optional[Cost] = None
    comment: str = ""
    tags: list[Tag] = field(default_factory=list)
    virtual: VirtualType = VirtualType.NONE
    range: Range = field(default_factory=Range)


@dataclass
class Transaction:
    date: Date = field(default_factory=Date)
    date2: Optional[Date] = None
    status: Status = Status.NONE
    code: str = ""
    description: str = ""
    payee: str = ""
    note: str = ""
    postings: list[Posting] = field(default_factory=list)
    tags: list[Tag] = field(default_factory=list)
    comments: list[Comment] = field(default_factory=list)
    range: Range = field(default_factory=Range)


class Directive:
    """Base class of every top-level directive; each carries a ``range``."""

    range: Range


@dataclass
class AccountDirective(Directive):
    account: Account = field(default_factory=Account)
    tags: list[Tag] = field(default_factory=list)
    comment: str = ""
    subdirs: dict[str, str] = field(default_factory=dict)
    range: Range = field(default_factory=Range)


@dataclass
class CommodityDirective(Directive):
    commodity: Commodity = field(default_factory=Commodity)
    format: str = ""
    alias: list[str] = field(default_factory=list)
    note: str = ""
    subdirs: dict[str, str] = field(default_factory=dict)
    range: Range = field(default_factory=Range)


@dataclass
class Include(Directive):
    path: str = ""
    range: Range = field(default_factory=Range)


@dataclass
class PriceDirective(Directive):
    date: Date = field(default_factory=Date)
    commodity: Commodity = field(default_factory=Commodity)
    price: Amount = field(default_factory=Amount)
    range: Range = field(default_factory=Range)


@dataclass
class YearDirective(Directive):
    year: int = 0
    range: Range = field(default_factory=Range)


@dataclass
class Journal:
    transactions: list[Transaction] = field(default_factory=list)
    directives: list[Directive] = field(default_factory=list)
    comments: list[Comment] = field(default_factory=list)
    includes: list[Include] = field(default_factory=list)