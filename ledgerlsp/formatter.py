"""Document formatting: aligned postings and trimmed trailing whitespace."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from ledgerlsp.journal import (
    Amount,
    CommodityDirective,
    CommodityPosition,
    Cost,
    Journal,
    Posting,
    Status,
    Transaction,
    VirtualType,
)
from ledgerlsp.lsputil import LspPosition, LspRange, PositionMapper, TextEdit, utf16_len
from ledgerlsp.numberformat import NumberFormat, format_number, parse_number_format

DEFAULT_INDENT_SIZE = 4
MIN_SPACES = 2

_DEFAULT_INDENT = " " * DEFAULT_INDENT_SIZE

_STATUS_MARKS = {Status.CLEARED: "* ", Status.PENDING: "! "}
_BRACKETS = {VirtualType.UNBALANCED: ("(", ")"), VirtualType.BALANCED: ("[", "]")}

CommodityFormats = dict[str, NumberFormat]


@dataclass
class FormatOptions:
    indent_size: int = DEFAULT_INDENT_SIZE
    align_amounts: bool = True
    min_alignment_column: int = 0


@dataclass(frozen=True)
class AlignmentInfo:
    """Columns where amounts and balance assertions start (0 means none)."""

    account_col: int = 0
    balance_assertion_col: int = 0


def default_options() -> FormatOptions:
    return FormatOptions()


def _decimal_string(value: Decimal) -> str:
    if value == 0:
        return "0"
    return format(value.normalize(), "f")


def _extract_commodity_formats(journal: Journal) -> CommodityFormats:
    return {
        d.commodity.symbol: parse_number_format(d.format)
        for d in journal.directives
        if isinstance(d, CommodityDirective) and d.format
    }


def _format_quantity(amount: Amount, formats: Optional[CommodityFormats]) -> str:
    """Commodity directive format, else the original text, else the decimal."""
    if formats is not None and amount.commodity.symbol in formats:
        return format_number(amount.quantity, formats[amount.commodity.symbol])
    if amount.raw_quantity:
        return amount.raw_quantity
    return _decimal_string(amount.quantity)


def _render_amount(amount: Amount, formats: Optional[CommodityFormats]) -> str:
    quantity = _format_quantity(amount, formats)
    symbol = amount.commodity.symbol
    if amount.commodity.position == CommodityPosition.LEFT:
        return symbol + quantity
    if amount.commodity.position == CommodityPosition.RIGHT:
        return f"{quantity} {symbol}"
    return quantity


def _render_cost(cost: Cost, formats: Optional[CommodityFormats]) -> str:
    operator = " @@ " if cost.is_total else " @ "
    return operator + _render_amount(cost.amount, formats)


def _amount_cost_len(posting: Posting, formats: Optional[CommodityFormats]) -> int:
    if posting.amount is None:
        return 0
    length = len(_render_amount(posting.amount, formats))
    if posting.cost is not None:
        length += len(_render_cost(posting.cost, formats))
    return length


def _account_display_len(posting: Posting) -> int:
    extra = 2 if posting.virtual in _BRACKETS else 0
    return len(posting.account.name) + extra


def _max_account_len(postings: Iterable[Posting]) -> int:
    return max((_account_display_len(p) for p in postings), default=0)


def _global_column(transactions: Iterable[Transaction], indent_size: int) -> int:
    longest = _max_account_len(p for tx in transactions for p in tx.postings)
    return indent_size + longest + MIN_SPACES


def calculate_alignment_column(postings: Iterable[Posting]) -> int:
    """Amount column for one transaction's postings with the default indent."""
    return DEFAULT_INDENT_SIZE + _max_account_len(postings) + MIN_SPACES


def calculate_global_alignment_column(transactions: Iterable[Transaction]) -> int:
    """Amount column shared by all postings of all transactions."""
    return _global_column(transactions, DEFAULT_INDENT_SIZE)


def calculate_alignment_with_global(
    postings: list[Posting],
    commodity_formats: Optional[CommodityFormats],
    account_col: int,
) -> AlignmentInfo:
    """Alignment using a given amount column; adds a balance-assertion column."""
    if not any(p.balance_assertion is not None for p in postings):
        return AlignmentInfo(account_col=account_col)
    widest = max(
        (_amount_cost_len(p, commodity_formats) for p in postings if p.amount is not None),
        default=0,
    )
    return AlignmentInfo(
        account_col=account_col,
        balance_assertion_col=account_col + widest + MIN_SPACES,
    )


def calculate_alignment(
    postings: list[Posting], commodity_formats: Optional[CommodityFormats]
) -> AlignmentInfo:
    return calculate_alignment_with_global(
        postings, commodity_formats, calculate_alignment_column(postings)
    )


def _format_posting(
    posting: Posting,
    alignment: AlignmentInfo,
    formats: Optional[CommodityFormats],
    indent: str,
    align_amounts: bool,
) -> str:
    opener, closer = _BRACKETS.get(posting.virtual, ("", ""))
    text = (
        indent
        + _STATUS_MARKS.get(posting.status, "")
        + opener
        + posting.account.name
        + closer
    )

    if posting.amount is not None:
        spaces = MIN_SPACES
        if align_amounts and alignment.account_col > 0:
            spaces = max(alignment.account_col - len(text), MIN_SPACES)
        text += " " * spaces + _render_amount(posting.amount, formats)

    if posting.cost is not None:
        text += _render_cost(posting.cost, formats)

    assertion = posting.balance_assertion
    if assertion is not None:
        spaces = MIN_SPACES
        if align_amounts and alignment.balance_assertion_col > 0:
            spaces = max(alignment.balance_assertion_col - len(text), MIN_SPACES)
        text += " " * spaces
        text += "== " if assertion.is_strict else "= "
        text += _render_amount(assertion.amount, formats)

    if posting.comment:
        text += "  ; " + posting.comment

    return text


def format_posting_with_alignment(
    posting: Posting,
    alignment: AlignmentInfo,
    commodity_formats: Optional[CommodityFormats],
) -> str:
    return _format_posting(posting, alignment, commodity_formats, _DEFAULT_INDENT, True)


def format_posting(posting: Posting, align_col: int) -> str:
    return format_posting_with_alignment(posting, AlignmentInfo(account_col=align_col), None)


def _transaction_edits(
    tx: Transaction,
    mapper: PositionMapper,
    formats: CommodityFormats,
    account_col: int,
    indent: str,
    align_amounts: bool,
) -> list[TextEdit]:
    alignment = (
        calculate_alignment_with_global(tx.postings, formats, account_col)
        if align_amounts
        else AlignmentInfo()
    )
    edits = []
    for posting in tx.postings:
        line = posting.range.start.line - 1
        text = _format_posting(posting, alignment, formats, indent, align_amounts)
        edits.append(
            TextEdit(
                range=LspRange(
                    LspPosition(line, 0), LspPosition(line, mapper.line_utf16_len(line))
                ),
                new_text=text,
            )
        )
    return edits


def _trim_trailing_space_edits(
    content: str, mapper: PositionMapper, skip_lines: set[int]
) -> list[TextEdit]:
    edits = []
    for number, line in enumerate(content.split("\n")):
        if number in skip_lines:
            continue
        trimmed = line.rstrip(" \t")
        if len(trimmed) == len(line):
            continue
        edits.append(
            TextEdit(
                range=LspRange(
                    LspPosition(number, utf16_len(trimmed)),
                    LspPosition(number, mapper.line_utf16_len(number)),
                ),
                new_text="",
            )
        )
    return edits


def format_document_with_options(
    journal: Journal,
    content: str,
    commodity_formats: Optional[CommodityFormats],
    opts: FormatOptions,
) -> list[TextEdit]:
    """Edits that reformat every posting and strip trailing whitespace elsewhere."""
    if commodity_formats is None:
        commodity_formats = _extract_commodity_formats(journal)
    indent_size = opts.indent_size if opts.indent_size > 0 else DEFAULT_INDENT_SIZE
    indent = " " * indent_size

    mapper = PositionMapper(content)
    edits: list[TextEdit] = []
    posting_lines: set[int] = set()

    if journal.transactions:
        account_col = 0
        if opts.align_amounts:
            account_col = _global_column(journal.transactions, indent_size)
            if opts.min_alignment_column > 0:
                account_col = max(account_col, opts.min_alignment_column)

        for tx in journal.transactions:
            posting_lines.update(p.range.start.line - 1 for p in tx.postings)
            if tx.postings:
                edits.extend(
                    _transaction_edits(
                        tx, mapper, commodity_formats, account_col, indent,
                        opts.align_amounts,
                    )
                )

    edits.extend(_trim_trailing_space_edits(content, mapper, posting_lines))
    return edits


def format_document_with_formats(
    journal: Journal, content: str, commodity_formats: Optional[CommodityFormats]
) -> list[TextEdit]:
    return format_document_with_options(
        journal, content, commodity_formats, default_options()
    )


def format_document(journal: Journal, content: str) -> list[TextEdit]:
    return format_document_with_formats(
        journal, content, _extract_commodity_formats(journal)
    )