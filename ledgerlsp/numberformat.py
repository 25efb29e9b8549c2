"""Number formats declared by commodity directives, and rendering numbers with them."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext

_SEPARATOR_CHARS = ".,  "


@dataclass(frozen=True)
class NumberFormat:
    """Decimal mark, digit-group separator and number of decimal places."""

    decimal_mark: str = "."
    thousands_sep: str = ""
    decimal_places: int = 0
    has_decimal: bool = False


def _is_number_char(ch: str) -> bool:
    return ch.isdecimal() or ch in _SEPARATOR_CHARS


def _extract_number_part(format_str: str) -> str:
    """The first run of digits and separators that holds at least one digit."""
    start = None
    end = 0
    has_digit = False
    for i, ch in enumerate(format_str):
        if _is_number_char(ch):
            if start is None:
                start = i
            if ch.isdecimal():
                has_digit = True
            end = i + 1
        elif start is not None:
            break
    if start is None or not has_digit:
        return ""
    return format_str[start:end].strip()


def parse_number_format(format_str: str) -> NumberFormat:
    """Work out the number format from a sample such as ``1 000,00 RUB``."""
    part = _extract_number_part(format_str)
    if not part:
        return NumberFormat()

    last_dot = part.rfind(".")
    last_comma = part.rfind(",")

    if last_dot > last_comma:
        if last_comma >= 0:
            sep = ","
        elif " " in part[:last_dot]:
            sep = " "
        else:
            sep = ""
        return NumberFormat(".", sep, len(part) - last_dot - 1, True)

    if last_comma > last_dot:
        if last_dot >= 0:
            sep = "."
        elif " " in part[:last_comma]:
            sep = " "
        else:
            sep = ""
        return NumberFormat(",", sep, len(part) - last_comma - 1, True)

    return NumberFormat(thousands_sep=" " if " " in part else "")


def _group_thousands(digits: str, sep: str) -> str:
    head = len(digits) % 3 or 3
    groups = [digits[:head]]
    groups.extend(digits[i:i + 3] for i in range(head, len(digits), 3))
    return sep.join(groups)


def format_number(qty: Decimal, fmt: NumberFormat) -> str:
    """Render ``qty`` in ``fmt``, rounding half away from zero."""
    places = max(fmt.decimal_places, 0) if fmt.has_decimal else 0
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, qty.adjusted() + places + 2)
        rounded = qty.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
    if rounded == 0:
        rounded = abs(rounded)

    int_part, _, dec_part = format(rounded, "f").partition(".")
    negative = int_part.startswith("-")
    if negative:
        int_part = int_part[1:]

    if fmt.thousands_sep and len(int_part) > 3:
        int_part = _group_thousands(int_part, fmt.thousands_sep)

    text = ("-" if negative else "") + int_part
    if fmt.has_decimal and fmt.decimal_places > 0:
        text += fmt.decimal_mark + dec_part
    return text