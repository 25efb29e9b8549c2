# ledgerlsp

Building blocks for editor support of hledger-style plain-text accounting
journals: a journal data model, transaction balance checking, completion
indexes, diagnostics, a posting formatter and the UTF-8/UTF-16 position
arithmetic that language-server clients expect. It has no third-party
dependencies.

## Installation

```
pip install ledgerlsp
```

To run the test suite, install the `test` extra and run `pytest`.

## What is inside

| Module | Purpose |
| --- | --- |
| `ledgerlsp.journal` | Data model: `Journal`, `Transaction`, `Posting`, `Amount`, `Cost`, `BalanceAssertion`, `Tag`, `Comment`, the directives (`AccountDirective`, `CommodityDirective`, `Include`, `PriceDirective`, `YearDirective`), `Position` and `Range`. |
| `ledgerlsp.balance` | `check_balance` for one transaction; `calculate_account_balances` and `calculate_account_balances_from_transactions` per account and commodity. |
| `ledgerlsp.indexer` | Collectors for accounts (with a prefix index), payees, commodities, tags, tag values, dates, payee templates and usage counts; `format_date`. |
| `ledgerlsp.analysis_types` | Result types: `AnalysisResult`, `Diagnostic`, `DiagnosticSeverity`, `AccountIndex`, `PostingTemplate`, `BalanceResult`, `ExternalDeclarations`. |
| `ledgerlsp.analyzer` | `Analyzer`, which gathers everything above and produces diagnostics; `is_account_declared`. |
| `ledgerlsp.numberformat` | `NumberFormat`, `parse_number_format` and `format_number` for commodity display formats such as `1 000,00 RUB`. |
| `ledgerlsp.formatter` | Document formatting as a list of `TextEdit`s, with amount and balance-assertion alignment. |
| `ledgerlsp.lsputil` | `PositionMapper`, `LspPosition`, `LspRange`, `TextEdit` and helpers converting between byte offsets and UTF-16 positions. |
| `ledgerlsp.resolved` | `ResolvedJournal` (a primary journal with its included files), `LoadError`, `ErrorKind`, `FileSource`. |
| `ledgerlsp.resolver` | Resolution of `include` paths, glob detection and hledger's `<->` glob syntax. |
| `ledgerlsp.cli` | `HledgerClient`, a runner for the `hledger` executable with a timeout. |

## Diagnostics

`Analyzer().analyze(journal)` returns an `AnalysisResult` whose
`diagnostics` list may contain:

- `UNBALANCED` (error): the postings of a transaction do not sum to zero in
  some commodity; the message names each commodity and the amount it is off
  by. Unit (`@`) and total (`@@`) costs are taken into account, and
  unbalanced virtual postings `(account)` are ignored.
- `MULTIPLE_INFERRED` (error): more than one posting has no amount.
- `UNDECLARED_ACCOUNT` (warning): reported only when some accounts are
  declared; an account is accepted if it, or one of its parents, is declared,
  or if its top level is one of `assets`, `liabilities`, `equity`,
  `expenses`, `revenues` or `income` (case-insensitive).
- `UNDECLARED_COMMODITY` (warning): reported only when some commodities are
  declared; amounts, costs and balance assertions are all checked, and each
  commodity is reported once per transaction.

Declarations made elsewhere can be supplied with
`Analyzer().analyze_with_external_declarations(journal, ExternalDeclarations(accounts=..., commodities=...))`.
A `ResolvedJournal` is analysed with `Analyzer().analyze_resolved(resolved)`:
names, counts and declarations are merged across all files, while
diagnostics are reported for the primary journal's transactions only. Where
the same payee appears in several files, the primary journal's posting
template wins.

## Number formats

```python
from decimal import Decimal
from ledgerlsp.numberformat import parse_number_format, format_number

fmt = parse_number_format("1 000,00 RUB")
format_number(Decimal("846661.89"), fmt)   # '846 661,89'

us = parse_number_format("$1,000.00")
format_number(Decimal("1234567.89"), us)   # '1,234,567.89'
```

Rounding is half away from zero.

## Formatting

`format_document(journal, content)` returns the edits that rewrite every
posting line with a consistent indent and with amounts aligned to one column
across the whole file; balance assertions within a transaction are aligned
too, and trailing spaces and tabs are removed from all other lines. Amounts
whose commodity has a `format` in its directive are rendered in that format;
otherwise the original spelling of the number is kept.

`format_document_with_options` takes a `FormatOptions` value
(`indent_size`, `align_amounts`, `min_alignment_column`);
`default_options()` gives a four-space indent with alignment on. Single
postings can be rendered with `format_posting` and
`format_posting_with_alignment`.

## Positions

Language-server positions count UTF-16 code units; Python strings count code
points. `ledgerlsp.lsputil` converts between these and UTF-8 byte offsets:

```python
from ledgerlsp.lsputil import utf16_len, rune_count

utf16_len("a😀b")    # 4
rune_count("a😀b")   # 3
```

`PositionMapper(content)` maps positions to byte offsets and back, reports
line lengths and applies a range replacement, clamping out-of-range
positions and swapping reversed ranges.

## Include paths

```python
from ledgerlsp.resolver import resolve_path, is_glob_pattern, convert_hledger_glob

resolve_path("/home/user/finances/main.journal", "../accounts.journal")
# '/home/user/accounts.journal'
is_glob_pattern("2024/*.journal")        # True
convert_hledger_glob("<->/*.journal")    # '**/*.journal'
```

`resolve_path_safe` raises `PathTraversalError` for relative paths that
climb more than five directories up; `resolve_path` returns an empty string
instead. A leading `~` is expanded to the home directory.

## Running hledger

```python
from ledgerlsp.cli import HledgerClient, HledgerError

client = HledgerClient("hledger", timeout=5.0)
if client.available:
    print(client.run("main.journal", "accounts"))
```

`run` raises `HledgerError` when the executable is unavailable, times out or
exits with a failure; the error's `stdout` holds any output produced.

## What this package does not do

- It does not parse journal text. A `Journal` has to be built from the
  classes in `ledgerlsp.journal` by your own code or parser.
- It does not read files or follow `include` directives. `ResolvedJournal`
  holds journals that have already been loaded; `ledgerlsp.resolver` only
  computes paths.
- It is not a language server and provides no command to start one: there is
  no protocol handling, transport or document store, only the pieces such a
  server would call.