"""A journal together with the files it includes, and load errors."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Optional

from ledgerlsp.journal import Directive, Include, Journal, Range, Transaction


class ErrorKind(enum.IntEnum):
    FILE_NOT_FOUND = 0
    CYCLE_DETECTED = 1
    PARSE_ERROR = 2
    READ_ERROR = 3
    FILE_TOO_LARGE = 4
    PATH_TRAVERSAL = 5


@dataclass(eq=False)
class LoadError(Exception):
    """A problem met while loading a journal or one of its includes."""

    kind: ErrorKind
    path: str
    message: str
    range: Range = field(default_factory=Range)

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


@dataclass
class FileSource:
    path: str
    content: str


@dataclass
class ResolvedJournal:
    """The primary journal and every included journal, in include order."""

    primary: Optional[Journal] = None
    files: dict[str, Journal] = field(default_factory=dict)
    file_order: list[str] = field(default_factory=list)
    errors: list[LoadError] = field(default_factory=list)

    def _journals(self):
        if self.primary is not None:
            yield self.primary
        for path in self.file_order:
            journal = self.files.get(path)
            if journal is not None:
                yield journal

    def all_transactions(self) -> list[Transaction]:
        return [tx for journal in self._journals() for tx in journal.transactions]

    def all_directives(self) -> list[Directive]:
        return [d for journal in self._journals() for d in journal.directives]

    def all_includes(self) -> list[Include]:
        return [inc for journal in self._journals() for inc in journal.includes]