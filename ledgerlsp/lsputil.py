"""Mapping between UTF-8 byte offsets and LSP (UTF-16) positions.

Out-of-range positions are clamped and reversed ranges are swapped.
"""

from __future__ import annotations

import bisect
from dataclasses import dataclass, field

_ENCODING = "utf-8"
_ERRORS = "surrogatepass"
_SUPPLEMENTARY_START = 0x10000


@dataclass(frozen=True)
class LspPosition:
    """Zero-based line and UTF-16 character offset."""

    line: int = 0
    character: int = 0


@dataclass(frozen=True)
class LspRange:
    start: LspPosition = field(default_factory=LspPosition)
    end: LspPosition = field(default_factory=LspPosition)


@dataclass(frozen=True)
class TextEdit:
    range: LspRange
    new_text: str


def _utf8_len(ch: str) -> int:
    cp = ord(ch)
    if cp < 0x80:
        return 1
    if cp < 0x800:
        return 2
    if cp < _SUPPLEMENTARY_START:
        return 3
    return 4


def utf16_len(s: str) -> int:
    """Number of UTF-16 code units in ``s``."""
    return len(s) + sum(1 for ch in s if ord(ch) >= _SUPPLEMENTARY_START)


def utf16_offset_to_byte_offset(s: str, utf16_offset: int) -> int:
    """UTF-8 byte offset corresponding to a UTF-16 offset, clamped to ``s``."""
    byte_offset = 0
    utf16_count = 0
    for ch in s:
        if utf16_count >= utf16_offset:
            break
        byte_offset += _utf8_len(ch)
        utf16_count += 2 if ord(ch) >= _SUPPLEMENTARY_START else 1
    return byte_offset


def byte_offset_to_utf16(s: str, byte_offset: int) -> int:
    """UTF-16 offset corresponding to a UTF-8 byte offset, clamped to ``s``."""
    utf16_count = 0
    current_byte = 0
    for ch in s:
        if current_byte >= byte_offset:
            break
        current_byte += _utf8_len(ch)
        utf16_count += 2 if ord(ch) >= _SUPPLEMENTARY_START else 1
    return utf16_count


def rune_count(s: str) -> int:
    """Number of code points in ``s``."""
    return len(s)


class PositionMapper:
    """Converts positions within one document's text."""

    def __init__(self, content: str) -> None:
        self.content = content
        self.lines = content.split("\n")
        self._line_starts: list[int] = []
        offset = 0
        for line in self.lines:
            self._line_starts.append(offset)
            offset += sum(_utf8_len(ch) for ch in line) + 1
        self._byte_len = sum(_utf8_len(ch) for ch in content)

    def lsp_to_byte(self, pos: LspPosition) -> int:
        if pos.line >= len(self.lines):
            return self._byte_len
        return self._line_starts[pos.line] + utf16_offset_to_byte_offset(
            self.lines[pos.line], pos.character
        )

    def byte_to_lsp(self, byte_offset: int) -> LspPosition:
        if byte_offset <= 0:
            return LspPosition(0, 0)
        if byte_offset >= self._byte_len:
            last = len(self.lines) - 1
            if last < 0:
                return LspPosition(0, 0)
            return LspPosition(last, utf16_len(self.lines[last]))

        line = max(bisect.bisect_right(self._line_starts, byte_offset) - 1, 0)
        within = byte_offset - self._line_starts[line]
        return LspPosition(line, byte_offset_to_utf16(self.lines[line], within))

    def line_utf16_len(self, line: int) -> int:
        if 0 <= line < len(self.lines):
            return utf16_len(self.lines[line])
        return 0

    def line_rune_len(self, line: int) -> int:
        if 0 <= line < len(self.lines):
            return len(self.lines[line])
        return 0

    def apply_change(self, range_: LspRange, text: str) -> str:
        """Return the content with ``range_`` replaced by ``text``."""
        start = self.lsp_to_byte(range_.start)
        end = self.lsp_to_byte(range_.end)
        if start > end:
            start, end = end, start
        start = min(start, self._byte_len)
        end = min(end, self._byte_len)
        data = self.content.encode(_ENCODING, _ERRORS)
        result = data[:start] + text.encode(_ENCODING, _ERRORS) + data[end:]
        return result.decode(_ENCODING, _ERRORS)