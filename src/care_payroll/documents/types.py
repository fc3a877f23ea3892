"""Structured receipt content handed to document writers."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ReceiptTable:
    """A table of pre-formatted cells."""

    columns: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]
    footer_row: tuple[str, ...] | None = None
    title: str | None = None

    def __post_init__(self) -> None:
        width = len(self.columns)
        for row in self.rows:
            if len(row) != width:
                raise ValueError(f"Row {row!r} does not match {width} columns")
        if self.footer_row is not None and len(self.footer_row) != width:
            raise ValueError(f"Footer {self.footer_row!r} does not match {width} columns")


@dataclass(frozen=True)
class ReceiptDocument:
    """Title, header key/value lines, tables, then summary and notes.

    Everything except the generation timestamp header line is a pure
    function of the source records.
    """

    title: str
    header_lines: tuple[tuple[str, str], ...]
    tables: tuple[ReceiptTable, ...]
    summary_lines: tuple[tuple[str, str], ...] = ()
    notes: str | None = None
    footer: str | None = None

    def header_value(self, key: str) -> str | None:
        for name, value in self.header_lines:
            if name == key:
                return value
        return None

    def table(self, title: str) -> ReceiptTable | None:
        for table in self.tables:
            if table.title == title:
                return table
        return None

    def content_lines(self, exclude: tuple[str, ...] = ("Generated",)) -> list[tuple[str, ...]]:
        """Flatten the document to comparable lines, skipping volatile headers."""
        lines: list[tuple[str, ...]] = [(self.title,)]
        lines.extend(line for line in self.header_lines if line[0] not in exclude)
        for table in self.tables:
            lines.append((table.title or "",))
            lines.append(table.columns)
            lines.extend(table.rows)
            if table.footer_row is not None:
                lines.append(table.footer_row)
        lines.extend(self.summary_lines)
        if self.notes:
            lines.append(("Notes", self.notes))
        return lines
