"""Renders a session as terminal tables or as a standalone HTML document."""

from __future__ import annotations

import html
import io
from dataclasses import dataclass
from typing import Iterable, Optional

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from .config import Theme
from .models import (
    KIND_ORDER,
    DiffKind,
    DiffRecord,
    Session,
    Side,
    KeyDiff,
    TypeDiff,
    ValueDiff,
)
from .utils import is_yaml_file, prettify

CHECKMARK = "✓"
MULTIPLY = "×"
NO_DIFFERENCES = "No differences found."


@dataclass(frozen=True)
class Section:
    """One kind's group of records in a report."""
    kind: DiffKind
    records: tuple[DiffRecord, ...] = ()
    available: bool = True

    @property
    def anchor(self) -> str:
        return f"{self.kind.value}_diff"


def build_sections(
    session: Session,
    display_kinds: Optional[Iterable[DiffKind]] = None
) -> list[Section]:
    """
    Group a session's records by kind in report order.

    Kinds with no records are left out. A kind asked for but never recorded
    in the session gets an empty, unavailable section so the report can say
    so instead of silently showing nothing.

    Args:
        session: The session to report on
        display_kinds: Kinds to show; defaults to every kind the session holds

    Returns:
        Sections in Key, Type, Value, Array order
    """
    kinds = frozenset(display_kinds or ()) or session.requested_kinds
    sections = []

    for kind in KIND_ORDER:
        if kind not in kinds:
            continue
        if kind not in session.requested_kinds:
            sections.append(Section(kind=kind, available=False))
            continue
        records = tuple(session.records_of(kind))
        if records:
            sections.append(Section(kind=kind, records=records))

    return sections


def unavailable_notice(kind: DiffKind, session: Session) -> str:
    stored = ", ".join(k.value for k in KIND_ORDER if k in session.requested_kinds)
    return (f"{kind.title} were not checked in this session "
            f"(checked kinds: {stored}).")


def array_order_note(session: Session) -> str:
    if session.order_sensitive:
        return "Array order: significant (array changes are shown as value differences)"
    return "Array order: ignored"


class Renderer:
    """Base class for report renderers. Rendering never performs I/O."""

    def render(
        self,
        session: Session,
        display_kinds: Optional[Iterable[DiffKind]] = None
    ) -> str:
        sections = build_sections(session, display_kinds)
        return self.render_sections(session, sections)

    def render_sections(self, session: Session, sections: list[Section]) -> str:
        raise NotImplementedError


class TableRenderer(Renderer):
    """Plain or colored terminal tables, one per difference kind."""

    def __init__(self, color: bool = False, width: int = 120):
        self.color = color
        self.width = width

    def render_sections(self, session: Session, sections: list[Section]) -> str:
        buffer = io.StringIO()
        console = Console(
            file=buffer,
            width=self.width,
            force_terminal=self.color,
            color_system="standard" if self.color else None,
            highlight=False,
            emoji=False,
        )

        console.print(Text(
            f"Comparing {session.sources.left} against {session.sources.right}",
            style="bold"
        ))
        console.print(Text(array_order_note(session), style="dim"))
        if session.excluded_paths:
            console.print(Text(f"Excluded: {', '.join(session.excluded_paths)}", style="dim"))

        if not sections:
            console.print()
            console.print(Text(NO_DIFFERENCES, style="green"))

        for section in sections:
            console.print()
            if not section.available:
                console.print(Text(section.kind.title, style="bold"))
                console.print(Text(unavailable_notice(section.kind, session), style="yellow"))
            else:
                console.print(self._build_table(session, section))

        return buffer.getvalue()

    def _build_table(self, session: Session, section: Section) -> Table:
        left_label = session.sources.left
        right_label = session.sources.right

        table = Table(title=section.kind.title, box=box.ROUNDED, show_lines=True,
                      title_style="bold")
        table.add_column("Key", style="cyan", overflow="fold", max_width=80)
        if section.kind == DiffKind.ARRAY:
            table.add_column(Text(f'Only "{left_label}" has'), overflow="fold", max_width=80)
            table.add_column(Text(f'Only "{right_label}" has'), overflow="fold", max_width=80)
        else:
            table.add_column(Text(left_label), overflow="fold", max_width=80)
            table.add_column(Text(right_label), overflow="fold", max_width=80)

        yaml_style = is_yaml_file(left_label)
        for record in section.records:
            table.add_row(Text(record.path), *self._cells(record, yaml_style))

        return table

    def _cells(self, record: DiffRecord, yaml_style: bool) -> tuple[Text, Text]:
        if isinstance(record, KeyDiff):
            return (self._presence(record.side == Side.LEFT),
                    self._presence(record.side == Side.RIGHT))
        if isinstance(record, TypeDiff):
            return Text(record.left_type), Text(record.right_type)
        if isinstance(record, ValueDiff):
            return (Text(prettify(record.left_value, yaml_style)),
                    Text(prettify(record.right_value, yaml_style)))
        value = Text(prettify(record.value, yaml_style))
        if record.side == Side.LEFT:
            return value, Text("")
        return Text(""), value

    @staticmethod
    def _presence(has: bool) -> Text:
        if has:
            return Text(CHECKMARK, style="green")
        return Text(MULTIPLY, style="red")


DEFAULT_CSS = """
* {
    font-family: Arial, Helvetica, sans-serif;
}
body {
    padding: 1em;
    font-size: 14px;
    background-color: #0a0b0b;
    color: #fff;
}
h1, h2 {
    width: fit-content;
    text-align: left;
    background: linear-gradient(to right, #8e2de2, #4a00e0);
    background-clip: text;
    -webkit-background-clip: text;
    -webkit-text-fill-color: transparent;
}
h2 {
    margin-top: 2em;
}
.code, pre {
    font-family: "Lucida Console", "Courier New", monospace;
}
.header {
    display: flex;
    flex-direction: row;
    justify-content: space-between;
}
.header .lead p .code {
    font-weight: bold;
    background-color: rgba(100, 100, 100, 0.4);
    padding: 0.2em;
    border-radius: 2px;
}
.meta {
    color: #aaa;
}
.table-of-contents {
    width: fit-content;
    margin: 2em 0;
    padding: 1em;
    background-color: rgba(100, 100, 100, 0.2);
    border-radius: 10px;
}
.table-of-contents h2 {
    margin-top: 0;
}
.table-of-contents ul {
    list-style-type: none;
    padding: 0;
}
.table-of-contents li {
    margin: 1em 0;
    padding: 0.5em 0;
    border-top: 1px solid #fff;
}
.table-of-contents li a {
    color: #fff;
    text-decoration: none;
}
.table-of-contents li a:hover {
    text-decoration: underline;
}
.diff-table {
    margin-top: 2em;
    width: 100%;
    border-radius: 10px;
}
.diff-table th, .diff-table td {
    padding: 1.2em;
    text-align: left;
    vertical-align: top;
}
.diff-table th {
    background-color: rgba(100, 100, 100, 0.3);
}
.diff-table tr:nth-child(odd) {
    background-color: rgba(100, 100, 100, 0.1);
}
.diff-table tr:nth-child(even) {
    background-color: rgba(100, 100, 100, 0.2);
}
.diff-table pre {
    margin: 0;
    white-space: pre-wrap;
}
.has {
    color: #4caf50;
}
.misses {
    color: #f44336;
}
.notice {
    color: #ffc107;
}
"""

PRINTER_FRIENDLY_CSS = """
* {
    font-family: Georgia, "Times New Roman", serif;
}
body {
    padding: 0.5em;
    font-size: 11pt;
    background-color: #fff;
    color: #000;
}
h1 {
    font-size: 16pt;
}
h2 {
    font-size: 13pt;
    margin-top: 1em;
    page-break-after: avoid;
}
.code, pre {
    font-family: "Courier New", monospace;
}
.header .lead p .code {
    font-weight: bold;
}
.meta {
    color: #444;
}
.table-of-contents ul {
    list-style-type: none;
    padding: 0;
}
.table-of-contents li a {
    color: #000;
}
.diff-table {
    width: 100%;
    border-collapse: collapse;
    page-break-inside: auto;
}
.diff-table tr {
    page-break-inside: avoid;
}
.diff-table th, .diff-table td {
    border: 1px solid #000;
    padding: 0.3em 0.5em;
    text-align: left;
    vertical-align: top;
}
.diff-table pre {
    margin: 0;
    white-space: pre-wrap;
}
.notice {
    font-style: italic;
}
"""

THEME_CSS = {
    Theme.DEFAULT: DEFAULT_CSS,
    Theme.PRINTER_FRIENDLY: PRINTER_FRIENDLY_CSS,
}


class DocumentRenderer(Renderer):
    """
    Standalone HTML5 report.

    The theme only swaps the embedded stylesheet; every theme renders the
    same sections, rows and text.
    """

    def __init__(self, theme: Theme = Theme.DEFAULT):
        self.theme = theme

    def render_sections(self, session: Session, sections: list[Section]) -> str:
        left = html.escape(session.sources.left)
        right = html.escape(session.sources.right)

        parts: list[str] = [
            "<!DOCTYPE html>\n",
            "<html lang='en'>\n<head>\n",
            "<meta charset='utf-8'>\n",
            "<meta name='viewport' content='width=device-width, initial-scale=1.0'>\n",
            f"<title>Datadiff Comparing {left} and {right}</title>\n",
            f"<style>{THEME_CSS[self.theme]}</style>\n",
            "</head>\n<body>\n",
            "<div class='header'>\n<div class='lead'>\n",
            "<h1>Data Differences</h1>\n",
            f"<p>The following differences were found comparing "
            f"<span class='code'>{left}</span> against <span class='code'>{right}</span></p>\n",
            f"<p class='meta'>{html.escape(array_order_note(session))}</p>\n",
        ]

        if session.excluded_paths:
            excluded = ", ".join(
                f"<span class='code'>{html.escape(p)}</span>" for p in session.excluded_paths
            )
            parts.append(f"<p class='meta'>Excluded: {excluded}</p>\n")
        parts.append("</div>\n")

        if sections:
            parts.append("<nav class='table-of-contents'>\n<h2>Table of Contents</h2>\n<ul>\n")
            for section in sections:
                parts.append(
                    f"<li><a href='#{section.anchor}'>{section.kind.title}</a></li>\n"
                )
            parts.append("</ul>\n</nav>\n")
        parts.append("</div>\n")

        if not sections:
            parts.append(f"<p class='notice'>{NO_DIFFERENCES}</p>\n")

        for section in sections:
            parts.append(f"<h2 id='{section.anchor}'>{section.kind.title}</h2>\n")
            if not section.available:
                notice = html.escape(unavailable_notice(section.kind, session))
                parts.append(f"<p class='notice'>{notice}</p>\n")
            else:
                parts.append(self._table(session, section))

        parts.append("</body>\n</html>\n")
        return "".join(parts)

    def _table(self, session: Session, section: Section) -> str:
        left = html.escape(session.sources.left)
        right = html.escape(session.sources.right)
        if section.kind == DiffKind.ARRAY:
            left, right = f"Only &quot;{left}&quot; has", f"Only &quot;{right}&quot; has"

        yaml_style = is_yaml_file(session.sources.left)
        parts = [
            "<table class='diff-table'>\n",
            f"<thead><tr><th>Key</th><th>{left}</th><th>{right}</th></tr></thead>\n",
            "<tbody>\n",
        ]
        for record in section.records:
            left_cell, right_cell = self._cells(record, yaml_style)
            parts.append(
                f"<tr><td class='code'>{html.escape(record.path)}</td>"
                f"<td>{left_cell}</td><td>{right_cell}</td></tr>\n"
            )
        parts.append("</tbody>\n</table>\n")
        return "".join(parts)

    def _cells(self, record: DiffRecord, yaml_style: bool) -> tuple[str, str]:
        if isinstance(record, KeyDiff):
            return (self._presence(record.side == Side.LEFT),
                    self._presence(record.side == Side.RIGHT))
        if isinstance(record, TypeDiff):
            return html.escape(record.left_type), html.escape(record.right_type)
        if isinstance(record, ValueDiff):
            return (self._pre(record.left_value, yaml_style),
                    self._pre(record.right_value, yaml_style))
        value = self._pre(record.value, yaml_style)
        if record.side == Side.LEFT:
            return value, ""
        return "", value

    @staticmethod
    def _pre(text: str, yaml_style: bool) -> str:
        return f"<pre>{html.escape(prettify(text, yaml_style))}</pre>"

    @staticmethod
    def _presence(has: bool) -> str:
        if has:
            return f"<span class='has'>{CHECKMARK}</span>"
        return f"<span class='misses'>{MULTIPLY}</span>"


def render(
    session: Session,
    target: Renderer,
    display_kinds: Optional[Iterable[DiffKind]] = None
) -> str:
    """Render a session with the given target renderer."""
    return target.render(session, display_kinds)
