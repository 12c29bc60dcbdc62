from __future__ import annotations

import json
from typing import Any, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text


console = Console()


def section(title: str, subtitle: Optional[str] = None) -> None:
    header = Text(title, style="bold")
    if subtitle:
        header.append(f" • {subtitle}", style="dim")
    console.print(Rule(header))


def table(headers: list[Any], rows: list[list[Any]]) -> None:
    t = Table(show_header=True, header_style="bold magenta", box=box.SIMPLE, expand=True)
    for header in headers:
        t.add_column(str(header), overflow="fold", no_wrap=False)
    for row in rows:
        t.add_row(*[str(cell) for cell in row])
    console.print(t)


def key_value_table(rows: list[list[Any]]) -> None:
    t = Table(show_header=False, box=box.SIMPLE, expand=True)
    t.add_column("Key", style="bold", overflow="fold", no_wrap=False)
    t.add_column("Value", overflow="fold", no_wrap=False)
    for key, value in rows:
        t.add_row(str(key), str(value))
    console.print(t)


def text_panel(body: str, title: Optional[str] = None) -> None:
    console.print(Panel(Text(body), title=title, border_style="cyan"))


def bullet_list(title: str, items: list[str]) -> None:
    if not items:
        return
    console.print(Text(title, style="bold cyan"))
    for item in items:
        console.print(Text(f"  • {item}"))


def warning(message: str) -> None:
    console.print(Text(message, style="yellow"))


def json_output(payload: object) -> None:
    rendered = Syntax(json.dumps(payload, indent=2), "json", theme="ansi_dark", word_wrap=True)
    console.print(rendered)
