"""
Writer — render a DifCheckReport as JSON or as styled text.

JSON keeps the model's field order (never key-sorted) and ends with a
newline.  Text output goes through a rich Console so colour handling
follows the terminal.
"""
import json
from typing import TextIO

from rich.console import Console
from rich.markup import escape

from dif_check.io.schema import DifCheckReport


def write_json(report: DifCheckReport, stream: TextIO) -> None:
    """Write *report* as pretty-printed JSON followed by a newline."""
    stream.write(json.dumps(report.model_dump(mode="json"), indent=2))
    stream.write("\n")


def render_text(report: DifCheckReport, console: Console) -> None:
    """Print the human-readable check summary."""
    console.print("[dim bold]Debug Info File Check[/dim bold]")
    console.print(f"  Type: [cyan]{escape(report.type.value)}[/cyan]")
    console.print("  Contained UUIDs:")
    for uuid, arch in report.variants.items():
        if arch is not None:
            console.print(f"    > [dim]{uuid}[/dim] ([cyan]{escape(arch)}[/cyan])")
        else:
            console.print(f"    > [dim]{uuid}[/dim]")

    if report.problem is not None:
        console.print(f"  Usable: [red]no[/red] ({escape(report.problem)})")
    else:
        console.print("  Usable: [green]yes[/green]")


def make_console(stream: TextIO, color: str = "auto") -> Console:
    """Console on *stream*; *color* is one of auto, always, never."""
    if color == "never":
        return Console(file=stream, color_system=None, highlight=False, soft_wrap=True)
    if color == "always":
        return Console(file=stream, force_terminal=True, highlight=False, soft_wrap=True)
    return Console(file=stream, highlight=False, soft_wrap=True)
