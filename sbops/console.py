"""Coloured operator output.

Messages are assembled as rich ``Text`` so paths and command lines that
contain square brackets are printed literally instead of parsed as markup.
"""

from rich.console import Console
from rich.rule import Rule
from rich.text import Text

console = Console(highlight=False, soft_wrap=True)


def _line(tag: str, style: str, message: str) -> Text:
    return Text.assemble((f"[{tag}]", style), " ", message)


def print_info(message: str = "") -> None:
    console.print(_line("INFO", "green", message))


def print_warn(message: str) -> None:
    console.print(_line("WARN", "bold yellow", message))


def print_error(message: str) -> None:
    console.print(_line("ERROR", "red", message))


def print_section(title: str) -> None:
    """Print a blue section banner."""
    console.print()
    console.print(Rule(style="blue"))
    console.print(Text(title, style="blue"))
    console.print(Rule(style="blue"))
    console.print()


def print_check(found: bool, message: str) -> None:
    """Print a found/missing line, used for post-build verification."""
    if found:
        print_info(f"✓ Found: {message}")
    else:
        print_warn(f"✗ Not found: {message}")
