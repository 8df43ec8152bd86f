from pathlib import Path

import pandas as pd
from rich.console import Console, Group
from rich.panel import Panel
from rich.rule import Rule
from rich.style import Style
from rich.table import Table
from rich.text import Text
from rich.traceback import install
from rich.tree import Tree

from nashclean.constants.files import Dirs


# Install rich traceback handler
install()


console = Console()


class TerminalBase:
    """Messages & statements printed while the cleaning workflow runs"""

    @classmethod
    def print_welcome(cls):
        """Banner shown at the start of `nashclean clean`"""
        body = Text.assemble(
            ("NASHCLEAN", "bold blue"),
            (" | housing sale records cleaner\n\n", "blue"),
            "Dates → addresses → sold-as-vacant → duplicates → unused columns",
        )
        console.print()
        console.print(Panel(body, title="🏠 nashclean 🏠", border_style="blue", expand=False))
        console.print()

    @classmethod
    def print_dataset_name(cls, dataset: str):
        console.print()
        console.print(Rule(title=f"CLEANING DATASET: {dataset}", style="red"))

    @classmethod
    def print_equals(cls, text: str):
        console.print(f"\n==== {text} ====\n")

    @classmethod
    def print_workflow_name(cls, wkfl_name: str, wkfl_desc: str):
        console.print(Group(
            Rule(title=wkfl_name, style="red", characters="="),
            Text(wkfl_desc, style="cyan", justify="center"),
            Rule(style="green", characters="="),
        ))

    @classmethod
    def print_with_dots(cls, message: str, style: Style | str | None = None) -> None:
        """Prints message followed by a row of dots that runs to the edge of the terminal."""
        text = Text(message, style=style or "white")
        text.append("." * max(console.width - len(message) - 1, 0), style="cyan")
        console.print(text)

    @classmethod
    def print_stage_complete(cls, message: str):
        console.print(f"{message} ✅")

    @classmethod
    def print_data_root_tree(cls, root: Path):
        """Shows the project data directories created by `nashclean init`."""
        tree = Tree(f"📁 [bold blue]{root}[/]")
        for dir_name in Dirs.project_dirs():
            status = "[green]✓[/]" if (root / dir_name).is_dir() else "[red]missing[/]"
            tree.add(f"📁 {dir_name} {status}")
        console.print(tree)

    @classmethod
    def print_df(cls, df: pd.DataFrame, title: str, rows: int = 10):
        """Prints the first rows of a dataframe as a rich table. Nulls are shown dimmed."""
        table = Table(title=f"{title} ({len(df):,} rows)")
        for col in df.columns:
            table.add_column(str(col), style="cyan", overflow="fold")
        for _, row in df.head(rows).iterrows():
            table.add_row(*[
                "[dim]NULL[/dim]" if pd.isnull(value) else str(value)
                for value in row
            ])
        console.print(table)
        console.print()

    @classmethod
    def print_error(cls, message: str):
        console.print(f"[bold red]❌ {message}[/bold red]")
