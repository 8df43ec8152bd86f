from abc import abstractmethod
from pathlib import Path
from typing import Any

import pandas as pd
from rich import filesize
from rich.console import Console
from rich.table import Table

from nashclean.constants.columns import SummaryStats as ssc
from nashclean.services.dataframe.base import DataFrameOpsBase as ops_df
from nashclean.types.base import WorkflowConfigs, StatEntry
from nashclean.utils import PathGenerators as path_gen


console = Console()


class SummaryStatsBase(object):

    def __init__(self):
        pass

    @classmethod
    def display_load_table(cls, dfs_in: dict[str, pd.DataFrame | None]):
        """Prints out summary tables of dataframes loaded into workflow object."""
        table = Table(title="Dataframes Loaded")
        table.add_column("Dataset Name", justify="right", style="bold yellow")
        table.add_column("Memory Size", justify="right", style="green")
        table.add_column("Number of Rows", justify="right", style="cyan")
        for id, df in dfs_in.items():
            if df is None:
                continue
            memory_usage = df.memory_usage(deep=True).sum()
            table.add_row(
                str(id),
                filesize.decimal(int(memory_usage)),
                f"{len(df):,}",
            )
        console.print(table)
        console.print("\n")

    @classmethod
    def display_load_stats_table(cls, dfs_in: dict[str, pd.DataFrame | None]):
        """Prints empty/null value counts for every column of each loaded dataframe."""
        for id, df in dfs_in.items():
            if df is None:
                continue
            table = Table(title=f"{id} ({len(df):,} rows)")
            table.add_column("Column Name", justify="right", style="bold yellow")
            table.add_column("Empty/Null Values", justify="right", style="green")
            for col in df.columns:
                null_count = df[col].isna().sum()
                empty_string_count = 0
                if df[col].dtype == "object":
                    empty_string_count = (df[col] == "").sum()
                table.add_row(str(col), f"{null_count + empty_string_count:,}")
            console.print(table)
            console.print("\n")

    @classmethod
    def display_frequency_table(cls, df_freq: pd.DataFrame, title: str):
        """Prints a value/count frequency dataframe (DataFrameOpsBase.get_frequency_df) ordered by count."""
        value_col, count_col = df_freq.columns[0], df_freq.columns[1]
        table = Table(title=title)
        table.add_column(str(value_col), justify="right", style="bold yellow")
        table.add_column("Count", justify="right", style="green")
        for _, row in df_freq.sort_values(count_col).iterrows():
            value = "NULL" if pd.isnull(row[value_col]) else str(row[value_col])
            table.add_row(value, f"{int(row[count_col]):,}")
        console.print(table)
        console.print("\n")

    @abstractmethod
    def calculate(self) -> None:
        pass

    @abstractmethod
    def print(self) -> None:
        pass

    @abstractmethod
    def save(self) -> None:
        pass


class SSHousingClean(SummaryStatsBase):
    """
    Summary stats for the housing cleaning workflow. Built from the raw input dataframe, the cleaned output dataframe
    and the per-stage counts recorded by the workflow.
    """

    def __init__(
        self,
        configs: WorkflowConfigs,
        wkfl_name: str,
        df_in: pd.DataFrame,
        df_out: pd.DataFrame,
        stage_counts: dict[str, int],
    ):
        super().__init__()
        self.configs: WorkflowConfigs = configs
        self.wkfl_name: str = wkfl_name
        self.df_in: pd.DataFrame = df_in
        self.df_out: pd.DataFrame = df_out
        self.stage_counts: dict[str, int] = stage_counts
        self.data: list[list[str | float | int]] = []
        self.stats: dict[str, StatEntry] = {}

    def calculate(self) -> None:
        counts: dict[str, Any] = self.stage_counts
        self.stats = {
            "rows_in": {
                "display_name": "Records Loaded",
                "value": len(self.df_in),
            },
            "dates_unparsed": {
                "display_name": "Sale Dates Not Convertible (set to null)",
                "value": counts.get("dates_unparsed", 0),
            },
            "addresses_missing": {
                "display_name": "Property Addresses Missing (before fill)",
                "value": counts.get("addresses_missing", 0),
            },
            "addresses_filled": {
                "display_name": "Property Addresses Filled From Same Parcel",
                "value": counts.get("addresses_filled", 0),
            },
            "addresses_unfilled": {
                "display_name": "Property Addresses Still Missing",
                "value": counts.get("addresses_unfilled", 0),
            },
            "vacant_normalized": {
                "display_name": "Sold-As-Vacant Values Normalized",
                "value": counts.get("vacant_normalized", 0),
            },
            "duplicates_removed": {
                "display_name": "Duplicate Sales Removed",
                "value": counts.get("duplicates_removed", 0),
            },
            "columns_dropped": {
                "display_name": "Columns Dropped",
                "value": counts.get("columns_dropped", 0),
            },
            "rows_out": {
                "display_name": "Records Saved",
                "value": len(self.df_out),
            },
        }
        self.data = [[vals["display_name"], vals["value"]] for vals in self.stats.values()]

    def print(self) -> None:
        table = Table(title=f"Summary Stats: {self.wkfl_name}")
        table.add_column("Stat", justify="right", style="bold yellow")
        table.add_column("Count", justify="right", style="green")
        for vals in self.stats.values():
            table.add_row(
                vals["display_name"],
                f"{vals['value']:,}",
            )
        console.print("\n")
        console.print(table)
        console.print("\n")

    def save(self) -> Path:
        df_out = pd.DataFrame(self.data, columns=[ssc.STAT, ssc.COUNT])
        path: Path = path_gen.summary_stats(self.configs, "housing_clean")
        ops_df.save_df(df_out, path)
        return path
