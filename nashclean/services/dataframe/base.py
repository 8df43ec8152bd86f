import os
from pathlib import Path
from typing import Any, Callable, Type

import numpy as np
import pandas as pd
from nashclean.constants.files import Processed
from nashclean.services.string_clean import CleanStringBase as clean_base
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    BarColumn,
    TotalFileSizeColumn,
)
from rich.console import Console

from nashclean.validator.df_model import NHDFModel

console = Console()


class DataFrameOpsBase(object):

    """
    Base dataframe operations class. Low-level dataframe functions that can be imported/used in other services classes
    without circular import issues. High-level dataframe operations that import from other services classes belong in
    services/dataframe/ops.py
    """

    @classmethod
    def load_df(cls, path: Path, schema: Type[NHDFModel] = None) -> pd.DataFrame | None:
        """
        Loads dataframes based on file format. Reads extension and loads dataframe using corresponding pd.read method.
        Every column is read as text, header names are stripped of surrounding whitespace and numeric fields declared
        on the schema are coerced. Returns None if the path doesn't exist or the file is empty.

        :param path: Complete path to data file to be loaded into dataframe (PathGenerators)
        :param schema: Pandera model whose numeric fields should be coerced
        :return: Dataframe containing data from specified file
        """

        def coerce_numerics(df: pd.DataFrame, numeric_cols: list[str]) -> pd.DataFrame:
            for col in numeric_cols:
                if col not in df.columns:
                    continue
                df[col] = pd.to_numeric(df[col].map(clean_base.remove_price_symbols), errors="coerce")
            return df

        if not path.exists():
            console.print(f"[yellow]File not found: {path}[/yellow]")
            return None

        if path.stat().st_size == 0:
            console.print(f"[yellow]File is empty: {path}[/yellow]")
            return None

        file_size = path.stat().st_size
        format = path.suffix[1:].lower()
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TotalFileSizeColumn(),
        ) as progress:
            task = progress.add_task(
                f"Loading {path.name} into dataframe...",
                total=file_size,
                completed=0
            )
            try:
                if format == "csv":
                    df: pd.DataFrame = pd.read_csv(str(path), dtype=str)
                elif format == "parquet":
                    df: pd.DataFrame = cls.as_text(pd.read_parquet(str(path)))
                elif format == "xlsx" or format == "xls":
                    df: pd.DataFrame = pd.read_excel(str(path), dtype=str)
                elif format == "json":
                    df: pd.DataFrame = cls.as_text(pd.read_json(str(path), dtype=False, convert_dates=False))
                else:
                    raise ValueError(f"Unsupported file format: {format}")
                progress.update(task, completed=file_size)
            except Exception as e:
                progress.stop()
                console.print(f"[red]Error loading {path.name}: {str(e)}[/red]")
                raise
        df.columns = [str(col).strip() for col in df.columns]
        if schema:
            df = coerce_numerics(df, schema.numeric_fields())
        return df

    @classmethod
    def save_df(cls, df: pd.DataFrame, path: Path, atomic: bool = False) -> str:
        """
        Saves dataframe to csv. When atomic is set the file is written next to its destination first and then moved
        over it, so an interrupted save never leaves a half-written dataset behind.

        :param df: Dataframe to be saved
        :param path: Path to save dataframe, including file extension (PathGenerators)
        :param atomic: Write through a temporary file
        :return: Path to saved dataframe
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        if not atomic:
            df.to_csv(str(path), index=False)
            return str(path)
        tmp_path: Path = path.with_name(path.name + Processed.SUFFIX_TMP)
        try:
            df.to_csv(str(tmp_path), index=False)
            os.replace(tmp_path, path)
        finally:
            if tmp_path.exists():
                tmp_path.unlink()
        return str(path)

    @classmethod
    def as_text(cls, df: pd.DataFrame) -> pd.DataFrame:
        """Converts every column to python strings, keeping nulls as NaN."""
        return df.astype("string").astype(object).where(df.notna(), np.nan)

    @classmethod
    def get_frequency_df(cls, df: pd.DataFrame, unique_col: str) -> pd.DataFrame:
        """
        Returns single dataframe with a column of unique values from the original dataframe and their frequency counts.
        Null values are counted as their own group.
        """
        df_freq = df[unique_col].value_counts(dropna=False).reset_index()
        df_freq.columns = [unique_col, "count"]
        return df_freq

    @classmethod
    def count_changed(cls, before: pd.Series, after: pd.Series) -> int:
        """Counts positions whose value differs between two aligned series. Two nulls count as equal."""
        both_null = before.isna() & after.isna()
        return int(((before != after) & ~both_null).sum())


class DataFrameCleaners(DataFrameOpsBase):
    """Base dataframe cleaning methods."""
    @classmethod
    def apply_string_cleaner(
        cls,
        df: pd.DataFrame,
        cleaner_func: Callable[[Any], Any],
        cols: list[str] | None = None
    ) -> pd.DataFrame:
        """Generic method to apply any string cleaner function to specified columns"""
        cols = list(df.columns) if cols is None else cols
        for col in cols:
            df[col] = df[col].apply(cleaner_func)
        return df


class DataFrameBaseCleaners(DataFrameCleaners):

    """
    Methods that clean dataframe columns by applying string cleaning functions to specific columns. Default behavior
    is to execute string cleaning on all columns. Each method corresponds to a single string cleaning method from the
    CleanStringBase class.
    """

    @classmethod
    def replace_with_nan(cls, df: pd.DataFrame, cols: list[str] | None = None) -> pd.DataFrame:
        return cls.apply_string_cleaner(df, clean_base.replace_with_nan, cols)
