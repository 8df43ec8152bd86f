# 1. Standard library imports
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional, Type

# 2. Third-party imports
import pandas as pd
import pandera as pa
from rich.console import Console

# 3. Constants (these should have no dependencies on other local modules)
from nashclean.constants.columns import NashvilleHousing as nh
from nashclean.schema.v0_1.raw import NashvilleHousingRaw
from nashclean.schema.v0_1.out import NashvilleHousingClean

# 4. Types (these should only depend on constants)
from nashclean.types.base import WorkflowConfigs, WorkflowStage

# 5. Utils (these should only depend on constants and types)
from nashclean.utils import PathGenerators as path_gen

# 6. Services (these can depend on everything else)
from nashclean.services.summary_stats import SummaryStatsBase as ss, SSHousingClean
from nashclean.services.terminal_printers import TerminalBase as t
from nashclean.services.dataframe.base import (
    DataFrameOpsBase as ops_df,
    DataFrameBaseCleaners as clean_df_base,
)
from nashclean.services.dataframe.ops import (
    DataFrameColumnGenerators as cols_df,
    DataFrameColumnManipulators as colm_df,
    DataFrameSubsetters as subset_df,
    DataFrameDeduplicators as dedup_df,
)
from nashclean.validator.df_model import NHDFModel

console = Console()


class WorkflowBase(ABC):
    """
    Base workflow class that controls execution of the data processing tasks. Each child class that inherits from
    WorkflowBase corresponds to one command of the nashclean CLI.

    CHILD WORKFLOW REQUIREMENTS:
        - Required dataframes object: instance variable containing all required dataframes and their file paths
        - Execute method: executes data load, required logic and transformations, and saves outputs
    """
    def __init__(self, configs: WorkflowConfigs):
        self.configs: WorkflowConfigs = configs
        self.dfs_in: dict[str, pd.DataFrame | None] = {}
        self.dfs_out: dict[str, pd.DataFrame | None] = {}

    def load_dfs(self, load_map: dict[str, dict[str, Any]]) -> None:
        """
        Sets the self.dfs_in object. Sets keys as dataframe ID values and values to the loaded dataframes. A missing
        or empty input file is a structural error and aborts the workflow.
        """
        for id, params in load_map.items():
            path: Path = params["path"]
            schema: Type[NHDFModel] | None = params.get("schema")
            df: pd.DataFrame | None = ops_df.load_df(path, schema)
            if df is None:
                raise FileNotFoundError(f"No data found for \"{id}\" at {path}")
            self.dfs_in[id] = df
            console.print(f"\"{id}\" successfully loaded from: \n{path}")
        console.print("\n")
        ss.display_load_table(self.dfs_in)
        ss.display_load_stats_table(self.dfs_in)

    def run_validator(self, id: str, df: pd.DataFrame, schema: Type[NHDFModel], wkfl_name: str) -> pd.DataFrame:
        """
        Executes pandera validator and returns the validated (coerced) dataframe. On failure, prints the failure cases,
        optionally saves them to ROOT/validation_errors and re-raises.
        """
        t.print_with_dots(f"Executing validator for {id} dataset")
        try:
            df_valid: pd.DataFrame = schema.validate(df, lazy=True)
            console.print("✅ Validation successful ✅")
            return df_valid
        except pa.errors.SchemaErrors as err:
            error_df: pd.DataFrame = err.failure_cases
            console.print("❌ Validation failed ❌")
            console.print(f"Number of validation errors: {len(error_df)}")
            console.print(f"{error_df.head()}")
            if self.configs.get("save_validation_errors", False) and not self.configs.get("dry_run", False):
                error_indices = [i for i in error_df["index"].dropna().unique() if i in df.index]
                summary_path = ops_df.save_df(
                    error_df,
                    path_gen.validation_errors(self.configs, wkfl_name, "summary")
                )
                ops_df.save_df(
                    df.loc[error_indices],
                    path_gen.validation_errors(self.configs, wkfl_name, "error_rows")
                )
                console.print(f"Validation errors saved to: \n{summary_path}")
            raise

    def replace_blanks(self, df: pd.DataFrame) -> pd.DataFrame:
        """Turns empty and whitespace-only strings in every text column into nulls."""
        text_cols: list[str] = [col for col in df.columns if df[col].dtype == "object"]
        t.print_with_dots("Replacing blank values with nulls")
        return clean_df_base.replace_with_nan(df, text_cols)

    def save_dfs(self, save_map: dict[str, Path], atomic: bool = False) -> None:
        """Saves dataframes to their specified paths."""
        console.print("\n")
        for id, path in save_map.items():
            ops_df.save_df(self.dfs_out[id], path, atomic=atomic)
            console.print(f"\"{id}\" successfully saved to: \n{path}")

    @classmethod
    def create_workflow(cls, configs: WorkflowConfigs, wkfl_id: str, **kwargs: Any) -> Optional['WorkflowBase']:
        """Instantiates workflow object for the requested CLI command."""
        if wkfl_id == "housing_clean":
            return WkflHousingClean(configs, **kwargs)
        elif wkfl_id == "housing_preview":
            return WkflHousingPreview(configs, **kwargs)
        return None

    @abstractmethod
    def execute(self) -> None:
        pass


class WorkflowStandardBase(WorkflowBase):
    """Base class for workflows that follow the standard load->process->save pattern"""
    def execute(self) -> None:
        """Template method implementation"""
        self.load()
        self.process()
        self.summary_stats()
        self.save()

    @abstractmethod
    def load(self) -> None:
        """Loads data files into dataframes."""
        pass

    @abstractmethod
    def process(self) -> None:
        """
        Executes business & transformation logic for the workflow. Saves and stores processed dataframes in self.dfs_out.
        """
        pass

    @abstractmethod
    def summary_stats(self):
        """Executes summary stats builder for the workflow."""
        pass

    @abstractmethod
    def save(self) -> None:
        """
        Saves processed dataframes. Keys of save_map object must match EXACTLY those of self.dfs_out.
        """
        pass


class WkflHousingClean(WorkflowStandardBase):
    """
    Cleans the housing sale records dataset in six stages that always run in this order:

        1. normalize sale dates
        2. fill missing property addresses from records of the same parcel
        3. split property and owner addresses into components
        4. normalize sold-as-vacant values
        5. remove duplicate sales
        6. drop superseded columns

    Stages work on a copy of the loaded dataframe. Nothing is written unless every stage and the final validation
    succeed.

    INPUTS:
        - Raw housing sale records
            - 'ROOT/raw/{dataset}[FileExt]'
    OUTPUTS:
        - Cleaned housing sale records
            - 'ROOT/processed/{dataset}.csv' (or the raw file itself when running in place)
        - Summary stats
            - 'ROOT/summary_stats/housing_clean_{timestamp}.csv'
    """

    WKFL_NAME: str = "HOUSING RECORDS CLEANING WORKFLOW"
    WKFL_DESC: str = "Normalizes, repairs, deduplicates and prunes the housing sale records dataset."

    def __init__(self, configs: WorkflowConfigs, save_stats: bool = True):
        super().__init__(configs)
        self.id: str = configs["dataset"]
        self.stage: WorkflowStage = WorkflowStage.RAW
        self.stage_counts: dict[str, int] = {}
        self.save_stats: bool = save_stats
        t.print_workflow_name(self.WKFL_NAME, self.WKFL_DESC)

    # -----------------------
    # ----STAGE TRACKING----
    # -----------------------
    def check_stage(self, stage: WorkflowStage) -> None:
        """Raises ValueError unless the workflow is in the state right before the requested stage."""
        if stage != self.stage + 1:
            raise ValueError(
                f"Cannot run stage {stage.name}: workflow is at {self.stage.name}, "
                f"expected {WorkflowStage(stage - 1).name}"
            )

    def complete_stage(self, stage: WorkflowStage, message: str) -> None:
        self.stage = stage
        t.print_stage_complete(message)

    # ---------------
    # ----STAGES----
    # ---------------
    def execute_pre_cleaning(self, df: pd.DataFrame) -> pd.DataFrame:
        """Validates the raw dataset and turns blank strings into nulls."""
        t.print_equals("Executing pre-cleaning operations")
        df = self.run_validator(self.id, df, NashvilleHousingRaw, "housing_clean")
        df = self.replace_blanks(df)
        console.print("Pre-cleaning complete ✅")
        return df

    def normalize_dates(self, df: pd.DataFrame) -> pd.DataFrame:
        self.check_stage(WorkflowStage.DATE_NORMALIZED)
        t.print_equals("Stage 1: Standardizing sale date format")
        t.print_with_dots(f"Converting \"{nh.SALE_DATE}\" into \"{nh.SALE_DATE_CONVERTED}\"")
        df = cols_df.set_sale_date_converted(df)
        unparsed = df[nh.SALE_DATE].notna() & df[nh.SALE_DATE_CONVERTED].isna()
        self.stage_counts["dates_unparsed"] = int(unparsed.sum())
        if unparsed.any():
            console.print(f"[yellow]{unparsed.sum():,} sale dates could not be converted and were set to null[/yellow]")
        self.complete_stage(WorkflowStage.DATE_NORMALIZED, "Sale dates standardized")
        return df

    def fill_addresses(self, df: pd.DataFrame) -> pd.DataFrame:
        self.check_stage(WorkflowStage.ADDRESS_FILLED)
        t.print_equals("Stage 2: Populating missing property addresses")
        missing_before = int(df[nh.PROPERTY_ADDRESS].isna().sum())
        t.print_with_dots(f"Filling {missing_before:,} missing addresses from records with the same parcel ID")
        df = colm_df.fill_property_address(df)
        missing_after = int(df[nh.PROPERTY_ADDRESS].isna().sum())
        self.stage_counts["addresses_missing"] = missing_before
        self.stage_counts["addresses_filled"] = missing_before - missing_after
        self.stage_counts["addresses_unfilled"] = missing_after
        self.complete_stage(
            WorkflowStage.ADDRESS_FILLED,
            f"{missing_before - missing_after:,} property addresses populated"
        )
        return df

    def split_addresses(self, df: pd.DataFrame) -> pd.DataFrame:
        self.check_stage(WorkflowStage.ADDRESS_SPLIT)
        t.print_equals("Stage 3: Breaking out addresses into individual columns")
        t.print_with_dots("Splitting property addresses into street and city")
        df = cols_df.set_property_split(df)
        t.print_with_dots("Splitting owner addresses into street, city and state")
        df = cols_df.set_owner_split(df)
        self.complete_stage(WorkflowStage.ADDRESS_SPLIT, "Address columns generated")
        return df

    def normalize_categories(self, df: pd.DataFrame) -> pd.DataFrame:
        self.check_stage(WorkflowStage.CATEGORY_NORMALIZED)
        t.print_equals(f"Stage 4: Normalizing \"{nh.SOLD_AS_VACANT}\" values")
        before: pd.Series = df[nh.SOLD_AS_VACANT].copy()
        ss.display_frequency_table(ops_df.get_frequency_df(df, nh.SOLD_AS_VACANT), "Sold As Vacant (before)")
        df = colm_df.fix_sold_as_vacant(df)
        ss.display_frequency_table(ops_df.get_frequency_df(df, nh.SOLD_AS_VACANT), "Sold As Vacant (after)")
        self.stage_counts["vacant_normalized"] = ops_df.count_changed(before, df[nh.SOLD_AS_VACANT])
        self.complete_stage(WorkflowStage.CATEGORY_NORMALIZED, "Sold-as-vacant values normalized")
        return df

    def remove_duplicates(self, df: pd.DataFrame) -> pd.DataFrame:
        self.check_stage(WorkflowStage.DEDUPLICATED)
        t.print_equals("Stage 5: Removing duplicate sales")
        subset: list[str] = NashvilleHousingClean.dedup_key()
        t.print_with_dots(f"Keeping the lowest {nh.UNIQUE_ID} per {', '.join(subset)}")
        rows_before = len(df)
        df = dedup_df.drop_dup_sales(df, subset)
        self.stage_counts["duplicates_removed"] = rows_before - len(df)
        self.complete_stage(WorkflowStage.DEDUPLICATED, f"{rows_before - len(df):,} duplicate records removed")
        return df

    def prune_columns(self, df: pd.DataFrame) -> pd.DataFrame:
        self.check_stage(WorkflowStage.PRUNED)
        t.print_equals("Stage 6: Dropping unused columns")
        cols: list[str] = NashvilleHousingClean.deprecated()
        cols_before = len(df.columns)
        df = colm_df.drop_columns(df, cols)
        self.stage_counts["columns_dropped"] = cols_before - len(df.columns)
        self.complete_stage(WorkflowStage.PRUNED, f"Dropped columns: {', '.join(cols)}")
        return df

    # ------------------------
    # ----WORKFLOW METHODS----
    # ------------------------
    def load(self) -> None:
        if self.configs.get("in_place", False) and self.configs["load_ext"] != "csv":
            raise ValueError("In-place cleaning is only supported for csv datasets")
        load_map: dict[str, dict[str, Any]] = {
            self.id: {
                "path": path_gen.raw_dataset(self.configs),
                "schema": NashvilleHousingRaw,
            },
        }
        self.load_dfs(load_map)

    def clean(self, df: pd.DataFrame) -> pd.DataFrame:
        """Runs pre-cleaning and the six cleaning stages on a copy of df."""
        df = self.execute_pre_cleaning(df.copy())
        df = self.normalize_dates(df)
        df = self.fill_addresses(df)
        df = self.split_addresses(df)
        df = self.normalize_categories(df)
        df = self.remove_duplicates(df)
        df = self.prune_columns(df)
        return df

    def process(self) -> None:
        t.print_dataset_name(self.id)
        df: pd.DataFrame = self.clean(self.dfs_in[self.id])
        df = self.run_validator(self.id, df, NashvilleHousingClean, "housing_clean")
        self.dfs_out[self.id] = df

    def summary_stats(self) -> None:
        stats = SSHousingClean(
            self.configs,
            self.WKFL_NAME,
            self.dfs_in[self.id],
            self.dfs_out[self.id],
            self.stage_counts,
        )
        stats.calculate()
        stats.print()
        if self.save_stats and not self.configs.get("dry_run", False):
            path: Path = stats.save()
            console.print(f"Summary stats saved to: \n{path}")

    def save(self) -> None:
        if self.configs.get("dry_run", False):
            console.print("\n[yellow]Dry run: cleaned dataset was not saved[/yellow]")
            return
        in_place: bool = self.configs.get("in_place", False)
        save_map: dict[str, Path] = {
            self.id: path_gen.output_dataset(self.configs),
        }
        self.save_dfs(save_map, atomic=in_place)


class WkflHousingPreview(WorkflowBase):
    """
    Read-only inspection of the raw dataset. Shows what each cleaning stage would do without mutating or saving
    anything. The previewed frame is kept in self.dfs_out but never written.
    """

    WKFL_NAME: str = "HOUSING RECORDS PREVIEW"
    WKFL_DESC: str = "Previews date conversion, address filling and splitting, sold-as-vacant values and duplicates."

    def __init__(self, configs: WorkflowConfigs, rows: int = 10):
        super().__init__(configs)
        self.id: str = configs["dataset"]
        self.rows: int = rows
        t.print_workflow_name(self.WKFL_NAME, self.WKFL_DESC)

    def execute(self) -> None:
        self.load_dfs({
            self.id: {
                "path": path_gen.raw_dataset(self.configs),
                "schema": NashvilleHousingRaw,
            },
        })
        df: pd.DataFrame = self.run_validator(
            self.id, self.dfs_in[self.id].copy(), NashvilleHousingRaw, "housing_preview"
        )
        df = self.replace_blanks(df)

        t.print_equals("Sale date conversion")
        df = cols_df.set_sale_date_converted(df)
        t.print_df(df[[nh.SALE_DATE, nh.SALE_DATE_CONVERTED]], "Sale Dates", self.rows)

        t.print_equals("Missing property addresses")
        t.print_df(
            subset_df.get_missing_addresses(df)[[nh.UNIQUE_ID, nh.PARCEL_ID, nh.PROPERTY_ADDRESS]],
            "Records Missing Property Address",
            self.rows
        )
        t.print_df(subset_df.get_fill_candidates(df), "Fill Candidates (same parcel, different record)", self.rows)

        t.print_equals("Address split")
        df = cols_df.set_property_split(df)
        df = cols_df.set_owner_split(df)
        t.print_df(
            df[[nh.PROPERTY_ADDRESS, nh.PROPERTY_SPLIT_ADDRESS, nh.PROPERTY_SPLIT_CITY]],
            "Property Address Split",
            self.rows
        )
        t.print_df(
            df[[nh.OWNER_ADDRESS, nh.OWNER_SPLIT_ADDRESS, nh.OWNER_SPLIT_CITY, nh.OWNER_SPLIT_STATE]],
            "Owner Address Split",
            self.rows
        )

        t.print_equals("Sold as vacant")
        ss.display_frequency_table(ops_df.get_frequency_df(df, nh.SOLD_AS_VACANT), "Sold As Vacant")

        t.print_equals("Duplicate sales")
        df_dups, _ = subset_df.get_duplicates(df, NashvilleHousingClean.dedup_key())
        t.print_df(
            df_dups.sort_values([nh.PARCEL_ID, nh.UNIQUE_ID])[[nh.UNIQUE_ID] + NashvilleHousingClean.dedup_key()],
            "Records Sharing a Duplicate Key",
            self.rows
        )
        self.dfs_out[self.id] = df
