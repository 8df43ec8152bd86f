from typing import Tuple

import pandas as pd

from nashclean.constants.columns import NashvilleHousing as nh
from nashclean.services.dataframe.base import DataFrameOpsBase
from nashclean.services.string_clean import (
    CleanStringDate as clean_date,
    CleanStringAddress as clean_addr,
    CleanStringCategorical as clean_cat,
)


class DataFrameColumnGenerators(DataFrameOpsBase):
    """Dataframe operations that add new columns derived from existing ones."""

    @classmethod
    def set_sale_date_converted(cls, df: pd.DataFrame) -> pd.DataFrame:
        """
        Adds the sale date coerced to a calendar date. Values that cannot be read as dates are set to NaT instead of
        failing the batch. The raw sale date column is left untouched.
        """
        converted: pd.Series = df[nh.SALE_DATE].apply(clean_date.to_date)
        df[nh.SALE_DATE_CONVERTED] = pd.to_datetime(converted)
        return df

    @classmethod
    def set_property_split(cls, df: pd.DataFrame) -> pd.DataFrame:
        """Adds street and city columns parsed from the composite property address."""
        parts = df[nh.PROPERTY_ADDRESS].apply(clean_addr.split_property_address)
        df_parts = pd.DataFrame(
            parts.tolist(),
            index=df.index,
            columns=[nh.PROPERTY_SPLIT_ADDRESS, nh.PROPERTY_SPLIT_CITY],
            dtype=object,
        )
        df[nh.PROPERTY_SPLIT_ADDRESS] = df_parts[nh.PROPERTY_SPLIT_ADDRESS]
        df[nh.PROPERTY_SPLIT_CITY] = df_parts[nh.PROPERTY_SPLIT_CITY]
        return df

    @classmethod
    def set_owner_split(cls, df: pd.DataFrame) -> pd.DataFrame:
        """Adds street, city and state columns parsed from the composite owner address."""
        parts = df[nh.OWNER_ADDRESS].apply(clean_addr.split_owner_address)
        df_parts = pd.DataFrame(
            parts.tolist(),
            index=df.index,
            columns=[nh.OWNER_SPLIT_ADDRESS, nh.OWNER_SPLIT_CITY, nh.OWNER_SPLIT_STATE],
            dtype=object,
        )
        for col in df_parts.columns:
            df[col] = df_parts[col]
        return df


class DataFrameColumnManipulators(DataFrameOpsBase):
    """Dataframe operations that manipulate or transform an existing dataframe column."""

    @classmethod
    def get_address_donors(cls, df: pd.DataFrame) -> pd.Series:
        """
        Returns a series mapping each parcel ID to the property address of its lowest-ID record with a non-null
        address. Records with a null parcel ID never donate.
        """
        has_address = df[nh.PROPERTY_ADDRESS].notna() & df[nh.PARCEL_ID].notna()
        df_donors: pd.DataFrame = (
            df.loc[has_address, [nh.UNIQUE_ID, nh.PARCEL_ID, nh.PROPERTY_ADDRESS]]
            .sort_values(nh.UNIQUE_ID, kind="mergesort")
            .drop_duplicates(subset=nh.PARCEL_ID, keep="first")
        )
        return df_donors.set_index(nh.PARCEL_ID)[nh.PROPERTY_ADDRESS]

    @classmethod
    def fill_property_address(cls, df: pd.DataFrame) -> pd.DataFrame:
        """
        Fills null property addresses with the address of another record sharing the same parcel ID. When a parcel
        has several candidate addresses the one from the lowest unique ID wins. Records without any donor stay null.
        """
        donors: pd.Series = cls.get_address_donors(df)
        mask = df[nh.PROPERTY_ADDRESS].isna() & df[nh.PARCEL_ID].notna()
        if mask.any():
            df.loc[mask, nh.PROPERTY_ADDRESS] = df.loc[mask, nh.PARCEL_ID].map(donors)
        return df

    @classmethod
    def fix_sold_as_vacant(cls, df: pd.DataFrame) -> pd.DataFrame:
        """Replaces 'Y' and 'N' with 'Yes' and 'No'. All other values are kept."""
        df[nh.SOLD_AS_VACANT] = df[nh.SOLD_AS_VACANT].apply(clean_cat.normalize_yes_no)
        return df

    @classmethod
    def drop_columns(cls, df: pd.DataFrame, cols: list[str]) -> pd.DataFrame:
        """Drops the listed columns. Columns that are already absent are ignored."""
        return df.drop(columns=[col for col in cols if col in df.columns])


class DataFrameSubsetters(DataFrameOpsBase):
    """Dataframe operations that return subsets."""

    @classmethod
    def get_duplicates(cls, df: pd.DataFrame, subset: list[str]) -> Tuple[pd.DataFrame, pd.DataFrame]:
        """
        Finds rows sharing the same values across the subset columns and returns two dataframes:
        1. A dataframe containing only rows belonging to a duplicate group
        2. A dataframe with all other original rows
        Returns:
            tuple: (duplicate_rows, non_duplicate_rows)
        """
        duplicate_mask = df.duplicated(subset=subset, keep=False)
        return df[duplicate_mask], df[~duplicate_mask]

    @classmethod
    def get_missing_addresses(cls, df: pd.DataFrame) -> pd.DataFrame:
        """Returns records with a null property address, ordered by parcel ID."""
        return df[df[nh.PROPERTY_ADDRESS].isna()].sort_values(nh.PARCEL_ID)

    @classmethod
    def get_fill_candidates(cls, df: pd.DataFrame) -> pd.DataFrame:
        """
        Pairs every record missing a property address with each other record of the same parcel. The
        'FilledAddress' column shows the address the pair would produce.
        """
        cols = [nh.UNIQUE_ID, nh.PARCEL_ID, nh.PROPERTY_ADDRESS]
        df_a: pd.DataFrame = df.loc[df[nh.PROPERTY_ADDRESS].isna() & df[nh.PARCEL_ID].notna(), cols]
        df_b: pd.DataFrame = df.loc[df[nh.PARCEL_ID].notna(), cols]
        df_pairs: pd.DataFrame = df_a.merge(df_b, on=nh.PARCEL_ID, suffixes=("_a", "_b"))
        df_pairs = df_pairs[df_pairs[f"{nh.UNIQUE_ID}_a"] != df_pairs[f"{nh.UNIQUE_ID}_b"]]
        df_pairs["FilledAddress"] = df_pairs[f"{nh.PROPERTY_ADDRESS}_a"].fillna(
            df_pairs[f"{nh.PROPERTY_ADDRESS}_b"]
        )
        return df_pairs.reset_index(drop=True)


class DataFrameDeduplicators(DataFrameOpsBase):

    @classmethod
    def drop_dup_sales(cls, df: pd.DataFrame, subset: list[str], order_col: str = nh.UNIQUE_ID) -> pd.DataFrame:
        """
        Keeps one record per distinct combination of the subset columns: the one with the lowest value of order_col.
        Nulls in the subset columns compare equal to each other. Surviving rows keep their original order.

        Args:
            df: Input dataframe
            subset: Columns identifying duplicate sales
            order_col: Column used to rank the members of each duplicate group

        Returns:
            Dataframe with duplicates removed
        """
        df_ranked: pd.DataFrame = df.sort_values(order_col, kind="mergesort")
        is_dup: pd.Series = df_ranked.duplicated(subset=subset, keep="first")
        keep_index = df_ranked.index[~is_dup.to_numpy()]
        return df[df.index.isin(keep_index)]
