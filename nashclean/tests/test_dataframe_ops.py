import numpy as np
import pandas as pd
import pytest

from nashclean.constants.columns import NashvilleHousing as nh
from nashclean.schema.v0_1.out import NashvilleHousingClean
from nashclean.schema.v0_1.raw import NashvilleHousingRaw
from nashclean.services.dataframe.base import DataFrameOpsBase as ops_df
from nashclean.services.dataframe.ops import (
    DataFrameColumnGenerators as cols_df,
    DataFrameColumnManipulators as colm_df,
    DataFrameSubsetters as subset_df,
    DataFrameDeduplicators as dedup_df,
)


@pytest.fixture
def df_parcels() -> pd.DataFrame:
    return pd.DataFrame({
        nh.UNIQUE_ID: [10, 11, 12, 20, 21],
        nh.PARCEL_ID: ["P1", "P1", "P1", "P2", None],
        nh.PROPERTY_ADDRESS: [np.nan, "123 Main St, Nashville", "999 Other Rd, Nashville", np.nan, np.nan],
    })


class TestColumnGenerators:

    def test_sale_date_converted(self):
        df = pd.DataFrame({nh.SALE_DATE: ["April 9, 2013", "2014-06-10", "garbage", np.nan]})
        df = cols_df.set_sale_date_converted(df)
        assert pd.api.types.is_datetime64_any_dtype(df[nh.SALE_DATE_CONVERTED])
        assert df[nh.SALE_DATE_CONVERTED].iloc[0] == pd.Timestamp("2013-04-09")
        assert df[nh.SALE_DATE_CONVERTED].iloc[1] == pd.Timestamp("2014-06-10")
        assert df[nh.SALE_DATE_CONVERTED].iloc[2:].isna().all()
        assert df[nh.SALE_DATE].iloc[2] == "garbage"

    def test_property_split(self):
        df = pd.DataFrame({nh.PROPERTY_ADDRESS: ["123 Main St, Nashville", "456 Elm St", np.nan]})
        df = cols_df.set_property_split(df)
        assert df[nh.PROPERTY_SPLIT_ADDRESS].tolist() == ["123 Main St", "456 Elm St", None]
        assert df[nh.PROPERTY_SPLIT_CITY].tolist() == ["Nashville", None, None]

    def test_owner_split(self):
        df = pd.DataFrame({nh.OWNER_ADDRESS: ["1 A ST, NASHVILLE, TN", "2 B ST, TN", np.nan]})
        df = cols_df.set_owner_split(df)
        assert df[nh.OWNER_SPLIT_ADDRESS].tolist() == ["1 A ST", "2 B ST", None]
        assert df[nh.OWNER_SPLIT_CITY].tolist() == ["NASHVILLE", None, None]
        assert df[nh.OWNER_SPLIT_STATE].tolist() == ["TN", "TN", None]

    def test_owner_split_reconstructs_address(self):
        address = "1808  FOX CHASE DR, GOODLETTSVILLE, TN"
        df = cols_df.set_owner_split(pd.DataFrame({nh.OWNER_ADDRESS: [address]}))
        row = df.iloc[0]
        rebuilt = f"{row[nh.OWNER_SPLIT_ADDRESS]}, {row[nh.OWNER_SPLIT_CITY]}, {row[nh.OWNER_SPLIT_STATE]}"
        assert rebuilt == address


class TestColumnManipulators:

    class TestFillPropertyAddress:

        def test_lowest_unique_id_donor_wins(self, df_parcels: pd.DataFrame):
            df = colm_df.fill_property_address(df_parcels)
            assert df.loc[df[nh.UNIQUE_ID] == 10, nh.PROPERTY_ADDRESS].iloc[0] == "123 Main St, Nashville"

        def test_existing_addresses_untouched(self, df_parcels: pd.DataFrame):
            df = colm_df.fill_property_address(df_parcels)
            assert df.loc[df[nh.UNIQUE_ID] == 12, nh.PROPERTY_ADDRESS].iloc[0] == "999 Other Rd, Nashville"

        def test_no_donor_stays_null(self, df_parcels: pd.DataFrame):
            df = colm_df.fill_property_address(df_parcels)
            assert df.loc[df[nh.UNIQUE_ID].isin([20, 21]), nh.PROPERTY_ADDRESS].isna().all()

        def test_donor_order_does_not_depend_on_row_order(self, df_parcels: pd.DataFrame):
            df = colm_df.fill_property_address(df_parcels.iloc[::-1].copy())
            assert df.loc[df[nh.UNIQUE_ID] == 10, nh.PROPERTY_ADDRESS].iloc[0] == "123 Main St, Nashville"

        def test_fill_then_split(self):
            df = pd.DataFrame({
                nh.UNIQUE_ID: [10, 11],
                nh.PARCEL_ID: ["P1", "P1"],
                nh.PROPERTY_ADDRESS: [np.nan, "123 Main St, Nashville"],
            })
            df = cols_df.set_property_split(colm_df.fill_property_address(df))
            row = df[df[nh.UNIQUE_ID] == 10].iloc[0]
            assert row[nh.PROPERTY_ADDRESS] == "123 Main St, Nashville"
            assert row[nh.PROPERTY_SPLIT_ADDRESS] == "123 Main St"
            assert row[nh.PROPERTY_SPLIT_CITY] == "Nashville"

    def test_fix_sold_as_vacant(self):
        df = pd.DataFrame({nh.SOLD_AS_VACANT: ["Y", "N", "Yes", "No", np.nan]})
        df = colm_df.fix_sold_as_vacant(df)
        assert df[nh.SOLD_AS_VACANT].iloc[:4].tolist() == ["Yes", "No", "Yes", "No"]
        assert pd.isnull(df[nh.SOLD_AS_VACANT].iloc[4])
        assert ops_df.count_changed(df[nh.SOLD_AS_VACANT], colm_df.fix_sold_as_vacant(df.copy())[nh.SOLD_AS_VACANT]) == 0

    def test_drop_columns_is_idempotent(self):
        df = pd.DataFrame({nh.UNIQUE_ID: [1], nh.OWNER_ADDRESS: ["x"], nh.TAX_DISTRICT: ["y"]})
        once = colm_df.drop_columns(df, NashvilleHousingClean.deprecated())
        twice = colm_df.drop_columns(once, NashvilleHousingClean.deprecated())
        assert list(once.columns) == [nh.UNIQUE_ID]
        assert list(twice.columns) == [nh.UNIQUE_ID]


class TestDeduplicators:

    @pytest.fixture
    def df_sales(self) -> pd.DataFrame:
        date = pd.Timestamp("2013-04-09")
        return pd.DataFrame({
            nh.UNIQUE_ID: [9, 5, 7, 8],
            nh.PARCEL_ID: ["P1", "P1", "P1", "P1"],
            nh.PROPERTY_ADDRESS: ["1 A ST, NASHVILLE"] * 4,
            nh.SALE_PRICE: [100.0, 100.0, 100.0, 200.0],
            nh.SALE_DATE_CONVERTED: [date] * 4,
            nh.LEGAL_REFERENCE: ["R1"] * 4,
        })

    def test_lowest_unique_id_survives(self, df_sales: pd.DataFrame):
        df = dedup_df.drop_dup_sales(df_sales, NashvilleHousingClean.dedup_key())
        assert sorted(df[nh.UNIQUE_ID].tolist()) == [5, 8]

    def test_surviving_rows_keep_order(self, df_sales: pd.DataFrame):
        df = dedup_df.drop_dup_sales(df_sales, NashvilleHousingClean.dedup_key())
        assert df[nh.UNIQUE_ID].tolist() == [5, 8]

    def test_no_duplicate_keys_remain(self, df_sales: pd.DataFrame):
        key = NashvilleHousingClean.dedup_key()
        df = dedup_df.drop_dup_sales(df_sales, key)
        assert not df.duplicated(subset=key).any()

    def test_nulls_compare_equal(self):
        df = pd.DataFrame({
            nh.UNIQUE_ID: [2, 1],
            nh.PARCEL_ID: ["P1", "P1"],
            nh.PROPERTY_ADDRESS: [np.nan, np.nan],
            nh.SALE_PRICE: [np.nan, np.nan],
            nh.SALE_DATE_CONVERTED: [pd.NaT, pd.NaT],
            nh.LEGAL_REFERENCE: ["R1", "R1"],
        })
        df = dedup_df.drop_dup_sales(df, NashvilleHousingClean.dedup_key())
        assert df[nh.UNIQUE_ID].tolist() == [1]

    def test_get_duplicates(self, df_sales: pd.DataFrame):
        dups, non_dups = subset_df.get_duplicates(df_sales, NashvilleHousingClean.dedup_key())
        assert sorted(dups[nh.UNIQUE_ID].tolist()) == [5, 7, 9]
        assert non_dups[nh.UNIQUE_ID].tolist() == [8]


class TestSubsetters:

    def test_fill_candidates_exclude_self_pairs(self, df_parcels: pd.DataFrame):
        df = subset_df.get_fill_candidates(df_parcels)
        assert (df[f"{nh.UNIQUE_ID}_a"] != df[f"{nh.UNIQUE_ID}_b"]).all()
        assert df[f"{nh.UNIQUE_ID}_a"].tolist() == [10, 10]
        assert set(df["FilledAddress"]) == {"123 Main St, Nashville", "999 Other Rd, Nashville"}

    def test_missing_addresses(self, df_parcels: pd.DataFrame):
        df = subset_df.get_missing_addresses(df_parcels)
        assert sorted(df[nh.UNIQUE_ID].tolist()) == [10, 20, 21]


class TestDataFrameOpsBase:

    @pytest.fixture
    def df_raw(self) -> pd.DataFrame:
        return pd.DataFrame({
            nh.UNIQUE_ID: [10, 11],
            nh.PARCEL_ID: ["P1", "P1"],
            nh.PROPERTY_ADDRESS: [None, "123 Main St, Nashville"],
            nh.SALE_DATE: ["2013-04-09", "2014-06-10"],
            nh.SALE_PRICE: ["$120,000", "$95,000"],
            nh.OWNER_ADDRESS: ["123 Main St, Nashville, TN", None],
        })

    @pytest.mark.parametrize("ext", ["csv", "json", "parquet", "xlsx"])
    def test_load_keeps_nulls_and_coerces_prices(self, tmp_path, df_raw: pd.DataFrame, ext: str):
        path = tmp_path / f"nashvillehousing.{ext}"
        if ext == "csv":
            df_raw.to_csv(path, index=False)
        elif ext == "json":
            df_raw.to_json(path)
        elif ext == "parquet":
            df_raw.to_parquet(path, index=False)
        else:
            df_raw.to_excel(path, index=False)
        df = ops_df.load_df(path, NashvilleHousingRaw)
        assert df[nh.UNIQUE_ID].tolist() == [10, 11]
        assert df[nh.SALE_PRICE].tolist() == [120000.0, 95000.0]
        assert pd.isnull(df[nh.PROPERTY_ADDRESS].iloc[0])
        assert df[nh.PROPERTY_ADDRESS].iloc[1] == "123 Main St, Nashville"
        assert pd.isnull(df[nh.OWNER_ADDRESS].iloc[1])
        assert df[nh.SALE_DATE].tolist() == ["2013-04-09", "2014-06-10"]

    def test_load_missing_file_returns_none(self, tmp_path):
        assert ops_df.load_df(tmp_path / "nope.csv") is None

    def test_load_empty_file_returns_none(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.touch()
        assert ops_df.load_df(path) is None

    def test_load_unsupported_format(self, tmp_path):
        path = tmp_path / "data.txt"
        path.write_text("a,b\n1,2\n")
        with pytest.raises(ValueError):
            ops_df.load_df(path)

    def test_atomic_save_replaces_file(self, tmp_path):
        path = tmp_path / "out" / "data.csv"
        ops_df.save_df(pd.DataFrame({"a": [1]}), path)
        ops_df.save_df(pd.DataFrame({"a": [2, 3]}), path, atomic=True)
        assert pd.read_csv(path)["a"].tolist() == [2, 3]
        assert [p.name for p in path.parent.iterdir()] == ["data.csv"]

    def test_count_changed(self):
        before = pd.Series(["Y", np.nan, "No"])
        after = pd.Series(["Yes", np.nan, "No"])
        assert ops_df.count_changed(before, after) == 1
