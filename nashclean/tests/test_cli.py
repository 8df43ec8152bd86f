import json
from pathlib import Path

import numpy as np
import pandas as pd
import pytest
from click.testing import CliRunner

from nashclean.constants.columns import NashvilleHousing as nh
from nashclean.main import cli


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def configs_path(tmp_path: Path) -> Path:
    return tmp_path / "configs.json"


@pytest.fixture
def data_root(tmp_path: Path) -> Path:
    return tmp_path / "data"


def write_raw(data_root: Path) -> Path:
    df = pd.DataFrame({
        nh.UNIQUE_ID: [10, 11, 5, 7],
        nh.PARCEL_ID: ["P1", "P1", "P2", "P2"],
        nh.PROPERTY_ADDRESS: [np.nan, "123 Main St, Nashville", "5 Oak Ave, Nashville", "5 Oak Ave, Nashville"],
        nh.SALE_DATE: ["April 9, 2013", "2014-06-10", "2015-01-02", "2015-01-02"],
        nh.SALE_PRICE: ["$120,000", "$95,000", "$200,000", "$200,000"],
        nh.LEGAL_REFERENCE: ["R10", "R11", "R5", "R5"],
        nh.SOLD_AS_VACANT: ["N", "Yes", "Y", "Y"],
        nh.OWNER_ADDRESS: ["123 Main St, Nashville, TN", np.nan, "5 Oak Ave, Nashville, TN", np.nan],
        nh.TAX_DISTRICT: ["GENERAL SERVICES DISTRICT"] * 4,
    })
    path = data_root / "raw" / "nashvillehousing.csv"
    df.to_csv(path, index=False)
    return path


class TestCli:

    class TestInit:

        def test_creates_configs_and_dirs(self, runner: CliRunner, configs_path: Path, data_root: Path):
            result = runner.invoke(cli, ["--configs", str(configs_path), "init", str(data_root)])
            assert result.exit_code == 0, result.output
            configs = json.loads(configs_path.read_text())
            assert configs["data_root"] == str(data_root.resolve())
            assert configs["dataset"] == "nashvillehousing"
            assert configs["load_ext"] == "csv"
            assert configs["save_validation_errors"] is True
            for subdir in ["raw", "processed", "summary_stats", "validation_errors"]:
                assert (data_root / subdir).is_dir()

    class TestClean:

        def test_requires_init(self, runner: CliRunner, configs_path: Path):
            result = runner.invoke(cli, ["--configs", str(configs_path), "clean"])
            assert result.exit_code != 0
            assert "nashclean init" in result.output

        def test_clean(self, runner: CliRunner, configs_path: Path, data_root: Path):
            runner.invoke(cli, ["--configs", str(configs_path), "init", str(data_root)])
            write_raw(data_root)
            result = runner.invoke(cli, ["--configs", str(configs_path), "clean"])
            assert result.exit_code == 0, result.output
            df_out = pd.read_csv(data_root / "processed" / "nashvillehousing.csv")
            assert df_out[nh.UNIQUE_ID].tolist() == [10, 11, 5]
            assert df_out[nh.SOLD_AS_VACANT].tolist() == ["No", "Yes", "Yes"]

        def test_dry_run(self, runner: CliRunner, configs_path: Path, data_root: Path):
            runner.invoke(cli, ["--configs", str(configs_path), "init", str(data_root)])
            write_raw(data_root)
            result = runner.invoke(cli, ["--configs", str(configs_path), "clean", "--dry-run"])
            assert result.exit_code == 0, result.output
            assert not any((data_root / "processed").iterdir())

        def test_missing_dataset_exits_non_zero(self, runner: CliRunner, configs_path: Path, data_root: Path):
            runner.invoke(cli, ["--configs", str(configs_path), "init", str(data_root)])
            result = runner.invoke(cli, ["--configs", str(configs_path), "clean", "--dataset", "other"])
            assert result.exit_code == 1

    class TestPreview:

        def test_preview(self, runner: CliRunner, configs_path: Path, data_root: Path):
            runner.invoke(cli, ["--configs", str(configs_path), "init", str(data_root)])
            write_raw(data_root)
            result = runner.invoke(cli, ["--configs", str(configs_path), "preview", "--rows", "2"])
            assert result.exit_code == 0, result.output
            assert not any((data_root / "processed").iterdir())

    class TestSchemaReport:

        def test_prints_markdown(self, runner: CliRunner, configs_path: Path):
            result = runner.invoke(cli, ["--configs", str(configs_path), "schema-report"])
            assert result.exit_code == 0, result.output
            assert "NashvilleHousingClean" in result.output

        def test_writes_file(self, runner: CliRunner, configs_path: Path, tmp_path: Path):
            out = tmp_path / "schema.md"
            result = runner.invoke(cli, ["--configs", str(configs_path), "schema-report", "v0.1", "--out", str(out)])
            assert result.exit_code == 0, result.output
            assert "NashvilleHousingRaw" in out.read_text()

        def test_unknown_version(self, runner: CliRunner, configs_path: Path):
            result = runner.invoke(cli, ["--configs", str(configs_path), "schema-report", "v9_9"])
            assert result.exit_code != 0
