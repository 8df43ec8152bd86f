from datetime import datetime
from pathlib import Path

from nashclean.constants.files import Dirs
from nashclean.types.base import FileExt, WorkflowConfigs


class UtilsBase(object):

    @staticmethod
    def get_timestamp() -> str:
        return datetime.now().strftime("%Y_%m_%d_%H_%M_%S")

    @classmethod
    def generate_path(cls, data_root: str | Path, subdir: str, filename: str, ext: FileExt = "csv") -> Path:
        """:returns: data_root/subdir/filename.ext"""
        return Path(data_root) / subdir / f"{filename}.{ext}"

    @classmethod
    def generate_data_dirs(cls, root: Path) -> list[Path]:
        """
        Creates the project data directories under root and returns the ones that did not exist yet. Existing
        directories and their contents are left alone.
        """
        if not root:
            raise ValueError("Root directory path must be provided")
        created: list[Path] = []
        for dir_name in Dirs.project_dirs():
            dir_path: Path = root / dir_name
            if dir_path.is_dir():
                continue
            try:
                dir_path.mkdir(parents=True)
            except OSError as e:
                raise RuntimeError(f"Failed to create directory {dir_path}: {e}") from e
            created.append(dir_path)
        return created


class PathGenerators(UtilsBase):
    """
    File paths of every dataset nashclean reads or writes, grouped by data subdirectory.
    """
    # -----------
    # ----RAW----
    # -----------
    @classmethod
    def raw_dataset(cls, configs: WorkflowConfigs) -> Path:
        """:returns: ROOT/raw/{dataset}[ext]"""
        return cls.generate_path(
            configs["data_root"],
            Dirs.RAW,
            configs["dataset"],
            configs["load_ext"]
        )

    # -----------------
    # ----PROCESSED----
    # -----------------
    @classmethod
    def processed_dataset(cls, configs: WorkflowConfigs) -> Path:
        """:returns: ROOT/processed/{dataset}.csv"""
        return cls.generate_path(
            configs["data_root"],
            Dirs.PROCESSED,
            configs["dataset"],
        )

    @classmethod
    def output_dataset(cls, configs: WorkflowConfigs) -> Path:
        """Destination of the cleaned dataset: the raw file itself for in-place runs, ROOT/processed otherwise."""
        if configs.get("in_place", False):
            return cls.raw_dataset(configs)
        return cls.processed_dataset(configs)

    # ---------------------
    # ----SUMMARY_STATS----
    # ---------------------
    @classmethod
    def summary_stats(cls, configs: WorkflowConfigs, wkfl_name: str) -> Path:
        """:returns: ROOT/summary_stats/{wkfl_name}_{timestamp}.csv"""
        return cls.generate_path(
            configs["data_root"],
            Dirs.SUMMARY_STATS,
            f"{wkfl_name}_{cls.get_timestamp()}",
        )

    # -------------------------
    # ----VALIDATION_ERRORS----
    # -------------------------
    @classmethod
    def validation_errors(cls, configs: WorkflowConfigs, wkfl_name: str, kind: str) -> Path:
        """:returns: ROOT/validation_errors/{wkfl_name}_{kind}_{timestamp}.csv"""
        return cls.generate_path(
            configs["data_root"],
            Dirs.VALIDATION_ERRORS,
            f"{wkfl_name}_{kind}_{cls.get_timestamp()}",
        )
