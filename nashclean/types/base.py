from enum import IntEnum
from pathlib import Path
from typing import TypedDict, Literal


FileExt = Literal["csv", "parquet", "xlsx", "xls", "json"]


class WorkflowStage(IntEnum):
    """Keeps track of cleaning stages. Stages only ever move forward, one at a time."""
    RAW = 0
    DATE_NORMALIZED = 1
    ADDRESS_FILLED = 2
    ADDRESS_SPLIT = 3
    CATEGORY_NORMALIZED = 4
    DEDUPLICATED = 5
    PRUNED = 6


class WorkflowConfigs(TypedDict, total=False):
    data_root: Path
    dataset: str
    load_ext: FileExt
    save_validation_errors: bool
    in_place: bool
    dry_run: bool


class StatEntry(TypedDict):
    display_name: str
    value: int | float
