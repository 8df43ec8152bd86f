import json
from pathlib import Path
from typing import Any

from rich.console import Console

from nashclean.constants.base import DEFAULT_DATASET, DEFAULT_LOAD_EXT
from nashclean.types.base import WorkflowConfigs

console = Console()


class ConfigManager:

    def __init__(self, configs_path: Path | None = None):
        self._configs_path = configs_path or Path(__file__).parent.parent / "configs.json"
        self._configs: dict[str, Any] = {}
        self.load()

    def generate(
        self,
        data_root: Path,
        dataset: str = DEFAULT_DATASET,
        load_ext: str = DEFAULT_LOAD_EXT,
        save_validation_errors: bool = True,
    ) -> None:
        """
        Generates new configs.json file.

        Args:
            data_root: Root directory path for the workflow
            dataset: Name of the dataset to clean (file stem inside ROOT/raw)
            load_ext: Extension of the raw dataset file
            save_validation_errors: Whether validation failures are written to ROOT/validation_errors
        Raises:
            OSError: If there are permission issues or path creation fails
        """
        json_configs = {
            "data_root": str(Path(data_root).absolute()),
            "dataset": dataset,
            "load_ext": load_ext.lstrip("."),
            "save_validation_errors": save_validation_errors,
        }
        self._configs = json_configs
        try:
            self._configs_path.parent.mkdir(parents=True, exist_ok=True)
            self.save()
        except OSError as e:
            raise OSError(f"Failed to create config file: {e}") from e

    def load(self) -> None:
        """Load configuration from file"""
        if self._configs_path.exists():
            with open(self._configs_path, encoding="utf-8") as f:
                self._configs = json.load(f)

    def save(self) -> None:
        """Save current configuration to file"""
        with open(str(self._configs_path), "w", encoding="utf-8") as f:
            json.dump(self._configs, f, indent=2)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value"""
        return self._configs.get(key, default)

    def workflow_configs(self, **overrides: Any) -> WorkflowConfigs:
        """
        Returns typed workflow configs with defaults filled in. Overrides that are None are ignored, so CLI options
        only replace configured values when they were actually passed.
        """
        configs: WorkflowConfigs = {
            "data_root": Path(self._configs["data_root"]),
            "dataset": self._configs.get("dataset", DEFAULT_DATASET),
            "load_ext": self._configs.get("load_ext", DEFAULT_LOAD_EXT),
            "save_validation_errors": self._configs.get("save_validation_errors", True),
            "in_place": False,
            "dry_run": False,
        }
        for key, value in overrides.items():
            if value is not None:
                configs[key] = value
        return configs

    @property
    def path(self) -> str:
        return str(self._configs_path)

    @property
    def exists(self) -> bool:
        found = self._configs_path.exists()
        if not found:
            console.print("configs file not found")
        return found

