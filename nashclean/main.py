from pathlib import Path

import click
import pandera as pa
from click.core import Context
from rich.console import Console

from nashclean.constants.base import DEFAULT_DATASET, DEFAULT_LOAD_EXT
from nashclean.schema_utils.export.model_export import create_report_for_schema
from nashclean.services.config import ConfigManager
from nashclean.services.terminal_printers import TerminalBase as t
from nashclean.types.base import WorkflowConfigs
from nashclean.utils import UtilsBase as utils
from nashclean.workflows.base import WorkflowBase

console = Console()
LOAD_EXTS = ["csv", "parquet", "xlsx", "xls", "json"]


def get_configs(config_manager: ConfigManager, **overrides) -> WorkflowConfigs:
    """Returns workflow configs, or stops the command if the project was never initialized."""
    if not config_manager.exists or config_manager.get("data_root") is None:
        raise click.ClickException("No configs file was found. Run `nashclean init /path/to/your/root/data/dir`")
    return config_manager.workflow_configs(**overrides)


def run_workflow(configs: WorkflowConfigs, wkfl_id: str, **kwargs) -> None:
    """Executes a workflow, turning structural failures into a red message and a non-zero exit code."""
    wkfl = WorkflowBase.create_workflow(configs, wkfl_id, **kwargs)
    if wkfl is None:
        raise click.ClickException(f"Unknown workflow: {wkfl_id}")
    try:
        wkfl.execute()
    except pa.errors.SchemaErrors as e:
        t.print_error(f"Validation failed with {len(e.failure_cases):,} errors. Nothing was saved.")
        raise SystemExit(1)
    except (FileNotFoundError, ValueError) as e:
        t.print_error(f"{e}. Nothing was saved.")
        raise SystemExit(1)


@click.group()  # main cli group of functions that pyproject.toml points to
@click.option(
    "--configs",
    "configs_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to the configs file (defaults to configs.json next to the package).",
)
@click.pass_context  # passes context object into the function - passes data into different commands in this group
def cli(ctx: Context, configs_path: Path | None):
    """
    nashclean command line interface

    Main CLI group. ctx.obj stores the ConfigManager shared between commands.
    """
    ctx.obj = ConfigManager(configs_path)


@cli.command()
@click.argument("data_root", type=click.Path(file_okay=False, dir_okay=True, path_type=Path))
@click.option("--dataset", default=DEFAULT_DATASET, show_default=True, help="Name of the dataset file in ROOT/raw.")
@click.option("--ext", "load_ext", default=DEFAULT_LOAD_EXT, show_default=True, type=click.Choice(LOAD_EXTS))
@click.option("--no-save-errors", is_flag=True, default=False, help="Do not write validation failures to disk.")
@click.pass_obj
def init(config_manager: ConfigManager, data_root: Path, dataset: str, load_ext: str, no_save_errors: bool):
    """Initialize nashclean with a data directory"""
    data_root = data_root.resolve()
    utils.generate_data_dirs(data_root)
    config_manager.generate(data_root, dataset, load_ext, not no_save_errors)
    console.print(f"Initialized nashclean with data directory: \n{data_root}")
    console.print(f"Config file location: \n{config_manager.path}")
    console.print("Project data directories created.\n")
    t.print_data_root_tree(data_root)
    console.print(f"\nCopy the raw dataset to: \n{data_root / 'raw' / f'{dataset}.{load_ext}'}")


@cli.command()
@click.option("--dataset", default=None, help="Dataset to clean (overrides the configured one).")
@click.option("--in-place", is_flag=True, default=False, help="Overwrite the raw dataset instead of writing to ROOT/processed.")
@click.option("--dry-run", is_flag=True, default=False, help="Run and report every stage without saving anything.")
@click.option("--no-stats", is_flag=True, default=False, help="Do not save summary stats.")
@click.pass_obj
def clean(config_manager: ConfigManager, dataset: str | None, in_place: bool, dry_run: bool, no_stats: bool):
    """Run the full cleaning workflow on the configured dataset"""
    t.print_welcome()
    configs = get_configs(config_manager, dataset=dataset, in_place=in_place, dry_run=dry_run)
    run_workflow(configs, "housing_clean", save_stats=not no_stats)


@cli.command()
@click.option("--dataset", default=None, help="Dataset to preview (overrides the configured one).")
@click.option("--rows", default=10, show_default=True, type=click.IntRange(min=1), help="Rows shown per table.")
@click.pass_obj
def preview(config_manager: ConfigManager, dataset: str | None, rows: int):
    """Show what each cleaning stage would change, without modifying anything"""
    configs = get_configs(config_manager, dataset=dataset, dry_run=True)
    run_workflow(configs, "housing_preview", rows=rows)


@cli.command("schema-report")
@click.argument("version", default="v0_1")
@click.option("--out", "out_path", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Write the markdown report to this file instead of printing it.")
def schema_report(version: str, out_path: Path | None):
    """Export the raw and cleaned dataset schemas as a markdown data dictionary"""
    try:
        report = create_report_for_schema(version)
    except ModuleNotFoundError as e:
        raise click.ClickException(str(e))
    if out_path:
        report.save_md(str(out_path))
        console.print(f"Schema report saved to: \n{out_path}")
    else:
        click.echo(report.to_md())


if __name__ == "__main__":
    cli()
