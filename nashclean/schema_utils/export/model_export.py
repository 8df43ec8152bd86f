from dataclasses import dataclass
from types import ModuleType
from typing import Final, Any
import inspect

from pandera.api.base.model import MetaModel as PanderaMetaModel
from pandera import Column as PanderaColumn, DataFrameSchema

from nashclean.validator.df_model import NHDFModel
import importlib

SCHEMA_MODULE_NAMES: Final[tuple[str, ...]] = ("raw", "out")


def normalize_schema_string(schema: str) -> str:
    return schema.lower().strip().replace(".", "_")


@dataclass
class ExportableSchemaColumn:
    title: str
    nullable: bool
    description: str | None = None
    type: str | None = None
    required: bool = True

    @classmethod
    def from_column(cls, column: PanderaColumn) -> "ExportableSchemaColumn":
        return cls(
            title=column.name,
            type=str(column.dtype),
            description=column.description,
            nullable=column.nullable,
            required=column.required,
        )


@dataclass
class ExportableSchema:
    name: str
    description: str | None
    columns: list[ExportableSchemaColumn]

    @classmethod
    def from_meta_model(cls, model: PanderaMetaModel) -> "ExportableSchema":
        schema: DataFrameSchema = model.to_schema()

        return cls(
            name=schema.name,
            description=schema.description or inspect.getdoc(model),
            columns=[
                ExportableSchemaColumn.from_column(c) for c in schema.columns.values()
            ],
        )


@dataclass
class ExportReport:
    """
    Schema report (data dictionary) that can be exported to markdown
    """

    version_code: str
    schemas: list[ExportableSchema]

    def to_md(self) -> str:
        """Returns the markdown representation of the report."""
        lines = [f"## nashclean schema version **{self.version_code}**\n"]
        for schema in self.schemas:
            lines.append(f"### {schema.name}\n")
            lines.append(f"{schema.description if schema.description else 'No Description'}\n")
            for col in schema.columns:
                flags = []
                if not col.nullable:
                    flags.append("non-null")
                if not col.required:
                    flags.append("optional")
                flag_str = f" ({', '.join(flags)})" if flags else ""
                desc_str = f": {col.description}" if col.description else ""
                lines.append(f"- **{col.title}** `{col.type}`{flag_str}{desc_str}")
            lines.append("")
        return "\n".join(lines)

    def save_md(self, file_path: str) -> str:
        """Writes the markdown report to file_path and returns the path."""
        with open(file_path, "w", encoding="utf-8") as f:
            f.write(self.to_md())
        return file_path


def create_report_for_schema(schema_name: str) -> ExportReport:
    schemas: list[type[NHDFModel]] = exportables_by_schema_name(schema_name)
    return ExportReport(
        version_code=normalize_schema_string(schema_name),
        schemas=[ExportableSchema.from_meta_model(s) for s in schemas],
    )


def exportables_by_schema_name(schema_name: str) -> list[type[NHDFModel]]:
    normalized_schema_name: str = normalize_schema_string(schema_name)
    exportables: list[type[NHDFModel]] = []
    for module_suffix in SCHEMA_MODULE_NAMES:
        module_name = f"nashclean.schema.{normalized_schema_name}.{module_suffix}"
        try:
            module = importlib.import_module(module_name)
        except ModuleNotFoundError as e:
            raise ModuleNotFoundError(f"Schema {normalized_schema_name} not found in module {module_name}") from e
        exportables.extend(get_exportables_from_module(module))
    return exportables


def get_exportables_from_module(module: ModuleType) -> list[type[NHDFModel]]:
    """
    Get the things we can export from the models in the module.

    They need to be subclasses of NHDFModel defined in the module itself.
    """
    members: list[tuple[str, Any]] = inspect.getmembers(module, inspect.isclass)
    exportables = [
        cls
        for _, cls in members
        if issubclass(cls, NHDFModel) and cls is not NHDFModel and cls.__module__ == module.__name__
    ]
    return exportables
