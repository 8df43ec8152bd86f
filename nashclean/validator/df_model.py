import pandera as pa


class NHDFModel(pa.DataFrameModel):

    @classmethod
    def field_names(cls) -> list[str]:
        """Returns the column names declared on the pandera model, in declaration order."""
        return list(cls.to_schema().columns.keys())

    @classmethod
    def numeric_fields(cls) -> list[str]:
        """
        Returns list of strings representing int and float column names for the dataset associated with the pandera
        model class. Used to coerce raw string columns before validation.
        """
        numeric_fields = []
        for name, column in cls.to_schema().columns.items():
            dtype = str(column.dtype).lower()
            if dtype.startswith("int") or dtype.startswith("float"):
                numeric_fields.append(name)
        return numeric_fields
