import pandera as pa
from nashclean.validator.df_model import NHDFModel


class NashvilleHousingRaw(NHDFModel):
    """
    Housing sale records exactly as loaded from the raw dataset. Validated before any cleaning stage runs, so a
    failure here aborts the workflow without writing anything.
    """

    UniqueID: int = pa.Field(
        nullable=False,
        unique=True,
        coerce=True,
        title="Unique ID",
        description="Unique identifier of the sale record. Orders duplicates and distinguishes self-join partners.",
    )
    ParcelID: str = pa.Field(
        nullable=True,
        title="Parcel ID",
        description="Identifier of the physical parcel, shared by every sale of the same property.",
    )
    PropertyAddress: str = pa.Field(
        nullable=True,
        title="Property Address",
        description="Composite 'street, city' property address. Missing for some records.",
    )
    SaleDate: str = pa.Field(
        nullable=True,
        title="Sale Date",
        description="Sale date exactly how it appears in the raw data, in inconsistent formats.",
    )
    SalePrice: float = pa.Field(
        nullable=True,
        coerce=True,
        title="Sale Price",
        description="Sale price, coerced to a number after currency symbols and separators are stripped.",
    )
    LegalReference: str = pa.Field(
        nullable=True,
        title="Legal Reference",
        description="Document reference of the sale transaction.",
    )
    SoldAsVacant: str = pa.Field(
        nullable=True,
        title="Sold As Vacant",
        description="Whether the property was vacant at time of sale. Spelled 'Y', 'N', 'Yes' or 'No'.",
    )
    OwnerAddress: str = pa.Field(
        nullable=True,
        title="Owner Address",
        description="Composite 'street, city, state' owner mailing address.",
    )
    TaxDistrict: str = pa.Field(
        nullable=True,
        required=False,
        title="Tax District",
        description="Tax district of the parcel. Dropped during cleaning.",
    )
