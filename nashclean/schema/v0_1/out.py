import pandas as pd
import pandera as pa
from pandera.typing import Series

from nashclean.constants.columns import NashvilleHousing as nh
from nashclean.validator.df_model import NHDFModel


class NashvilleHousingClean(NHDFModel):
    """
    Cleaned housing sale records. Derived date and address component columns replace the raw composite columns.
    """
    # ---------------------------
    # ----COLUMN NAME OBJECTS----
    # ---------------------------
    _DEDUP_KEY = [
        nh.PARCEL_ID,
        nh.PROPERTY_ADDRESS,
        nh.SALE_PRICE,
        nh.SALE_DATE_CONVERTED,
        nh.LEGAL_REFERENCE,
    ]
    _DEPRECATED = [
        nh.OWNER_ADDRESS,
        nh.TAX_DISTRICT,
        nh.PROPERTY_ADDRESS,
        nh.SALE_DATE,
    ]

    @classmethod
    def dedup_key(cls) -> list[str]:
        return cls._DEDUP_KEY

    @classmethod
    def deprecated(cls) -> list[str]:
        return cls._DEPRECATED

    # --------------------
    # ----MODEL FIELDS----
    # --------------------
    UniqueID: int = pa.Field(
        nullable=False,
        unique=True,
        title="Unique ID",
        description="Unique identifier of the sale record. The lowest ID of each duplicate group survives.",
    )
    ParcelID: str = pa.Field(
        nullable=True,
        title="Parcel ID",
        description="Identifier of the physical parcel.",
    )
    SalePrice: float = pa.Field(
        nullable=True,
        title="Sale Price",
        description="Numeric sale price.",
    )
    LegalReference: str = pa.Field(
        nullable=True,
        title="Legal Reference",
        description="Document reference of the sale transaction.",
    )
    SoldAsVacant: str = pa.Field(
        nullable=True,
        notin=["Y", "N"],
        title="Sold As Vacant",
        description="'Yes' or 'No'. Values that were never 'Y' or 'N' are kept as they were.",
    )
    SaleDateConverted: Series[pa.DateTime] = pa.Field(
        nullable=True,
        title="Sale Date (Converted)",
        description="Sale date as a calendar date. Null where the raw date was missing or malformed.",
    )
    PropertySplitAddress: str = pa.Field(
        nullable=True,
        title="Property Street Address",
        description="Street component of the property address (text before the first comma).",
    )
    PropertySplitCity: str = pa.Field(
        nullable=True,
        title="Property City",
        description="City component of the property address (text after the first comma).",
    )
    OwnerSplitAddress: str = pa.Field(
        nullable=True,
        title="Owner Street Address",
        description="Street component of the owner address (text before the first comma).",
    )
    OwnerSplitCity: str = pa.Field(
        nullable=True,
        title="Owner City",
        description="City component of the owner address (text between the first and last comma).",
    )
    OwnerSplitState: str = pa.Field(
        nullable=True,
        title="Owner State",
        description="State component of the owner address (text after the last comma).",
    )

    @pa.dataframe_check
    def deprecated_columns_dropped(cls, df: pd.DataFrame) -> bool:
        return not any(col in df.columns for col in cls._DEPRECATED)
