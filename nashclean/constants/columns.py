class NashvilleHousing:
    # raw data columns
    UNIQUE_ID: str = "UniqueID"
    PARCEL_ID: str = "ParcelID"
    LAND_USE: str = "LandUse"
    PROPERTY_ADDRESS: str = "PropertyAddress"
    SALE_DATE: str = "SaleDate"
    SALE_PRICE: str = "SalePrice"
    LEGAL_REFERENCE: str = "LegalReference"
    SOLD_AS_VACANT: str = "SoldAsVacant"
    OWNER_NAME: str = "OwnerName"
    OWNER_ADDRESS: str = "OwnerAddress"
    TAX_DISTRICT: str = "TaxDistrict"

    # derived columns
    SALE_DATE_CONVERTED: str = "SaleDateConverted"
    PROPERTY_SPLIT_ADDRESS: str = "PropertySplitAddress"
    PROPERTY_SPLIT_CITY: str = "PropertySplitCity"
    OWNER_SPLIT_ADDRESS: str = "OwnerSplitAddress"
    OWNER_SPLIT_CITY: str = "OwnerSplitCity"
    OWNER_SPLIT_STATE: str = "OwnerSplitState"


class SummaryStats:
    STAT: str = "Stat"
    COUNT: str = "Count"
