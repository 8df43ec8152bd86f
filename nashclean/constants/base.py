from typing import Final

DEFAULT_DATASET: Final[str] = "nashvillehousing"
DEFAULT_LOAD_EXT: Final[str] = "csv"

# canonical spellings for the sold-as-vacant field
YES_NO: dict[str, str] = {
    "Y": "Yes",
    "N": "No",
}

ADDRESS_DELIMITER: Final[str] = ","

# symbols stripped from raw sale prices before numeric coercion ('$120,000' -> '120000')
PRICE_SYMBOLS: Final[str] = r"[\$,\s]"
