import re
from typing import Any

import numpy as np
import pandas as pd

from nashclean.constants.base import YES_NO, ADDRESS_DELIMITER, PRICE_SYMBOLS


class CleanStringBase:

    """Functions that accept a single string as an argument and return the string cleaned."""

    @classmethod
    def replace_with_nan(cls, text: str) -> str | float:
        """Returns NaN for empty or whitespace-only strings."""
        if isinstance(text, str) and not text.strip():
            return np.nan
        return text

    @classmethod
    def remove_price_symbols(cls, text: Any) -> Any:
        """
        Strips currency symbols, thousands separators and spaces from a raw price.

        Examples:
            '$120,000' -> '120000'
            ' 95000 ' -> '95000'
        """
        if isinstance(text, str):
            return re.sub(PRICE_SYMBOLS, "", text)
        return text

    @classmethod
    def none_if_empty(cls, text: str | None) -> str | None:
        """Trims the string and returns None if nothing is left."""
        if text is None:
            return None
        text = text.strip()
        return text if text else None


class CleanStringDate:

    @classmethod
    def to_date(cls, value: Any) -> pd.Timestamp:
        """
        Coerces a single raw sale date to a date (time component dropped). Null and malformed values return NaT.

        Examples:
            'April 9, 2013' -> Timestamp('2013-04-09')
            '2013-04-09 00:00:00' -> Timestamp('2013-04-09')
            'not a date' -> NaT
        """
        if pd.isnull(value):
            return pd.NaT
        try:
            ts = pd.to_datetime(value, errors="coerce")
        except (ValueError, TypeError, OverflowError):
            return pd.NaT
        if pd.isnull(ts):
            return pd.NaT
        if ts.tzinfo is not None:
            ts = ts.tz_localize(None)
        return ts.normalize()


class CleanStringAddress:

    @classmethod
    def split_property_address(cls, address: str | float) -> tuple[str | None, str | None]:
        """
        Splits a property address into street and city at the first comma. Without a comma the whole string is
        treated as the street.

        Examples:
            '1808  FOX CHASE DR, GOODLETTSVILLE' -> ('1808  FOX CHASE DR', 'GOODLETTSVILLE')
            '123 Main St' -> ('123 Main St', None)
        """
        if not isinstance(address, str):
            return None, None
        street, sep, city = address.partition(ADDRESS_DELIMITER)
        if not sep:
            return CleanStringBase.none_if_empty(street), None
        return CleanStringBase.none_if_empty(street), CleanStringBase.none_if_empty(city)

    @classmethod
    def split_owner_address(cls, address: str | float) -> tuple[str | None, str | None, str | None]:
        """
        Splits an owner address into street, city and state. Street is the text before the first comma, state the
        text after the last comma and city everything in between.

        Examples:
            '1808  FOX CHASE DR, GOODLETTSVILLE, TN' -> ('1808  FOX CHASE DR', 'GOODLETTSVILLE', 'TN')
            '12 ELM ST, TN' -> ('12 ELM ST', None, 'TN')
            '12 ELM ST' -> ('12 ELM ST', None, None)
        """
        if not isinstance(address, str):
            return None, None, None
        first = address.find(ADDRESS_DELIMITER)
        if first == -1:
            return CleanStringBase.none_if_empty(address), None, None
        last = address.rfind(ADDRESS_DELIMITER)
        street = address[:first]
        city = address[first + 1:last] if last > first else ""
        state = address[last + 1:]
        return (
            CleanStringBase.none_if_empty(street),
            CleanStringBase.none_if_empty(city),
            CleanStringBase.none_if_empty(state),
        )


class CleanStringCategorical:

    @classmethod
    def normalize_yes_no(cls, value: Any) -> Any:
        """'Y' -> 'Yes', 'N' -> 'No'. Every other value, including nulls, is returned unchanged."""
        if isinstance(value, str):
            return YES_NO.get(value, value)
        return value
