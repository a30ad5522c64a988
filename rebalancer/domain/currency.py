from __future__ import annotations

from enum import Enum


class Currency(Enum):
    """Supported currencies.

    NATIVE is the pivot of the rate table. UNKNOWN stands in for any code we
    do not recognise and is rejected wherever a conversion is attempted.
    """

    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    CHF = "CHF"
    PLN = "PLN"
    NATIVE = "NATIVE"
    UNKNOWN = "UNKNOWN"

    def __str__(self) -> str:
        return self.value

    @property
    def code(self) -> str:
        return self.value

    @property
    def is_known(self) -> bool:
        return self is not Currency.UNKNOWN

    @classmethod
    def parse(cls, code: str | Currency | None) -> Currency:
        """Map a currency code to a Currency, falling back to UNKNOWN."""

        if isinstance(code, Currency):
            return code
        if not code:
            return cls.UNKNOWN
        try:
            return cls(code.strip().upper())
        except ValueError:
            return cls.UNKNOWN
