"""Token amounts with denominations and optional USD prices."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

IBC_DENOM_PREFIX = "ibc"


class Denom(str):
    """A token denomination."""

    def is_ibc_token(self) -> bool:
        """Whether this denom has the ``ibc/<hash>`` form."""
        parts = self.split("/")
        return len(parts) == 2 and parts[0] == IBC_DENOM_PREFIX


@dataclass
class Amount:
    """A quantity of a token, possibly converted to its display denom."""

    value: Decimal
    denom: Denom
    base_denom: Denom
    price_usd: Decimal | None = None

    def __post_init__(self) -> None:
        self.denom = Denom(self.denom)
        self.base_denom = Denom(self.base_denom)

    @classmethod
    def from_coin(cls, amount: int, denom: str) -> Amount:
        """Build an amount from an integer coin quantity."""
        return cls(value=Decimal(int(amount)), denom=Denom(denom), base_denom=Denom(denom))

    @classmethod
    def from_string(cls, amount: str, denom: str) -> Amount:
        """Parse a decimal string; raise ValueError if it is not a finite number."""
        try:
            value = Decimal(amount)
        except InvalidOperation as error:
            raise ValueError(f"could not parse {amount!r} as a number") from error
        if not value.is_finite():
            raise ValueError(f"could not parse {amount!r} as a number")
        return cls(value=value, denom=Denom(denom), base_denom=Denom(denom))

    def convert_denom(self, display_denom: str, denom_exponent: int) -> None:
        """Divide the value by 10**exponent and switch to the display denom."""
        self.value = self.value.scaleb(-denom_exponent)
        self.base_denom = self.denom
        self.denom = Denom(display_denom)

    def add_usd_price(self, usd_price: float) -> None:
        """Set the USD value of this amount from a per-token price."""
        self.price_usd = self.value * Decimal(repr(float(usd_price)))

    def __str__(self) -> str:
        return f"{int(self.value)}{self.denom}"


def format_amounts(amounts: Iterable[Amount]) -> str:
    """Join amounts as ``<int><denom>`` separated by commas."""
    return ",".join(str(amount) for amount in amounts)