"""
Physical note and coin denominations.

Denominations are only an input/display aid: a user may count out the
notes and coins they paid with, and the breakdown is kept on the
transaction. They never constrain the transaction amount.
"""

from decimal import Decimal
from enum import Enum
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field

from expense_manager.models.transaction import quantize_amount


class DenominationKind(str, Enum):
    """Whether a unit is printed or minted."""
    NOTE = "note"
    COIN = "coin"


class Denomination(BaseModel):
    """One entry of the reference table."""
    model_config = ConfigDict(frozen=True)

    value: Decimal = Field(..., gt=0)
    kind: DenominationKind

    @property
    def label(self) -> str:
        return denomination_label(self.value)


DENOMINATIONS: tuple[Denomination, ...] = tuple(
    Denomination(value=Decimal(value), kind=kind)
    for value, kind in [
        ("20", DenominationKind.NOTE),
        ("10", DenominationKind.NOTE),
        ("5", DenominationKind.NOTE),
        ("1", DenominationKind.NOTE),
        ("0.5", DenominationKind.NOTE),
        ("0.1", DenominationKind.COIN),
        ("0.05", DenominationKind.COIN),
        ("0.02", DenominationKind.COIN),
        ("0.01", DenominationKind.COIN),
        ("0.005", DenominationKind.COIN),
    ]
)

NOTES = tuple(d for d in DENOMINATIONS if d.kind is DenominationKind.NOTE)
COINS = tuple(d for d in DENOMINATIONS if d.kind is DenominationKind.COIN)


def denomination_label(
    value: Decimal,
    currency_code: str = "KWD",
    sub_unit_name: str = "Fils",
    sub_unit_scale: int = 1000,
) -> str:
    """
    Label a unit value for display.

    Values of one base unit or more are shown in the base currency
    ("20 KWD"); smaller values in sub-units ("500 Fils").
    """
    value = Decimal(value)
    if value >= 1:
        return f"{_plain(value)} {currency_code}"
    return f"{_plain(value * sub_unit_scale)} {sub_unit_name}"


def _plain(value: Decimal) -> str:
    # Decimal("20.0") -> "20", Decimal("0.50") -> "0.5"
    return format(value.normalize(), "f")


def amount_from_denominations(counts: Mapping[Decimal, int]) -> Decimal:
    """Total value of a breakdown, rounded to three fractional digits."""
    total = sum(
        (Decimal(value) * count for value, count in counts.items()),
        Decimal("0"),
    )
    return quantize_amount(total)


def has_denominations(counts: Mapping[Decimal, int]) -> bool:
    """True when the breakdown records at least one unit."""
    return any(count > 0 for count in counts.values())
