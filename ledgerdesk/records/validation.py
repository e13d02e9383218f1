"""Mini README: Pure validation and normalisation of submitted fields.

Structure:
    * ValidatedFields - immutable bundle of normalised values.
    * validate_fields - checks required fields, Aadhar and phone formats.
    * normalise_transaction_type / normalise_amount - individual normalisers.

Nothing here touches storage; the same inputs always produce the same
output or the same error.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional, Union

from ..errors import InvalidAmount, InvalidIdentity, InvalidPhone, MissingField
from .models import NOT_AVAILABLE

AADHAR_PATTERN = re.compile(r"^\d{4} \d{4} \d{4}$", re.ASCII)
PHONE_PATTERN = re.compile(r"^\d{10}$", re.ASCII)
_NON_DIGITS = re.compile(r"\D", re.ASCII)
_CENTS = Decimal("0.01")

KNOWN_TRANSACTION_TYPES = {
    "deposit": "Deposit",
    "withdrawal": "Withdrawal",
    "atm": "ATM",
}

AmountInput = Union[str, int, float, Decimal, None]


@dataclass(slots=True, frozen=True)
class ValidatedFields:
    """Normalised transaction fields ready to be written to a record."""

    date: str
    name: str
    transaction_type: str
    amount: float
    aadhar_number: str
    phone: str


def _blank(value: object) -> bool:
    return value is None or not str(value).strip()


def normalise_transaction_type(value: str) -> str:
    """Map known labels case-insensitively; pass anything else through."""

    return KNOWN_TRANSACTION_TYPES.get(str(value).lower(), value)


def normalise_amount(value: AmountInput) -> float:
    """Parse ``1,234.5`` style input and round half-up to two places."""

    text = str(value).replace(",", "").strip()
    try:
        parsed = Decimal(text)
        if not parsed.is_finite():
            raise InvalidAmount()
        return float(parsed.quantize(_CENTS, rounding=ROUND_HALF_UP))
    except InvalidOperation as error:
        raise InvalidAmount() from error


def normalise_aadhar(value: Optional[str]) -> str:
    text = (value or "").strip()
    if not text:
        return NOT_AVAILABLE
    if not AADHAR_PATTERN.match(text):
        raise InvalidIdentity()
    return text


def normalise_phone(value: Optional[str]) -> str:
    text = (value or "").strip()
    if not text:
        return NOT_AVAILABLE
    digits = _NON_DIGITS.sub("", text)
    if not PHONE_PATTERN.match(digits):
        raise InvalidPhone()
    return digits


def validate_fields(
    date: Optional[str],
    name: Optional[str],
    transaction_type: Optional[str],
    amount: AmountInput,
    aadhar_number: Optional[str] = None,
    phone: Optional[str] = None,
) -> ValidatedFields:
    """Validate raw form values and return their normalised form.

    Raises:
        MissingField: date, name, type or amount is absent or blank.
        InvalidIdentity: the Aadhar number is not ``dddd dddd dddd``.
        InvalidPhone: the phone does not reduce to exactly ten digits.
        InvalidAmount: the amount is not a finite number.
    """

    if any(_blank(value) for value in (date, name, transaction_type, amount)):
        raise MissingField()

    return ValidatedFields(
        date=str(date).strip(),
        name=str(name).strip(),
        transaction_type=normalise_transaction_type(str(transaction_type)),
        amount=normalise_amount(amount),
        aadhar_number=normalise_aadhar(aadhar_number),
        phone=normalise_phone(phone),
    )
