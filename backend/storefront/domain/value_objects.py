"""
Value Objects

Immutable, self-validating primitives used by entities and aggregates.
An invalid value object cannot be constructed: any rule violation raises
a domain ValidationError and no instance is produced.

Author: TM3
Date: 2025-10-21
"""
from decimal import Decimal
from typing import ClassVar, FrozenSet

from pydantic import EmailStr, Field, field_validator

from storefront.domain.base import ValueObject
from storefront.domain.exceptions import ValidationError


ALLOWED_CURRENCIES: FrozenSet[str] = frozenset({"USD", "EUR", "UAH", "PLN"})


class Email(ValueObject):
    """E-mail address, normalized by the e-mail validator"""

    value: EmailStr = Field(..., description="E-mail address")

    def __str__(self) -> str:
        return self.value


class Password(ValueObject):
    """
    Raw password that satisfies the strength policy

    The value never shows up in repr() or str(); only its hash is stored.
    """

    MIN_LENGTH: ClassVar[int] = 8

    value: str = Field(..., repr=False, description="Raw password")

    @field_validator("value")
    @classmethod
    def _check_strength(cls, value: str) -> str:
        if len(value) < cls.MIN_LENGTH:
            raise ValueError(f"password must be at least {cls.MIN_LENGTH} characters long")
        if not any(char.isalpha() for char in value):
            raise ValueError("password must contain at least one letter")
        if not any(char.isdigit() for char in value):
            raise ValueError("password must contain at least one digit")
        return value

    def __str__(self) -> str:
        return "********"


class Money(ValueObject):
    """
    Monetary amount in one of the supported currencies

    Arithmetic only works between matching currencies and never goes
    below zero. Every operation returns a new instance.

    Fields:
        amount: Non-negative decimal amount with at most two decimal places
        currency: Upper-cased ISO 4217 code from ALLOWED_CURRENCIES
    """

    amount: Decimal = Field(..., decimal_places=2, description="Amount (>= 0)")
    currency: str = Field("USD", description="Currency code")

    @field_validator("amount")
    @classmethod
    def _check_amount(cls, value: Decimal) -> Decimal:
        if value < 0:
            raise ValueError(f"amount cannot be negative, got {value}")
        return value

    @field_validator("currency", mode="before")
    @classmethod
    def _normalize_currency(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("currency")
    @classmethod
    def _check_currency(cls, value: str) -> str:
        if value not in ALLOWED_CURRENCIES:
            allowed = ", ".join(sorted(ALLOWED_CURRENCIES))
            raise ValueError(f"currency {value!r} is not supported (allowed: {allowed})")
        return value

    @classmethod
    def zero(cls, currency: str = "USD") -> "Money":
        return cls(amount=Decimal("0"), currency=currency)

    def add(self, other: "Money") -> "Money":
        """Return the sum of two amounts in the same currency"""
        self._ensure_same_currency(other)
        return type(self)(amount=self.amount + other.amount, currency=self.currency)

    def subtract(self, other: "Money") -> "Money":
        """
        Return the difference of two amounts in the same currency

        Raises:
            ValidationError: If currencies differ or the result would be negative
        """
        self._ensure_same_currency(other)
        result = self.amount - other.amount
        if result < 0:
            raise ValidationError(
                f"Cannot subtract {other} from {self}: result would be negative",
                code="negative_amount",
                details={"minuend": str(self.amount), "subtrahend": str(other.amount)}
            )
        return type(self)(amount=result, currency=self.currency)

    def multiply(self, factor: int) -> "Money":
        """Return the amount multiplied by a non-negative whole factor"""
        if isinstance(factor, bool) or not isinstance(factor, int):
            raise TypeError(f"Money can only be multiplied by int, got {type(factor).__name__}")
        if factor < 0:
            raise ValidationError(
                f"Cannot multiply {self} by a negative factor ({factor})",
                code="negative_amount"
            )
        return Money(amount=self.amount * factor, currency=self.currency)

    __add__ = add
    __sub__ = subtract

    def __lt__(self, other: "Money") -> bool:
        self._ensure_same_currency(other)
        return self.amount < other.amount

    def __le__(self, other: "Money") -> bool:
        self._ensure_same_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other: "Money") -> bool:
        self._ensure_same_currency(other)
        return self.amount > other.amount

    def __ge__(self, other: "Money") -> bool:
        self._ensure_same_currency(other)
        return self.amount >= other.amount

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return (self.amount, self.currency) == (other.amount, other.currency)

    def __hash__(self) -> int:
        return hash((self.amount, self.currency))

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency}"

    def _ensure_same_currency(self, other: "Money") -> None:
        if not isinstance(other, Money):
            raise TypeError(f"Expected Money, got {type(other).__name__}")
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} with {other.currency}",
                code="currency_mismatch",
                details={"left": self.currency, "right": other.currency}
            )


class Price(Money):
    """
    Catalog unit price of a product

    Prices are stored, so the amount is limited to NUMERIC(12,2). A Price
    equals a Money with the same amount and currency.
    """

    amount: Decimal = Field(..., max_digits=12, decimal_places=2, description="Unit price amount (>= 0)")

    def total_for(self, quantity: int) -> Money:
        """Price of `quantity` units"""
        return self.multiply(quantity)


class Location(ValueObject):
    """Geographic point where stock is held"""

    longitude: float = Field(..., ge=-180, le=180, description="Longitude in degrees")
    latitude: float = Field(..., ge=-90, le=90, description="Latitude in degrees")

    def __str__(self) -> str:
        return f"({self.longitude}, {self.latitude})"
