"""
Immutable value objects.

Each one validates itself on construction and compares by value. Invalid
input raises ``DomainValidationError`` directly (pydantic lets non-ValueError
exceptions raised inside validators propagate untouched).
"""

import hashlib
import hmac
import re
import secrets
import string
from decimal import Decimal
from typing import Optional
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, field_validator

from medicaledu.core.domain.exceptions import DomainValidationError, InvalidOperationError


class ValueObject(BaseModel):
    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Currency / Money
# ---------------------------------------------------------------------------

_CURRENCY_RE = re.compile(r"^[A-Z]{3}$")


class Currency(ValueObject):
    code: str

    @field_validator("code", mode="before")
    @classmethod
    def _validate_code(cls, value: object) -> str:
        if value is None or not str(value).strip():
            raise DomainValidationError("Currency code cannot be empty.")
        code = str(value).strip().upper()
        if not _CURRENCY_RE.match(code):
            raise DomainValidationError("Currency code must be a 3-letter ISO code (e.g., USD, EUR).")
        return code

    def __str__(self) -> str:
        return self.code


class Money(ValueObject):
    amount: Decimal
    currency: str = "USD"

    @field_validator("currency", mode="before")
    @classmethod
    def _validate_currency(cls, value: object) -> str:
        return Currency(code=value).code

    @field_validator("amount")
    @classmethod
    def _validate_amount(cls, value: Decimal) -> Decimal:
        if value < 0:
            raise DomainValidationError("Amount cannot be negative")
        return value

    @classmethod
    def zero(cls, currency: str = "USD") -> "Money":
        return cls(amount=Decimal("0"), currency=currency)

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    @property
    def is_positive(self) -> bool:
        return self.amount > 0

    def _ensure_same_currency(self, other: "Money") -> None:
        if self.currency != other.currency:
            raise InvalidOperationError(
                f"Cannot add money with different currencies: {self.currency} and {other.currency}"
            )

    def add(self, other: "Money") -> "Money":
        self._ensure_same_currency(other)
        return Money(amount=self.amount + other.amount, currency=self.currency)

    def subtract(self, other: "Money") -> "Money":
        self._ensure_same_currency(other)
        if other.amount > self.amount:
            raise InvalidOperationError("Resulting amount cannot be negative")
        return Money(amount=self.amount - other.amount, currency=self.currency)

    def multiply(self, factor) -> "Money":
        factor = Decimal(str(factor))
        if factor < 0:
            raise DomainValidationError("Factor cannot be negative")
        return Money(amount=(self.amount * factor).quantize(Decimal("0.01")), currency=self.currency)

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency}"


# ---------------------------------------------------------------------------
# Email / Url / PhoneNumber
# ---------------------------------------------------------------------------

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class Email(ValueObject):
    value: str

    @field_validator("value", mode="before")
    @classmethod
    def _validate_value(cls, value: object) -> str:
        if value is None or not str(value).strip():
            raise DomainValidationError("Email cannot be empty")
        email = str(value).strip().lower()
        if len(email) > 254 or not _EMAIL_RE.match(email):
            raise DomainValidationError("Invalid email format")
        return email

    def __str__(self) -> str:
        return self.value


def is_valid_email(value: Optional[str]) -> bool:
    if not value or not value.strip():
        return False
    email = value.strip()
    return len(email) <= 254 and _EMAIL_RE.match(email) is not None


URL_PATTERN = re.compile(
    r"^https?:\/\/(www\.)?[-a-zA-Z0-9@:%._\+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b([-a-zA-Z0-9()@:%_\+.~#?&//=]*)$",
    re.IGNORECASE,
)


class Url(ValueObject):
    value: str

    @field_validator("value", mode="before")
    @classmethod
    def _validate_value(cls, value: object) -> str:
        if value is None or not str(value).strip():
            raise DomainValidationError("URL cannot be empty")
        url = str(value).strip()
        if not re.match(r"^[a-zA-Z][a-zA-Z0-9+.-]*://", url):
            url = f"https://{url}"
        if not URL_PATTERN.match(url):
            raise DomainValidationError("Invalid URL format. Must be a valid HTTP/HTTPS URL")
        return url

    @property
    def scheme(self) -> str:
        return urlsplit(self.value).scheme.lower()

    @property
    def host(self) -> str:
        return urlsplit(self.value).hostname or ""

    @property
    def path(self) -> str:
        return urlsplit(self.value).path or "/"

    @property
    def query(self) -> str:
        return urlsplit(self.value).query

    @property
    def is_secure(self) -> bool:
        return self.scheme == "https"

    def __str__(self) -> str:
        return self.value


def is_valid_url(value: Optional[str]) -> bool:
    """True when ``value`` is an absolute http(s) URL (no scheme inference)."""
    return bool(value) and URL_PATTERN.match(value.strip()) is not None


_E164_RE = re.compile(r"^\+[1-9]\d{1,14}$")


class PhoneNumber(ValueObject):
    value: str

    @field_validator("value", mode="before")
    @classmethod
    def _validate_value(cls, value: object) -> str:
        if value is None or not str(value).strip():
            raise DomainValidationError("Phone number cannot be empty")
        number = re.sub(r"[\s\-().]", "", str(value))
        if number.startswith("00"):
            number = "+" + number[2:]
        if not _E164_RE.match(number):
            raise DomainValidationError("Invalid phone number format. Must be in E.164 format (e.g., +1234567890)")
        return number

    def __str__(self) -> str:
        return self.value


# ---------------------------------------------------------------------------
# Password
# ---------------------------------------------------------------------------

_PBKDF2_ITERATIONS = 100_000
_SPECIAL_CHARACTERS = set(string.punctuation)


class Password(ValueObject):
    """
    A salted PBKDF2-SHA256 password hash.

    Format: ``pbkdf2_sha256$<iterations>$<salt>$<hex digest>``.
    """

    hashed: str

    @staticmethod
    def validate_strength(plain: str) -> None:
        if not plain or len(plain) < 8:
            raise DomainValidationError("Password must be at least 8 characters long")
        if not (
            any(c.isupper() for c in plain)
            and any(c.islower() for c in plain)
            and any(c.isdigit() for c in plain)
            and any(c in _SPECIAL_CHARACTERS for c in plain)
        ):
            raise DomainValidationError(
                "Password must contain uppercase, lowercase, number, and special character"
            )

    @classmethod
    def create(cls, plain: str) -> "Password":
        cls.validate_strength(plain)
        salt = secrets.token_hex(16)
        return cls(hashed=cls._hash(plain, salt, _PBKDF2_ITERATIONS))

    @staticmethod
    def _hash(plain: str, salt: str, iterations: int) -> str:
        digest = hashlib.pbkdf2_hmac("sha256", plain.encode("utf-8"), salt.encode("utf-8"), iterations)
        return f"pbkdf2_sha256${iterations}${salt}${digest.hex()}"

    def verify(self, plain: str) -> bool:
        try:
            _, iterations, salt, _ = self.hashed.split("$", 3)
            expected = self._hash(plain, salt, int(iterations))
        except ValueError:
            return False
        return hmac.compare_digest(expected, self.hashed)

    def __str__(self) -> str:
        return "********"


# ---------------------------------------------------------------------------
# Promotional code
# ---------------------------------------------------------------------------

PROMO_CODE_PATTERN = re.compile(r"^[A-Z0-9]{4,20}$")
_PROMO_ALPHABET = string.ascii_uppercase + string.digits


class PromoCodeValue(ValueObject):
    value: str

    @field_validator("value", mode="before")
    @classmethod
    def _validate_value(cls, value: object) -> str:
        if value is None or not str(value).strip():
            raise DomainValidationError("Promotional code cannot be empty")
        code = "".join(str(value).split()).upper()
        if not PROMO_CODE_PATTERN.match(code):
            raise DomainValidationError(
                "Promotional code must be 4-20 characters long and contain only uppercase letters and numbers"
            )
        return code

    @classmethod
    def generate(cls, length: int = 8) -> "PromoCodeValue":
        if not 4 <= length <= 20:
            raise DomainValidationError("Length must be between 4 and 20")
        return cls(value="".join(secrets.choice(_PROMO_ALPHABET) for _ in range(length)))

    def __str__(self) -> str:
        return self.value

