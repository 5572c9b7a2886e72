"""Value types for Twenty composite fields."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional, Tuple

MICROS_PER_UNIT = 1_000_000

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CHF": "CHF ",
    "CAD": "C$",
    "AUD": "A$",
    "CNY": "¥",
    "INR": "₹",
}


def amount_to_micros(amount: float) -> int:
    """Convert an amount to micros, rounding half away from zero."""
    micros = Decimal(str(amount)) * MICROS_PER_UNIT
    return int(micros.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _empty_wire_values(data: Dict[str, Any], keys: Tuple[str, ...]) -> Dict[str, Any]:
    """Keys of ``data`` among ``keys`` that arrived as None, "" or []."""
    return {key: data[key] for key in keys if key in data and data[key] in (None, "", [])}


def _restore_empty(data: Dict[str, Any], empty: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in empty.items():
        data.setdefault(key, list(value) if isinstance(value, list) else value)
    return data


@dataclass
class Currency:
    amount_micros: int
    currency_code: str = "USD"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Currency":
        return cls(
            amount_micros=int(data.get("amountMicros") or 0),
            currency_code=data.get("currencyCode") or "USD",
        )

    @classmethod
    def from_amount(cls, amount: float, currency_code: str = "USD") -> "Currency":
        return cls(amount_micros=amount_to_micros(amount), currency_code=currency_code)

    def to_dict(self) -> Dict[str, Any]:
        return {"amountMicros": self.amount_micros, "currencyCode": self.currency_code}

    @property
    def amount(self) -> float:
        return self.amount_micros / MICROS_PER_UNIT

    @amount.setter
    def amount(self, value: float) -> None:
        self.amount_micros = amount_to_micros(value)

    @property
    def symbol(self) -> str:
        return CURRENCY_SYMBOLS.get(self.currency_code, "")

    def formatted(self, decimals: int = 2) -> str:
        return f"{self.symbol}{self.amount:,.{decimals}f} {self.currency_code}"

    def __str__(self) -> str:
        return self.formatted()


@dataclass
class Address:
    street1: Optional[str] = None
    street2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    post_code: Optional[str] = None
    country: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    wire_empty: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    WIRE_KEYS = (
        "addressStreet1",
        "addressStreet2",
        "addressCity",
        "addressState",
        "addressPostcode",
        "addressCountry",
        "addressLat",
        "addressLng",
    )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Address":
        # The API spells it addressPostcode; accept the camelCase variant too.
        post_code = data.get("addressPostcode")
        if post_code is None:
            post_code = data.get("addressPostCode")
        lat = data.get("addressLat")
        lng = data.get("addressLng")
        return cls(
            street1=data.get("addressStreet1"),
            street2=data.get("addressStreet2"),
            city=data.get("addressCity"),
            state=data.get("addressState"),
            post_code=post_code,
            country=data.get("addressCountry"),
            lat=float(lat) if lat is not None else None,
            lng=float(lng) if lng is not None else None,
            wire_empty=_empty_wire_values(data, cls.WIRE_KEYS),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "addressStreet1": self.street1,
            "addressStreet2": self.street2,
            "addressCity": self.city,
            "addressState": self.state,
            "addressPostcode": self.post_code,
            "addressCountry": self.country,
            "addressLat": self.lat,
            "addressLng": self.lng,
        }
        present = {key: value for key, value in data.items() if value is not None}
        return _restore_empty(present, self.wire_empty)

    def formatted(self) -> str:
        parts = [self.street1, self.street2, self.city, self.state, self.post_code, self.country]
        return ", ".join(part for part in parts if part)

    def is_empty(self) -> bool:
        return not any([self.street1, self.street2, self.city, self.state, self.post_code, self.country])

    def __str__(self) -> str:
        return self.formatted()


@dataclass
class FullName:
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FullName":
        return cls(first_name=data.get("firstName"), last_name=data.get("lastName"))

    def to_dict(self) -> Dict[str, Any]:
        return {"firstName": self.first_name, "lastName": self.last_name}

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    def is_empty(self) -> bool:
        return not self.first_name and not self.last_name

    def __str__(self) -> str:
        return self.full_name


@dataclass
class Email:
    email: str
    is_primary: bool = False

    def __str__(self) -> str:
        return self.email


@dataclass
class EmailCollection:
    primary_email: Optional[str] = None
    additional_emails: List[str] = field(default_factory=list)
    wire_empty: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    WIRE_KEYS = ("primaryEmail", "additionalEmails")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EmailCollection":
        additional = data.get("additionalEmails")
        if not isinstance(additional, list):
            additional = []
        return cls(
            primary_email=data.get("primaryEmail"),
            additional_emails=[email for email in additional if email],
            wire_empty=_empty_wire_values(data, cls.WIRE_KEYS),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.primary_email:
            data["primaryEmail"] = self.primary_email
        if self.additional_emails:
            data["additionalEmails"] = list(self.additional_emails)
        return _restore_empty(data, self.wire_empty)

    def all_emails(self) -> List[str]:
        emails = [self.primary_email] if self.primary_email else []
        return emails + list(self.additional_emails)

    def all(self) -> List[Email]:
        emails = [Email(self.primary_email, True)] if self.primary_email else []
        return emails + [Email(email) for email in self.additional_emails]

    def has_email(self, email: str) -> bool:
        return email == self.primary_email or email in self.additional_emails

    def add_additional_email(self, email: str) -> None:
        if email not in self.additional_emails:
            self.additional_emails.append(email)

    def remove_email(self, email: str) -> None:
        if self.primary_email == email:
            self.primary_email = None
        self.additional_emails = [e for e in self.additional_emails if e != email]

    def is_empty(self) -> bool:
        return not self.primary_email and not self.additional_emails

    def __len__(self) -> int:
        return len(self.all_emails())


@dataclass
class Phone:
    number: Optional[str] = None
    country_code: Optional[str] = None
    calling_code: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Phone":
        return cls(
            number=data.get("number"),
            country_code=data.get("countryCode"),
            calling_code=data.get("callingCode"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "number": self.number,
            "countryCode": self.country_code,
            "callingCode": self.calling_code,
        }
        return {key: value for key, value in data.items() if value is not None}

    def formatted(self) -> Optional[str]:
        if self.number is None:
            return None
        return f"{self.calling_code or ''}{self.number}"


@dataclass
class PhoneCollection:
    primary_phone: Optional[Phone] = None
    additional_phones: List[Phone] = field(default_factory=list)
    wire_empty: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    WIRE_KEYS = ("primaryPhoneNumber", "primaryPhoneCountryCode", "primaryPhoneCallingCode", "additionalPhones")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PhoneCollection":
        primary = None
        if any(
            data.get(key) is not None
            for key in ("primaryPhoneNumber", "primaryPhoneCountryCode", "primaryPhoneCallingCode")
        ):
            primary = Phone(
                number=data.get("primaryPhoneNumber"),
                country_code=data.get("primaryPhoneCountryCode"),
                calling_code=data.get("primaryPhoneCallingCode"),
            )

        additional: List[Phone] = []
        raw_additional = data.get("additionalPhones")
        if isinstance(raw_additional, list):
            for entry in raw_additional:
                if isinstance(entry, dict):
                    additional.append(Phone.from_dict(entry))
                elif isinstance(entry, str):
                    additional.append(Phone(number=entry))
        return cls(
            primary_phone=primary,
            additional_phones=additional,
            wire_empty=_empty_wire_values(data, cls.WIRE_KEYS),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.primary_phone is not None:
            if self.primary_phone.number is not None:
                data["primaryPhoneNumber"] = self.primary_phone.number
            if self.primary_phone.country_code is not None:
                data["primaryPhoneCountryCode"] = self.primary_phone.country_code
            if self.primary_phone.calling_code is not None:
                data["primaryPhoneCallingCode"] = self.primary_phone.calling_code
        if self.additional_phones:
            data["additionalPhones"] = [phone.to_dict() for phone in self.additional_phones]
        return _restore_empty(data, self.wire_empty)

    @property
    def primary_number(self) -> Optional[str]:
        if self.primary_phone is not None:
            return self.primary_phone.number
        if self.additional_phones:
            return self.additional_phones[0].number
        return None

    def all_phones(self) -> List[Phone]:
        phones = [self.primary_phone] if self.primary_phone is not None else []
        return phones + list(self.additional_phones)

    def is_empty(self) -> bool:
        return self.primary_phone is None and not self.additional_phones


@dataclass
class Link:
    url: Optional[str] = None
    label: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Link":
        return cls(url=data.get("url"), label=data.get("label"))

    def to_dict(self) -> Dict[str, Any]:
        data = {"url": self.url, "label": self.label}
        return {key: value for key, value in data.items() if value is not None}


@dataclass
class LinkCollection:
    primary_link: Optional[Link] = None
    secondary_links: List[Link] = field(default_factory=list)
    wire_empty: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    WIRE_KEYS = ("primaryLinkUrl", "primaryLinkLabel", "secondaryLinks")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LinkCollection":
        primary = None
        if data.get("primaryLinkUrl") is not None or data.get("primaryLinkLabel") is not None:
            primary = Link(url=data.get("primaryLinkUrl"), label=data.get("primaryLinkLabel"))

        secondary = data.get("secondaryLinks")
        if not isinstance(secondary, list):
            secondary = []
        return cls(
            primary_link=primary,
            secondary_links=[Link.from_dict(entry) for entry in secondary if isinstance(entry, dict)],
            wire_empty=_empty_wire_values(data, cls.WIRE_KEYS),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.primary_link is not None:
            if self.primary_link.url is not None:
                data["primaryLinkUrl"] = self.primary_link.url
            if self.primary_link.label is not None:
                data["primaryLinkLabel"] = self.primary_link.label
        if self.secondary_links:
            data["secondaryLinks"] = [link.to_dict() for link in self.secondary_links]
        return _restore_empty(data, self.wire_empty)

    def all_links(self) -> List[Link]:
        links = [self.primary_link] if self.primary_link is not None else []
        return links + list(self.secondary_links)

    def is_empty(self) -> bool:
        return self.primary_link is None and not self.secondary_links
