"""
Data model for name availability checks

Status enums, per-source results and the unified per-name record.
Every result type round-trips through plain dicts so sessions can be
stored as JSON.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class AvailabilityStatus(str, Enum):
    """Three-valued availability used by the app store checks."""
    AVAILABLE = "available"
    TAKEN = "taken"
    UNKNOWN = "unknown"


class TrademarkStatus(str, Enum):
    """Registration status of a name in the trademark register."""
    AVAILABLE = "AVAILABLE"
    PENDING = "PENDING"
    REGISTERED = "REGISTERED"
    UNKNOWN = "UNKNOWN"

    @property
    def symbol(self) -> str:
        return _TRADEMARK_SYMBOLS[self]


_TRADEMARK_SYMBOLS = {
    TrademarkStatus.AVAILABLE: "✓",
    TrademarkStatus.PENDING: "⚠",
    TrademarkStatus.REGISTERED: "✗",
    TrademarkStatus.UNKNOWN: "?",
}


class ProductType(str, Enum):
    APP = "app"
    SAAS = "saas"
    WEBSITE = "website"
    PHYSICAL = "physical"
    SERVICE = "service"
    OTHER = "other"


class ToneStyle(str, Enum):
    MODERN = "modern"
    FRIENDLY = "friendly"
    PROFESSIONAL = "professional"
    PLAYFUL = "playful"
    LUXURIOUS = "luxurious"
    BOLD = "bold"


class NameStyle(str, Enum):
    REAL_WORDS = "real-words"
    INVENTED = "invented"
    COMPOUND = "compound"
    ABSTRACT = "abstract"
    ANY = "any"


class NameLength(str, Enum):
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"
    ANY = "any"


@dataclass(frozen=True)
class DomainCheckResult:
    """Availability of one fully qualified domain."""
    domain: str
    available: bool

    @property
    def tld(self) -> str:
        """TLD including the leading dot (e.g. '.com')."""
        if "." not in self.domain:
            return self.domain
        return self.domain[self.domain.rindex("."):]

    def to_dict(self) -> dict:
        return {"domain": self.domain, "available": self.available}

    @classmethod
    def from_dict(cls, data: dict) -> "DomainCheckResult":
        return cls(domain=data["domain"], available=bool(data["available"]))


@dataclass(frozen=True)
class AppStoreResult:
    """
    Outcome of an app store search.

    existing_app and store_url are only set when status is TAKEN.
    """
    status: AvailabilityStatus
    existing_app: Optional[str] = None
    store_url: Optional[str] = None

    @classmethod
    def available(cls) -> "AppStoreResult":
        return cls(status=AvailabilityStatus.AVAILABLE)

    @classmethod
    def unknown(cls) -> "AppStoreResult":
        return cls(status=AvailabilityStatus.UNKNOWN)

    @classmethod
    def taken(cls, existing_app: str, store_url: Optional[str] = None) -> "AppStoreResult":
        return cls(status=AvailabilityStatus.TAKEN, existing_app=existing_app, store_url=store_url)

    def to_dict(self) -> dict:
        result = {"status": self.status.value}
        if self.existing_app is not None:
            result["existing_app"] = self.existing_app
        if self.store_url is not None:
            result["store_url"] = self.store_url
        return result

    @classmethod
    def from_dict(cls, data: dict) -> "AppStoreResult":
        return cls(
            status=AvailabilityStatus(data["status"]),
            existing_app=data.get("existing_app"),
            store_url=data.get("store_url"),
        )


@dataclass(frozen=True)
class TrademarkResult:
    """Trademark status plus a human-readable explanation."""
    status: TrademarkStatus
    details: Optional[str] = None

    @classmethod
    def unknown(cls, details: Optional[str] = None) -> "TrademarkResult":
        return cls(status=TrademarkStatus.UNKNOWN, details=details)

    def to_dict(self) -> dict:
        result = {"status": self.status.value}
        if self.details is not None:
            result["details"] = self.details
        return result

    @classmethod
    def from_dict(cls, data: dict) -> "TrademarkResult":
        return cls(status=TrademarkStatus(data["status"]), details=data.get("details"))


@dataclass(frozen=True)
class NameCheckResult:
    """
    Unified availability record for one candidate name.

    All four sub-results are always present. A source that failed
    contributes its unknown/safe-default value instead.
    """
    name: str
    trademark: TrademarkResult
    ios_app_store: AppStoreResult
    google_play_store: AppStoreResult
    domains: tuple[DomainCheckResult, ...] = ()

    @property
    def available_domains(self) -> list[str]:
        return [d.domain for d in self.domains if d.available]

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "trademark": self.trademark.to_dict(),
            "ios_app_store": self.ios_app_store.to_dict(),
            "google_play_store": self.google_play_store.to_dict(),
            "domains": [d.to_dict() for d in self.domains],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "NameCheckResult":
        return cls(
            name=data["name"],
            trademark=TrademarkResult.from_dict(data["trademark"]),
            ios_app_store=AppStoreResult.from_dict(data["ios_app_store"]),
            google_play_store=AppStoreResult.from_dict(data["google_play_store"]),
            domains=tuple(DomainCheckResult.from_dict(d) for d in data.get("domains", [])),
        )


@dataclass(frozen=True)
class CandidateName:
    """A generated name suggestion with the model's reasoning."""
    name: str
    reasoning: Optional[str] = None

    def to_dict(self) -> dict:
        result = {"name": self.name}
        if self.reasoning:
            result["reasoning"] = self.reasoning
        return result

    @classmethod
    def from_dict(cls, data: dict) -> "CandidateName":
        return cls(name=data["name"], reasoning=data.get("reasoning"))


@dataclass
class NameBrief:
    """
    Product brief used to generate names.

    Collected interactively or built from command-line flags.
    """
    description: str
    product_type: ProductType = ProductType.OTHER
    industry: str = "technology"
    target_audience: str = "general consumers"
    tone: ToneStyle = ToneStyle.MODERN
    name_style: NameStyle = NameStyle.ANY
    name_length: NameLength = NameLength.ANY
    keywords: list[str] = field(default_factory=list)
    themes: list[str] = field(default_factory=list)
    avoid_words: list[str] = field(default_factory=list)
    competitors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "description": self.description,
            "product_type": self.product_type.value,
            "industry": self.industry,
            "target_audience": self.target_audience,
            "tone": self.tone.value,
            "name_style": self.name_style.value,
            "name_length": self.name_length.value,
            "keywords": list(self.keywords),
            "themes": list(self.themes),
            "avoid_words": list(self.avoid_words),
            "competitors": list(self.competitors),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "NameBrief":
        return cls(
            description=data["description"],
            product_type=ProductType(data.get("product_type", "other")),
            industry=data.get("industry", "technology"),
            target_audience=data.get("target_audience", "general consumers"),
            tone=ToneStyle(data.get("tone", "modern")),
            name_style=NameStyle(data.get("name_style", "any")),
            name_length=NameLength(data.get("name_length", "any")),
            keywords=list(data.get("keywords", [])),
            themes=list(data.get("themes", [])),
            avoid_words=list(data.get("avoid_words", [])),
            competitors=list(data.get("competitors", [])),
        )


def parse_list(value: str) -> list[str]:
    """Split a comma-separated string into trimmed, non-empty items."""
    return [item.strip() for item in value.split(",") if item.strip()]
