"""
Bundle catalog and entitlement data models.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr


SUBSCRIPTIONS_SERVICE_NAME = "Subscriptions Service"
SUBSCRIPTIONS_SERVICE_ENDPOINT = "https://subscription.api.redhat.com"


@dataclass(frozen=True)
class SkuAttributes:
    """Per-SKU attributes within a bundle."""
    is_trial: bool = False


@dataclass(frozen=True)
class BundleDefinition:
    """A named bundle and the rule that grants it."""
    name: str
    requires_valid_account_number: bool = False
    sku_attributes: Mapping[str, SkuAttributes] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "sku_attributes", MappingProxyType(dict(self.sku_attributes)))

    @property
    def is_open(self) -> bool:
        """No SKU gate and no account requirement."""
        return not self.sku_attributes and not self.requires_valid_account_number


class BundleCatalog:
    """Immutable, name-keyed set of bundle definitions.

    Instances are never mutated after construction; reloads build a new
    catalog and swap the reference (see ``BundleCatalogStore``).
    """

    __slots__ = ("_bundles", "_sku_filter")

    def __init__(self, bundles: Tuple[BundleDefinition, ...] = ()):
        by_name: Dict[str, BundleDefinition] = {}
        for bundle in bundles:
            if bundle.name in by_name:
                raise ValueError(f"Duplicate bundle name: {bundle.name}")
            by_name[bundle.name] = bundle
        self._bundles = MappingProxyType(by_name)
        self._sku_filter = ",".join(sorted({sku for b in by_name.values() for sku in b.sku_attributes}))

    def __iter__(self) -> Iterator[BundleDefinition]:
        return iter(self._bundles.values())

    def __len__(self) -> int:
        return len(self._bundles)

    def __contains__(self, name: object) -> bool:
        return name in self._bundles

    def get(self, name: str) -> Optional[BundleDefinition]:
        return self._bundles.get(name)

    def names(self) -> Tuple[str, ...]:
        return tuple(self._bundles)

    def sku_filter(self) -> str:
        """Comma-joined allow-list of every SKU referenced by the catalog."""
        return self._sku_filter

    def __repr__(self) -> str:
        return f"BundleCatalog(bundles={list(self._bundles)!r})"


EMPTY_CATALOG = BundleCatalog()


@dataclass(frozen=True)
class SubscriptionLookupResult:
    """Outcome of a Subscriptions Service lookup for one organization."""
    status_code: int
    skus: Tuple[str, ...] = ()
    transport_error: Optional[Exception] = None

    @property
    def succeeded(self) -> bool:
        return self.transport_error is None and self.status_code == 200


@dataclass(frozen=True)
class EntitlementVerdict:
    """Per-bundle entitlement decision."""
    is_entitled: bool
    is_trial: bool = False

    def to_dict(self) -> Dict[str, bool]:
        return {"is_entitled": self.is_entitled, "is_trial": self.is_trial}


# Config document shapes (bundles.yml)

class SkuAttributesDocument(BaseModel):
    """``skus.<SKU>`` entry in the bundle configuration."""
    model_config = ConfigDict(extra="forbid")

    is_trial: StrictBool = False


class BundleDocument(BaseModel):
    """One bundle entry in the bundle configuration."""
    model_config = ConfigDict(extra="forbid")

    name: StrictStr = Field(..., min_length=1)
    use_valid_acc_num: StrictBool = False
    skus: Dict[StrictStr, SkuAttributesDocument] = Field(default_factory=dict)

    def to_definition(self) -> BundleDefinition:
        return BundleDefinition(
            name=self.name,
            requires_valid_account_number=self.use_valid_acc_num,
            sku_attributes={sku: SkuAttributes(is_trial=attrs.is_trial) for sku, attrs in self.skus.items()},
        )


# API response models

class EntitlementsSection(BaseModel):
    """``{"is_entitled": bool, "is_trial": bool}`` for one bundle."""
    is_entitled: bool
    is_trial: bool


class DependencyErrorDetail(BaseModel):
    """Failure details for a failed call to an upstream dependency."""
    dependency_failure: bool = True
    service: str = SUBSCRIPTIONS_SERVICE_NAME
    status: int
    endpoint: str = SUBSCRIPTIONS_SERVICE_ENDPOINT
    message: str


class DependencyErrorResponse(BaseModel):
    """Error envelope returned when an upstream dependency fails."""
    error: DependencyErrorDetail


class BundleResponse(BaseModel):
    """Read-only view of a loaded bundle definition."""
    name: str
    use_valid_acc_num: bool
    skus: Dict[str, Dict[str, bool]]

    @classmethod
    def from_definition(cls, bundle: BundleDefinition) -> "BundleResponse":
        return cls(
            name=bundle.name,
            use_valid_acc_num=bundle.requires_valid_account_number,
            skus={sku: {"is_trial": attrs.is_trial} for sku, attrs in bundle.sku_attributes.items()},
        )
