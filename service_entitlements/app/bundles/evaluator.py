"""
Entitlement evaluation.

Turns an organization's SKU set and the caller's account number into a
verdict for every bundle in a catalog snapshot. Everything here is pure:
no I/O, no shared state, no awaits.

A bundle can be earned two independent ways, OR-combined:

- SKU path: at least one SKU held by the organization is listed on the
  bundle.
- Account path: the bundle sets ``use_valid_acc_num`` and the caller has a
  usable account number.

A bundle with no SKUs and no account requirement has no gate at all and is
granted to everyone.

Trial status is only ever reported for SKU-earned bundles, and only when
every matched SKU is a trial SKU; one paid SKU makes the bundle non-trial.
"""

from typing import Dict, Iterable, Optional

from .models import BundleCatalog, BundleDefinition, EntitlementVerdict


# Placeholder account numbers carried by system/service identities
INVALID_ACCOUNT_NUMBERS = frozenset({"", "-1"})


def is_valid_account_number(account_number: Optional[str]) -> bool:
    return (account_number or "") not in INVALID_ACCOUNT_NUMBERS


def evaluate_bundle(bundle: BundleDefinition, skus: Iterable[str], account_valid: bool) -> EntitlementVerdict:
    """Evaluate a single bundle."""
    if bundle.is_open:
        return EntitlementVerdict(is_entitled=True, is_trial=False)

    matched = {sku for sku in skus if sku in bundle.sku_attributes}
    sku_entitled = bool(matched)
    account_entitled = bundle.requires_valid_account_number and account_valid

    is_entitled = sku_entitled or account_entitled
    is_trial = sku_entitled and all(bundle.sku_attributes[sku].is_trial for sku in matched)

    return EntitlementVerdict(is_entitled=is_entitled, is_trial=is_entitled and is_trial)


def evaluate_entitlements(account_number: Optional[str],
                          skus: Iterable[str],
                          catalog: BundleCatalog) -> Dict[str, EntitlementVerdict]:
    """Evaluate every bundle in ``catalog``; one entry per bundle."""
    if catalog is None:
        raise TypeError("catalog must not be None")

    account_valid = is_valid_account_number(account_number)
    sku_set = frozenset(skus)

    return {
        bundle.name: evaluate_bundle(bundle, sku_set, account_valid)
        for bundle in catalog
    }
