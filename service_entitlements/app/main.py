"""
Entitlements service.
"""

from typing import Any, Dict, List, Optional, Tuple

from fastapi import Depends
from fastapi.responses import JSONResponse

from shared.base_service import BaseService
from shared.errors import ConfigLoadError, ConfigParseError
from shared.retry import RetryConfig

from .bundles.catalog import BundleCatalogStore
from .bundles.dependency_errors import raise_for_lookup
from .bundles.evaluator import evaluate_entitlements
from .bundles.models import BundleCatalog, BundleResponse
from .identity import Identity, get_identity
from .subscriptions import SubscriptionLookup, SubscriptionsClient, build_ssl_context


API_PREFIX = "/api/entitlements/v1"


class EntitlementsService(BaseService):
    """Entitlements service implementation."""

    def __init__(self,
                 subscriptions: Optional[SubscriptionLookup] = None,
                 catalog_store: Optional[BundleCatalogStore] = None,
                 **config_overrides):
        super().__init__("entitlements", 3000, **config_overrides)

        self.catalog_store = catalog_store or BundleCatalogStore(self.config.bundle_info_yaml)
        if not self.catalog_store.is_ready:
            self.load_bundles()

        self.subscriptions = subscriptions or self._create_subscriptions_client()

        self._setup_entitlements_routes()

    def _create_subscriptions_client(self) -> SubscriptionsClient:
        return SubscriptionsClient(
            base_url=self.config.subs_host,
            timeout=self.config.subs_timeout_seconds,
            ssl_context=build_ssl_context(self.config.cert_path, self.config.key_path, self.config.ca_path),
            retry_config=RetryConfig(max_attempts=self.config.subs_retry_attempts),
            metrics=self.metrics,
        )

    def load_bundles(self, path: Optional[str] = None) -> BundleCatalog:
        """Load the bundle configuration and publish it.

        A failed load keeps the previously published catalog and re-raises.
        """
        try:
            catalog = self.catalog_store.reload(path)
        except (ConfigLoadError, ConfigParseError):
            self.metrics.record_catalog_load("error")
            raise

        self.metrics.record_catalog_load("ok", len(catalog))
        self.logger.info("Bundles loaded", bundles=list(catalog.names()), path=self.catalog_store.path)
        return catalog

    def _setup_entitlements_routes(self):
        """Set up entitlements-specific routes."""

        async def index(identity: Identity = Depends(get_identity)):
            """Entitlements for the calling identity, one entry per bundle."""
            catalog = self.catalog_store.current()

            result = await self.subscriptions.lookup(identity.org_id, catalog.sku_filter())
            raise_for_lookup(result, endpoint=self.config.subs_host)

            verdicts = evaluate_entitlements(identity.account_number, result.skus, catalog)
            self.metrics.record_evaluation()

            return JSONResponse(content={name: verdict.to_dict() for name, verdict in verdicts.items()})

        self.app.add_api_route("/", index, methods=["GET"])
        self.app.add_api_route(f"{API_PREFIX}/services", index, methods=["GET"])

        @self.app.get(f"{API_PREFIX}/bundles", response_model=List[BundleResponse])
        async def list_bundles():
            """Loaded bundle definitions."""
            return [BundleResponse.from_definition(bundle) for bundle in self.catalog_store.current()]

    def _check_readiness(self) -> Tuple[bool, Dict[str, Any]]:
        catalog = self.catalog_store.current()
        return self.catalog_store.is_ready, {
            "bundles_loaded": self.catalog_store.is_ready,
            "bundle_count": len(catalog),
        }


def create_app(**kwargs):
    """Create entitlements service application."""
    service = EntitlementsService(**kwargs)
    return service.app


if __name__ == "__main__":
    service = EntitlementsService()
    service.run()
