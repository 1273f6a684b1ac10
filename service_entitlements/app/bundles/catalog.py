"""
Bundle catalog loading and publication.
"""

from typing import Any, List, Optional, Union

import yaml
from pydantic import ValidationError as PydanticValidationError

from shared.errors import ConfigLoadError, ConfigParseError
from shared.logging import get_logger
from .models import BundleCatalog, BundleDocument, EMPTY_CATALOG


logger = get_logger("entitlements.catalog")


def _read_source(path: str) -> bytes:
    try:
        with open(path, "rb") as fh:
            return fh.read()
    except OSError as e:
        raise ConfigLoadError(
            f"Unable to read bundle configuration from {path}",
            details={"path": path, "error": str(e)}
        ) from e


def parse_catalog(document: Union[str, bytes], source: str = "<string>") -> BundleCatalog:
    """Parse a YAML bundle document into a catalog.

    The document is a list of ``{name, use_valid_acc_num, skus}`` entries.
    Raises ``ConfigParseError`` for anything that is not exactly that shape.
    """
    try:
        raw = yaml.safe_load(document)
    except yaml.YAMLError as e:
        raise ConfigParseError(
            f"Bundle configuration {source} is not valid YAML",
            details={"path": source, "error": str(e)}
        ) from e

    if raw is None:
        raw = []
    if not isinstance(raw, list):
        raise ConfigParseError(
            f"Bundle configuration {source} must be a list of bundles",
            details={"path": source, "type": type(raw).__name__}
        )

    return build_catalog(raw, source)


def build_catalog(entries: List[Any], source: str = "<memory>") -> BundleCatalog:
    """Validate raw bundle entries and build an immutable catalog."""
    definitions = []
    seen = set()
    for index, entry in enumerate(entries):
        try:
            document = BundleDocument.model_validate(entry)
        except PydanticValidationError as e:
            raise ConfigParseError(
                f"Bundle #{index} in {source} is malformed",
                details={
                    "path": source,
                    "index": index,
                    "errors": [
                        {"loc": list(err["loc"]), "msg": err["msg"]}
                        for err in e.errors()
                    ],
                }
            ) from e

        if document.name in seen:
            raise ConfigParseError(
                f"Duplicate bundle name '{document.name}' in {source}",
                details={"path": source, "index": index, "name": document.name}
            )
        seen.add(document.name)

        definition = document.to_definition()
        if definition.is_open:
            logger.warning(
                "Bundle has no SKUs and no account requirement; granted to every identity",
                bundle=definition.name,
                path=source
            )
        definitions.append(definition)

    return BundleCatalog(tuple(definitions))


def load_catalog(path: str) -> BundleCatalog:
    """Read and parse the bundle configuration at ``path``."""
    return parse_catalog(_read_source(path), source=path)


class BundleCatalogStore:
    """Owns the published bundle catalog.

    Readers call ``current()`` once per request and keep the snapshot.
    Writers build a complete catalog first and then replace the reference,
    so a reader never sees a half-built catalog.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = path
        self._catalog: BundleCatalog = EMPTY_CATALOG
        self._ready = False

    @property
    def is_ready(self) -> bool:
        return self._ready

    def current(self) -> BundleCatalog:
        return self._catalog

    def publish(self, catalog: BundleCatalog) -> BundleCatalog:
        """Replace the published catalog wholesale."""
        if catalog is None:
            raise TypeError("catalog must not be None")
        self._catalog = catalog
        self._ready = True
        logger.info("Bundle catalog published", bundles=len(catalog))
        return catalog

    def reload(self, path: Optional[str] = None) -> BundleCatalog:
        """Load from ``path`` (or the configured path) and publish.

        On failure the previously published catalog stays in place and the
        error propagates.
        """
        source = path or self.path
        if not source:
            raise ConfigLoadError("No bundle configuration path configured")

        try:
            catalog = load_catalog(source)
        except (ConfigLoadError, ConfigParseError) as e:
            logger.error("Bundle catalog load failed", path=source, code=e.code, error=e.message)
            raise

        self.path = source
        return self.publish(catalog)
