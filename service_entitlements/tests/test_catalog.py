"""
Unit tests for bundle catalog loading and publication.
"""

import os

import pytest

from service_entitlements.app.bundles.catalog import (
    BundleCatalogStore,
    build_catalog,
    load_catalog,
    parse_catalog,
)
from service_entitlements.app.bundles.models import BundleCatalog, SkuAttributes
from shared.errors import ConfigLoadError, ConfigParseError


DATA_DIR = os.path.join(os.path.dirname(__file__), "data")
TEST_BUNDLE = os.path.join(DATA_DIR, "test_bundle.yml")
ERR_BUNDLE = os.path.join(DATA_DIR, "err_bundle.yml")


class TestLoadCatalog:
    """Test cases for load_catalog and parse_catalog."""

    def test_load_test_bundles(self):
        catalog = load_catalog(TEST_BUNDLE)

        assert len(catalog) == 5
        assert catalog.names() == ("TestBundle1", "TestBundle2", "TestBundle3", "TestBundle4", "TestBundle5")

        bundle2 = catalog.get("TestBundle2")
        assert bundle2.requires_valid_account_number is False
        assert dict(bundle2.sku_attributes) == {
            "MCT1122": SkuAttributes(is_trial=True),
            "SVC3344": SkuAttributes(is_trial=False),
        }
        assert catalog.get("TestBundle4").requires_valid_account_number is True
        assert dict(catalog.get("TestBundle4").sku_attributes) == {}

    def test_sku_filter_is_sorted_union(self):
        catalog = load_catalog(TEST_BUNDLE)

        assert catalog.sku_filter() == "MCT1122,MCT3691,SVC3124,SVC3344"

    def test_missing_file(self):
        with pytest.raises(ConfigLoadError) as exc_info:
            load_catalog("no_such_file")

        assert exc_info.value.code == "CONFIG_LOAD_ERROR"
        assert exc_info.value.details["path"] == "no_such_file"

    def test_undecodable_bytes_are_a_parse_error(self, tmp_path):
        path = tmp_path / "bad_encoding.yml"
        path.write_bytes(b"- name: Bundle\xff\n  skus: {}\n")

        with pytest.raises(ConfigParseError) as exc_info:
            load_catalog(str(path))

        assert exc_info.value.code == "CONFIG_PARSE_ERROR"
        assert exc_info.value.details["path"] == str(path)

    def test_directory_is_unreadable(self):
        with pytest.raises(ConfigLoadError):
            load_catalog(DATA_DIR)

    def test_yaml_syntax_error(self):
        with pytest.raises(ConfigParseError) as exc_info:
            load_catalog(ERR_BUNDLE)

        assert exc_info.value.code == "CONFIG_PARSE_ERROR"

    def test_unknown_keys_are_rejected(self):
        with pytest.raises(ConfigParseError) as exc_info:
            load_catalog(os.path.join(DATA_DIR, "unknown_key_bundle.yml"))

        assert exc_info.value.details["index"] == 0

    def test_duplicate_names_are_rejected(self):
        with pytest.raises(ConfigParseError) as exc_info:
            load_catalog(os.path.join(DATA_DIR, "duplicate_bundle.yml"))

        assert exc_info.value.details["name"] == "TestBundle1"

    def test_top_level_must_be_a_list(self):
        with pytest.raises(ConfigParseError):
            parse_catalog("name: TestBundle1\nskus: {}\n")

    def test_empty_document_is_an_empty_catalog(self):
        assert len(parse_catalog("")) == 0

    @pytest.mark.parametrize("entry", [
        {"use_valid_acc_num": True},
        {"name": ""},
        {"name": 12},
        {"name": "b", "use_valid_acc_num": "yes"},
        {"name": "b", "skus": ["SVC3124"]},
        {"name": "b", "skus": None},
        {"name": "b", "skus": {"SVC3124": {"is_trial": "no"}}},
        {"name": "b", "skus": {"SVC3124": {"trial": True}}},
        "TestBundle1",
    ])
    def test_malformed_entries(self, entry):
        with pytest.raises(ConfigParseError):
            build_catalog([entry])

    def test_defaults_for_omitted_fields(self):
        catalog = build_catalog([{"name": "b", "skus": {"SVC3124": {}}}])

        definition = catalog.get("b")
        assert definition.requires_valid_account_number is False
        assert definition.sku_attributes["SVC3124"].is_trial is False

    def test_shipped_bundle_configuration_loads(self):
        path = os.path.join(os.path.dirname(__file__), "..", "..", "bundles", "bundles.yml")

        catalog = load_catalog(path)

        assert len(catalog) > 0

    def test_catalog_is_read_only(self):
        catalog = load_catalog(TEST_BUNDLE)

        with pytest.raises(TypeError):
            catalog.get("TestBundle1").sku_attributes["NEW"] = SkuAttributes()


class TestBundleCatalogStore:
    """Test cases for BundleCatalogStore."""

    @pytest.fixture
    def store(self):
        return BundleCatalogStore(TEST_BUNDLE)

    def test_empty_until_loaded(self, store):
        assert store.is_ready is False
        assert len(store.current()) == 0

    def test_reload_publishes(self, store):
        catalog = store.reload()

        assert store.is_ready is True
        assert store.current() is catalog
        assert len(catalog) == 5

    def test_missing_file_leaves_store_empty(self):
        store = BundleCatalogStore("no_such_file")

        with pytest.raises(ConfigLoadError):
            store.reload()

        assert store.is_ready is False
        assert len(store.current()) == 0

    def test_parse_error_leaves_store_empty(self):
        store = BundleCatalogStore(ERR_BUNDLE)

        with pytest.raises(ConfigParseError):
            store.reload()

        assert len(store.current()) == 0

    def test_failed_reload_keeps_previous_snapshot(self, store):
        previous = store.reload()

        with pytest.raises(ConfigParseError):
            store.reload(ERR_BUNDLE)

        assert store.current() is previous
        assert store.path == TEST_BUNDLE

    def test_reload_swaps_whole_catalog(self, store):
        snapshot = store.reload()
        replacement = BundleCatalog()

        store.publish(replacement)

        assert store.current() is replacement
        assert len(snapshot) == 5

    def test_publish_none_is_rejected(self, store):
        with pytest.raises(TypeError):
            store.publish(None)

    def test_reload_without_path(self):
        with pytest.raises(ConfigLoadError):
            BundleCatalogStore().reload()
