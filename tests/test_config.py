"""
Configuration accessors, the store registry and the init script.
"""

import asyncio
import importlib.util
import json
from pathlib import Path
from unittest.mock import patch

import pytest

from shopstore.core import config, registry
from shopstore.core.orders import OrderStore


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))
    registry.reset_stores()
    yield tmp_path / "data"
    registry.reset_stores()


@pytest.fixture
def init_script():
    path = Path(__file__).parent.parent / "scripts" / "init_store.py"
    spec = importlib.util.spec_from_file_location("init_store", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestConfig:

    def test_document_path(self, data_dir):
        assert config.get_document_path("orders") == data_dir / "orders.json"

    def test_debug_enabled(self, monkeypatch):
        monkeypatch.setenv("DEBUG", "true")
        assert config.debug_enabled() is True
        monkeypatch.setenv("DEBUG", "no")
        assert config.debug_enabled() is False

    def test_schema_version_override(self, monkeypatch):
        monkeypatch.setenv("SCHEMA_VERSION", "2.0")
        assert config.get_schema_version() == "2.0"

    def test_validate_config_clean(self, data_dir):
        assert config.validate_config() == []

    def test_validate_config_data_dir_is_file(self, tmp_path, monkeypatch):
        target = tmp_path / "not_a_dir"
        target.write_text("")
        monkeypatch.setenv("DATA_DIR", str(target))
        assert any("DATA_DIR" in issue for issue in config.validate_config())

    def test_validate_config_recent_limit(self, data_dir):
        with patch.object(config, "RECENT_ORDERS_LIMIT", 0):
            assert any("RECENT_ORDERS_LIMIT" in issue for issue in config.validate_config())

    def test_cors_origins(self):
        with patch.object(config, "CORS_ORIGINS", "http://a, http://b,"):
            assert config.get_cors_origins() == ["http://a", "http://b"]


class TestRegistry:

    def test_store_types(self, data_dir):
        store = registry.get_order_store()
        assert isinstance(store, OrderStore)
        assert store.path == data_dir / "orders.json"
        assert registry.get_order_store() is store

    def test_unknown_collection(self, data_dir):
        with pytest.raises(KeyError):
            registry.get_store("widgets")

    def test_initialize_all(self, data_dir):
        asyncio.run(registry.initialize_all())
        for name in config.COLLECTIONS:
            doc = json.loads((data_dir / f"{name}.json").read_text())
            assert doc == {"schemaVersion": "1.0", name: []}


class TestInitScript:

    def test_initializes_documents(self, data_dir, tmp_path, init_script, capsys):
        target = tmp_path / "fresh"
        assert init_script.main(["--data-dir", str(target)]) == 0

        assert sorted(p.name for p in target.iterdir()) == sorted(f"{n}.json" for n in config.COLLECTIONS)
        assert "orders: 0 records" in capsys.readouterr().out

    def test_check_only(self, data_dir, init_script, capsys):
        assert init_script.main(["--check"]) == 0
        assert not data_dir.exists()
        assert "Configuration OK" in capsys.readouterr().out
