"""
Tests for module catalog loading.
"""

import json

import pytest
from llprogress.catalog import ModuleCatalog
from llprogress.errors import CatalogError
from llprogress.schema import ModuleCatalogEntry


class TestModuleCatalog:
    """Test strict catalog decoding."""

    def test_load(self, modules_file):
        catalog = ModuleCatalog.load(modules_file)
        assert list(catalog) == [
            ModuleCatalogEntry("M1", "Intro", 5),
            ModuleCatalogEntry("M2", "Variables", 8),
        ]
        assert catalog.module_ids() == ["M1", "M2"]

    def test_empty_array(self, tmp_path):
        path = tmp_path / "modules.json"
        path.write_text("[]")
        assert len(ModuleCatalog.load(path)) == 0

    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogError, match="unable to open"):
            ModuleCatalog.load(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "modules.json"
        path.write_text("[{")
        with pytest.raises(CatalogError, match="unable to decode"):
            ModuleCatalog.load(path)

    def test_not_utf8(self, tmp_path):
        path = tmp_path / "modules.json"
        path.write_bytes(b'[{"moduleID": "\xff"}]')
        with pytest.raises(CatalogError, match="unable to decode"):
            ModuleCatalog.load(path)

    def test_unknown_field_rejected(self, tmp_path):
        path = tmp_path / "modules.json"
        path.write_text(json.dumps([
            {"moduleID": "M1", "moduleName": "Intro", "totalCheckPoints": 5, "owner": "x"},
        ]))
        with pytest.raises(CatalogError, match="owner"):
            ModuleCatalog.load(path)

    def test_missing_field_rejected(self):
        with pytest.raises(CatalogError, match="totalCheckPoints"):
            ModuleCatalog.from_list([{"moduleID": "M1", "moduleName": "Intro"}])

    def test_wrong_type_rejected(self):
        with pytest.raises(CatalogError, match="totalCheckPoints"):
            ModuleCatalog.from_list([{"moduleID": "M1", "moduleName": "Intro", "totalCheckPoints": "5"}])
        with pytest.raises(CatalogError, match="totalCheckPoints"):
            ModuleCatalog.from_list([{"moduleID": "M1", "moduleName": "Intro", "totalCheckPoints": True}])

    def test_top_level_must_be_array(self):
        with pytest.raises(CatalogError, match="array"):
            ModuleCatalog.from_list({"moduleID": "M1"})

    def test_entries_must_be_objects(self):
        with pytest.raises(CatalogError, match="object"):
            ModuleCatalog.from_list(["M1"])
