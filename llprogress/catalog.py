import json
from pathlib import Path
from typing import Any, Iterator, List

from .errors import CatalogError
from .schema import ModuleCatalogEntry

CATALOG_FIELDS = {
    "moduleID": str,
    "moduleName": str,
    "totalCheckPoints": int,
}


def _entry_from_dict(index: int, item: Any) -> ModuleCatalogEntry:
    if not isinstance(item, dict):
        raise CatalogError(f"module #{index} must be an object")

    unknown = sorted(set(item) - set(CATALOG_FIELDS))
    if unknown:
        raise CatalogError(f"module #{index} has unknown fields: {', '.join(unknown)}")

    for name, kind in CATALOG_FIELDS.items():
        if name not in item:
            raise CatalogError(f"module #{index} is missing field: {name}")
        value = item[name]
        # bool is an int subclass; true/false is not a checkpoint count
        if not isinstance(value, kind) or isinstance(value, bool):
            raise CatalogError(f"module #{index} field '{name}' must be {kind.__name__}")

    return ModuleCatalogEntry(
        module_id=item["moduleID"],
        module_name=item["moduleName"],
        total_checkpoints=item["totalCheckPoints"],
    )


class ModuleCatalog:
    """Read-only list of known modules and their checkpoint totals."""

    def __init__(self, entries: List[ModuleCatalogEntry]):
        self._entries = tuple(entries)

    def __iter__(self) -> Iterator[ModuleCatalogEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def module_ids(self) -> List[str]:
        return [e.module_id for e in self._entries]

    @classmethod
    def from_list(cls, data: Any) -> "ModuleCatalog":
        if not isinstance(data, list):
            raise CatalogError("module catalog must be a JSON array")
        return cls([_entry_from_dict(i, item) for i, item in enumerate(data)])

    @classmethod
    def load(cls, path: Path) -> "ModuleCatalog":
        """Load and strictly validate a module catalog JSON file."""
        path = Path(path)
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise CatalogError(f"unable to open modules file: {e}") from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise CatalogError(f"unable to decode modules file {path}: {e}") from e
        return cls.from_list(data)
