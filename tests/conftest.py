"""
Pytest configuration and shared fixtures.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pytest

from llprogress.catalog import ModuleCatalog
from llprogress.config import LockerConfig
from llprogress.logger import get_logger, reset_logger


class FakeTransport:
    """Scripted stand-in for Transport.get that records every call."""

    def __init__(self, responses: List[Tuple[int, Any]]):
        self.responses = list(responses)
        self.calls: List[Tuple[str, Dict[str, str]]] = []

    def __call__(self, url: str, headers: Dict[str, str]) -> Tuple[int, bytes]:
        self.calls.append((url, dict(headers)))
        if not self.responses:
            raise AssertionError(f"unexpected fetch: {url}")
        status, body = self.responses.pop(0)
        if isinstance(body, Exception):
            raise body
        if not isinstance(body, bytes):
            body = json.dumps(body).encode("utf-8")
        return status, body

    @property
    def urls(self) -> List[str]:
        return [url for url, _ in self.calls]


def make_statement(
    description: Optional[str] = "M1--Intro",
    name: Optional[str] = "1--5",
    mbox: str = "mailto:alice@example.com",
) -> Dict[str, Any]:
    """Build an xAPI statement; None leaves the field out entirely."""
    definition: Dict[str, Any] = {}
    if name is not None:
        definition["name"] = {"en-US": name}
    if description is not None:
        definition["description"] = {"en-US": description}
    return {
        "actor": {"mbox": mbox},
        "verb": {
            "id": "http://adlnet.gov/expapi/verbs/completed",
            "display": {"en-US": "completed"},
        },
        "object": {
            "id": "http://example.com/activities/checkpoint",
            "definition": definition,
        },
    }


def make_page(statements: List[Dict[str, Any]], more: str = "") -> Dict[str, Any]:
    return {"more": more, "statements": statements}


@pytest.fixture(autouse=True)
def quiet_logger():
    """Replace the global logger with one that writes nowhere."""
    reset_logger()
    logger = get_logger(enable_file=False, enable_console=False)
    yield logger
    reset_logger()


@pytest.fixture
def catalog() -> ModuleCatalog:
    return ModuleCatalog.from_list([
        {"moduleID": "M1", "moduleName": "Intro", "totalCheckPoints": 5},
        {"moduleID": "M2", "moduleName": "Variables", "totalCheckPoints": 8},
        {"moduleID": "M3", "moduleName": "Control Flow", "totalCheckPoints": 6},
    ])


@pytest.fixture
def locker_config() -> LockerConfig:
    return LockerConfig(
        address="lrs.example.com:8081",
        user_template="http://%s/data/xAPI/statements?agent=%s",
        mentor_template="http://%s/data/xAPI/statements",
        api_version="1.0.3",
        api_key="star",
        api_secret="wars",
    )


@pytest.fixture
def credentials(monkeypatch):
    """Set Learning Locker credentials in the environment."""
    monkeypatch.setenv("LL_API_KEY", "star")
    monkeypatch.setenv("LL_API_SECRET", "wars")


@pytest.fixture
def config_file(tmp_path) -> Path:
    """Create a valid Learning Locker config file."""
    path = tmp_path / "locker.yaml"
    path.write_text(
        "---\n"
        "llIP: lrs.example.com:8081\n"
        "userReqString: http://%s/data/xAPI/statements?agent=%%7B%%22mbox%%22%%3A%%22mailto%%3A%s%%40example.com%%22%%7D\n"
        "llPostString: http://%s/data/xAPI/statements\n"
        "llAPIVersion: 1.0.3\n"
    )
    return path


@pytest.fixture
def modules_file(tmp_path) -> Path:
    """Create a module catalog file."""
    path = tmp_path / "modules.json"
    path.write_text(json.dumps([
        {"moduleID": "M1", "moduleName": "Intro", "totalCheckPoints": 5},
        {"moduleID": "M2", "moduleName": "Variables", "totalCheckPoints": 8},
    ], indent=2))
    return path
