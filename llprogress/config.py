"""
Learning Locker connection settings.

The YAML file carries the server address, the two request URL templates and
the xAPI version. Credentials never live in the file; they are read from
LL_API_KEY / LL_API_SECRET.

Example:

    llIP: learninglocker:8081
    userReqString: http://%s/data/xAPI/statements?agent=%%7B%%22mbox%%22%%3A%%22mailto%%3A%s%%40example.com%%22%%7D
    llPostString: http://%s/data/xAPI/statements
    llAPIVersion: 1.0.3
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

import yaml

from .env import get_credentials
from .errors import ConfigError

REQUIRED_KEYS = {
    "llIP": "address",
    "userReqString": "user_template",
    "llPostString": "mentor_template",
    "llAPIVersion": "api_version",
}
OPTIONAL_KEYS = {
    "llScheme": "scheme",
    "llTimeout": "timeout",
}
DEFAULT_SCHEME = "http"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class LockerConfig:
    address: str
    user_template: str
    mentor_template: str
    api_version: str
    api_key: str
    api_secret: str
    scheme: str = DEFAULT_SCHEME
    timeout: float = DEFAULT_TIMEOUT

    def progress_url(self, username: str) -> str:
        return self.user_template % (self.address, username)

    def mentor_url(self) -> str:
        return self.mentor_template % (self.address,)

    def cursor_url(self, more: str) -> str:
        """Absolute URL for a relative `more` cursor."""
        return f"{self.scheme}://{self.address}{more}"


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"unable to open the learning locker config file: {e}") from e
    except (yaml.YAMLError, UnicodeDecodeError) as e:
        raise ConfigError(f"unable to parse the learning locker config file: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"config file must contain a mapping: {path}")
    return data


def parse_config(data: Dict[str, Any], api_key: str, api_secret: str) -> LockerConfig:
    """Build a LockerConfig from a decoded mapping, rejecting unknown keys."""
    unknown = sorted(map(str, set(data) - set(REQUIRED_KEYS) - set(OPTIONAL_KEYS)))
    if unknown:
        raise ConfigError(f"unknown config keys: {', '.join(unknown)}")

    missing = [k for k in REQUIRED_KEYS if data.get(k) in (None, "")]
    if missing:
        raise ConfigError(f"missing config keys: {', '.join(missing)}")

    # Unquoted YAML numbers would be reformatted (1.10 -> "1.1"), so only
    # strings are accepted.
    not_strings = [k for k in REQUIRED_KEYS if not isinstance(data[k], str)]
    if data.get("llScheme") and not isinstance(data["llScheme"], str):
        not_strings.append("llScheme")
    if not_strings:
        raise ConfigError(f"config values must be strings (quote them): {', '.join(not_strings)}")

    values = {attr: data[key].strip() for key, attr in REQUIRED_KEYS.items()}
    if data.get("llScheme"):
        values["scheme"] = data["llScheme"].strip()
    if data.get("llTimeout") is not None:
        try:
            values["timeout"] = float(data["llTimeout"])
        except (TypeError, ValueError) as e:
            raise ConfigError(f"invalid llTimeout: {data['llTimeout']!r}") from e

    config = LockerConfig(api_key=api_key, api_secret=api_secret, **values)

    # Templates are printf-style; a wrong placeholder count would otherwise
    # only surface on the first request.
    try:
        config.progress_url("user")
        config.mentor_url()
    except (TypeError, ValueError) as e:
        raise ConfigError(f"invalid request URL template: {e}") from e

    return config


def load_config(path: Path) -> LockerConfig:
    """Load the YAML config file and attach credentials from the environment."""
    data = _read_yaml(Path(path))
    api_key, api_secret = get_credentials()
    return parse_config(data, api_key, api_secret)
