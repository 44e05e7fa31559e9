import os
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

from .errors import ConfigError

API_KEY_VAR = "LL_API_KEY"
API_SECRET_VAR = "LL_API_SECRET"


def load_env(env_path: Optional[Path] = None) -> None:
    """Load .env from the working directory if present.
    Variables already set in the process environment win.
    """
    env_path = env_path or Path.cwd() / ".env"
    if not env_path.exists():
        return
    load_dotenv(dotenv_path=env_path, override=False)


def get_credentials() -> Tuple[str, str]:
    """Return (api_key, api_secret) from the environment.

    Raises ConfigError when either variable is unset or empty.
    """
    key = os.getenv(API_KEY_VAR, "")
    secret = os.getenv(API_SECRET_VAR, "")
    if not key or not secret:
        raise ConfigError(f"missing environment variable for {API_KEY_VAR} or {API_SECRET_VAR}")
    return key, secret
