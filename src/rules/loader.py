import os
from collections.abc import Mapping
from pathlib import Path

import yaml
from pydantic import ValidationError

from src.rules.models import RedirectSettings

SETTINGS_ENV_VAR = "REDIRECTS_SETTINGS_PATH"


def load_settings(path: Path) -> RedirectSettings:
    """
    Load and validate the redirect settings file.
    Raises FileNotFoundError if file missing.
    Raises ValueError if the YAML or the schema is invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Redirect settings not found at: {path}")

    with open(path) as f:
        content = f.read()

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in settings file: {e}") from e

    # An empty file means "all defaults"
    if data is None:
        data = {}

    # Settings may sit at the top level or under a "redirects" section
    if isinstance(data, dict) and isinstance(data.get("redirects"), dict):
        data = data["redirects"]

    try:
        return RedirectSettings.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Redirect settings validation failed:\n{e}") from e


def settings_from_env(env: Mapping[str, str] | None = None) -> RedirectSettings:
    """
    Load settings from the file named by REDIRECTS_SETTINGS_PATH.
    Falls back to defaults when the variable is unset.
    """
    environ = os.environ if env is None else env
    path = environ.get(SETTINGS_ENV_VAR)
    if not path:
        return RedirectSettings()
    return load_settings(Path(path))
