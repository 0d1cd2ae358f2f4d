"""Settings loader.

Loads tally and aggregation defaults from defaults.toml. The packaged file
is used unless a path is passed explicitly or GOVTALLY_CONFIG points at
another file.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path

from pydantic import ValidationError

from govtally.schemas.settings import TallySettings

logger = logging.getLogger(__name__)

# Default config directory relative to the govtally package
_CONFIG_DIR = Path(__file__).parent / "config"

CONFIG_ENV = "GOVTALLY_CONFIG"


def default_config_path() -> Path:
    """Return the config path in effect: $GOVTALLY_CONFIG or the packaged file."""
    override = os.environ.get(CONFIG_ENV, "")
    if override:
        return Path(override).expanduser()
    return _CONFIG_DIR / "defaults.toml"


def load_settings(config_path: Path | None = None) -> TallySettings:
    """Load tally settings from a TOML file.

    Args:
        config_path: Path to a TOML file with a [tally] section.
            Defaults to default_config_path().

    Returns:
        TallySettings with values from the file.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ValueError: If the [tally] section is missing or invalid.
    """
    path = config_path or default_config_path()
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")

    with open(path, "rb") as f:
        raw = tomllib.load(f)

    section = raw.get("tally")
    if not section or not isinstance(section, dict):
        raise ValueError(f"No [tally] section found in {path}")

    try:
        settings = TallySettings(**section)
    except ValidationError as e:
        raise ValueError(f"Invalid [tally] section in {path}: {e}") from e

    logger.debug("Loaded settings from %s: %s", path, settings)
    return settings
