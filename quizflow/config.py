"""
Configuration for quizflow.

Settings live in a JSON file whose path is passed explicitly or taken from
the ``QUIZFLOW_CONFIG`` environment variable. Missing or unreadable files
fall back to defaults; unknown keys are ignored.

Example config.json:

    {"spacing_x": 300, "strict_clickable_types": true}
"""

import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "QUIZFLOW_CONFIG"
STRICT_CLICKABLE_ENV_VAR = "QUIZFLOW_STRICT_CLICKABLE"


@dataclass(frozen=True)
class FlowConfig:
    # New nodes are laid out left to right: x = base_x + page_index * spacing_x
    base_x: float = 100
    base_y: float = 100
    spacing_x: float = 250
    # Node box size on the canvas, used for pointer hit testing.
    node_width: float = 288
    node_height: float = 100
    # When set, image_clicked/button_clicked also check the trigger's element type.
    strict_clickable_types: bool = False


DEFAULT_CONFIG = FlowConfig()


def _env_flag(name: str) -> Optional[bool]:
    raw = os.environ.get(name)
    if raw is None:
        return None
    return raw.strip().lower() in ("1", "true", "yes", "on")


def load_config(path: Optional[Union[str, Path]] = None) -> FlowConfig:
    """Load configuration from a JSON file, applying environment overrides."""
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR)

    values = {}
    if path:
        config_path = Path(path)
        if config_path.exists():
            try:
                with open(config_path, 'r', encoding='utf-8') as f:
                    values = json.load(f)
            except (json.JSONDecodeError, IOError) as e:
                logger.warning(f"Ignoring unreadable config file {config_path}: {e}")
                values = {}
        else:
            logger.warning(f"Config file {config_path} not found, using defaults")

    known = {f.name for f in fields(FlowConfig)}
    kwargs = {k: v for k, v in values.items() if k in known} if isinstance(values, dict) else {}

    strict = _env_flag(STRICT_CLICKABLE_ENV_VAR)
    if strict is not None:
        kwargs["strict_clickable_types"] = strict

    return FlowConfig(**kwargs)
