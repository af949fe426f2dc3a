"""Packaged data files and YAML loading."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / "data"


def load_yaml(path: str | Path) -> dict[str, Any]:
    """Load a YAML mapping from *path*.

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    ValueError
        If the document is not a mapping.
    """
    path = Path(path)
    if not path.is_file():
        msg = f"Data file not found: {path}"
        raise FileNotFoundError(msg)
    with open(path, encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        msg = f"Expected a mapping at the top of {path}, got {type(data).__name__}"
        raise ValueError(msg)
    logger.debug("Loaded %s (%d top-level keys)", path, len(data))
    return data
