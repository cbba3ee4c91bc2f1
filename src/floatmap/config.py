"""Runtime settings for decoding, loadable from YAML.

Example ``floatmap.yaml``::

    num_workers: 4
    channel_selector: "R,G"
    log_level: DEBUG
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field

from floatmap.parallel import TaskPool
from floatmap.utils.io import StrPath

__all__ = ["LoaderConfig", "load_config"]


class LoaderConfig(BaseModel):
    """Decoder settings shared by the CLI and library callers."""

    model_config = ConfigDict(extra="forbid")

    num_workers: int | None = Field(
        None,
        ge=1,
        description="Worker threads used to decode rows; defaults to the CPU count",
    )
    channel_selector: str = Field(
        "",
        description="Fuzzy, comma-separated channel selector; empty keeps every channel",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "INFO",
        description="Level used by the command-line logger",
    )

    def make_pool(self) -> TaskPool:
        return TaskPool(self.num_workers)


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, Mapping):
        raise TypeError(f"Expected mapping in {path}, found {type(data)}")
    return dict(data)


def load_config(path: StrPath, overrides: Mapping[str, Any] | None = None) -> LoaderConfig:
    """Load a :class:`LoaderConfig` from YAML, applying non-``None`` overrides."""

    raw = _load_yaml(Path(path))
    if overrides:
        raw.update({key: value for key, value in overrides.items() if value is not None})
    return LoaderConfig.model_validate(raw)
