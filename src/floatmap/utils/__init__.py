"""Shared utilities."""

from .io import StrPath, prepare_output
from .logging import get_logger

__all__ = ["StrPath", "get_logger", "prepare_output"]
