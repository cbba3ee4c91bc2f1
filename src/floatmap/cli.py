from __future__ import annotations

import logging
import os
from collections.abc import Callable
from functools import wraps
from importlib import metadata
from pathlib import Path
from typing import Any

import numpy as np
import typer
import yaml

from .config import LoaderConfig, load_config
from .io import DEFAULT_LOADERS, load_image, read_pfm_header
from .types import ImageData
from .utils.io import prepare_output
from .utils.logging import get_logger
from .version import __version__

_SUPPORTED_FORMATS = (
    "PFM Pf (1 channel, L)",
    "PFM PF (3 channels, R/G/B)",
    "PFM PF4 (4 channels, R/G/B/A)",
)
_DEBUG_ENV = "FLOATMAP_DEBUG"

app = typer.Typer(add_completion=False)
_LOG = get_logger(__name__)


def _debug_enabled() -> bool:
    return os.getenv(_DEBUG_ENV, "").lower() in {"1", "true", "yes", "on"}


def _echo_error(message: str) -> None:
    typer.echo(f"Error: {message}", err=True)


def _log_cli_exception(exc: Exception, context: str) -> None:
    if _debug_enabled():
        _LOG.exception("%s", exc)
    else:
        _LOG.error("%s failed: %s", context, exc)


def handle_cli_exceptions(func: Callable[..., Any]) -> Callable[..., Any]:
    """Provide consistent logging and user-friendly errors for CLI commands."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except (typer.BadParameter, typer.Exit, KeyboardInterrupt):
            raise
        except (
            FileNotFoundError,
            OSError,
            yaml.YAMLError,
            TypeError,
            ValueError,
        ) as exc:
            _log_cli_exception(exc, func.__name__)
            _echo_error(str(exc))
        except Exception as exc:  # pragma: no cover - handled by debug path
            if _debug_enabled():
                raise
            _LOG.exception("Unexpected error while running %s: %s", func.__name__, exc)
            _echo_error(f"Unexpected error. Re-run with {_DEBUG_ENV}=1 for a traceback.")

        raise typer.Exit(code=1)

    return wrapper


def _print_version() -> None:
    try:
        pkg_version = metadata.version("floatmap")
    except metadata.PackageNotFoundError:
        pkg_version = __version__

    typer.echo(f"floatmap version: {pkg_version}")
    typer.echo("Supported formats:")
    for fmt in _SUPPORTED_FORMATS:
        typer.echo(f"  - {fmt}")
    typer.echo(f"Loaders: {', '.join(loader.name for loader in DEFAULT_LOADERS)}")


def _resolve_config(
    config: Path | None, workers: int | None, channels: str | None
) -> LoaderConfig:
    overrides = {"num_workers": workers, "channel_selector": channels}
    if config is not None:
        cfg = load_config(config, overrides)
    else:
        cfg = LoaderConfig.model_validate({k: v for k, v in overrides.items() if v is not None})
    logging.getLogger("floatmap").setLevel(cfg.log_level)
    return cfg


def _decode(path: Path, cfg: LoaderConfig) -> ImageData:
    image, _ = load_image(path.expanduser(), cfg.channel_selector, cfg.make_pool())
    if not image.channels:
        raise ValueError(f"No channel matches selector {cfg.channel_selector!r}")
    return image


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version information and exit.",
        is_eager=True,
    ),
) -> None:
    if version:
        _print_version()
        raise typer.Exit()


@app.command("version")  # type: ignore[misc]
def version_command() -> None:
    """Print version and supported formats."""

    _print_version()


@app.command()  # type: ignore[misc]
@handle_cli_exceptions
def info(path: Path) -> None:
    """Print the header of a PFM file without decoding its payload."""

    path = path.expanduser()
    if not path.exists():
        raise FileNotFoundError(path)
    with path.open("rb") as stream:
        header = read_pfm_header(stream)

    typer.echo(f"File: {path}")
    typer.echo(f"Magic: {header.magic}")
    typer.echo(f"Size: {header.size.width}x{header.size.height}")
    typer.echo(f"Channels: {header.channel_count}")
    typer.echo(f"Byte order: {header.byte_order}-endian")
    typer.echo(f"Scale: {header.scale:g}")


@app.command()  # type: ignore[misc]
@handle_cli_exceptions
def stats(
    path: Path,
    channels: str | None = typer.Option(None, "--channels", "-c", help="Fuzzy channel selector"),
    workers: int | None = typer.Option(None, "--workers", "-j", min=1),
    config: Path | None = typer.Option(None, "--config", help="YAML loader settings"),
) -> None:
    """Decode a file and print per-channel statistics."""

    cfg = _resolve_config(config, workers, channels)
    image = _decode(path, cfg)
    size = image.channels[0].size
    typer.echo(f"{path.name}: {size.width}x{size.height}, layers={image.layers!r}")
    for channel in image.channels:
        data = channel.data
        typer.echo(
            f"  {channel.name}: min={float(data.min()):g} "
            f"max={float(data.max()):g} mean={float(data.mean(dtype=np.float64)):g}"
        )


@app.command()  # type: ignore[misc]
@handle_cli_exceptions
def export(
    path: Path,
    out: Path,
    channels: str | None = typer.Option(None, "--channels", "-c", help="Fuzzy channel selector"),
    workers: int | None = typer.Option(None, "--workers", "-j", min=1),
    config: Path | None = typer.Option(None, "--config", help="YAML loader settings"),
) -> None:
    """Decode a file and write its channels to a NumPy ``.npz`` archive."""

    if out.suffix.lower() != ".npz":
        raise typer.BadParameter("Output must be a .npz path")
    cfg = _resolve_config(config, workers, channels)
    image = _decode(path, cfg)
    destination = prepare_output(out)
    np.savez(destination, **{channel.name: channel.data for channel in image.channels})
    typer.echo(f"Wrote {len(image.channels)} channel(s) to {destination}")
