"""Typer-based CLI entry point."""

from __future__ import annotations

import functools
import logging
from pathlib import Path
from typing import Optional

import typer
from PIL import Image
from rich import print
from rich.table import Table

from .application.session_controller import CropSessionController
from .config import CROP_PRESETS, DPI_CHOICES, PAPER_PRESETS
from .core.scheduler import ManualScheduler
from .core.session import FilterName, new_session
from .core.transform import FitMode
from .errors import PrintCropError
from .settings import export_options_from_settings, session_from_settings
from .utils.jsonio import read_json

app = typer.Typer(help="Crop photos to exact print sizes on a paper canvas")

_LOGGER = logging.getLogger(__name__)


def _handle_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except PrintCropError as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1) from exc

    return wrapper


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _fail(message: str) -> None:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(1)


@app.command()
@_handle_errors
def render(
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="Image to crop"),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Output file or directory; defaults to the settings export directory"
    ),
    settings: Optional[Path] = typer.Option(
        None, "--settings", exists=True, dir_okay=False, help="settings.json with session defaults"
    ),
    paper: Optional[str] = typer.Option(None, "--paper", help="Paper preset: 4x6 or a4"),
    paper_width: Optional[float] = typer.Option(None, "--paper-width", help="Paper width in inches"),
    paper_height: Optional[float] = typer.Option(None, "--paper-height", help="Paper height in inches"),
    dpi: Optional[float] = typer.Option(None, "--dpi", help="Print resolution"),
    viewport_height: Optional[float] = typer.Option(
        None, "--viewport-height", help="Screen height used for the display scale"
    ),
    crop_width: Optional[str] = typer.Option(None, "--crop-width", help="Crop width, e.g. 35mm or 1.13"),
    crop_height: Optional[str] = typer.Option(None, "--crop-height", help="Crop height, e.g. 45mm or 1.37"),
    fit: FitMode = typer.Option(FitMode.FIT, "--fit", case_sensitive=False),
    zoom: Optional[float] = typer.Option(None, "--zoom", help="Absolute scale around the canvas centre"),
    pan_x: float = typer.Option(0.0, "--pan-x", help="Horizontal pan in canvas pixels"),
    pan_y: float = typer.Option(0.0, "--pan-y", help="Vertical pan in canvas pixels"),
    clarity: float = typer.Option(0.0, "--clarity", min=-100, max=100),
    brightness: float = typer.Option(0.0, "--brightness", min=-100, max=100),
    contrast: float = typer.Option(0.0, "--contrast", min=-100, max=100),
    preview: bool = typer.Option(False, "--preview", help="Also write the annotated canvas"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Render SOURCE onto the paper canvas and export the crop region."""

    _configure_logging(verbose)

    data = read_json(settings) if settings else None
    state = session_from_settings(data) if settings else new_session()
    export_format, export_directory = export_options_from_settings(data)
    if output is None:
        if export_directory is None:
            _fail("No --output given and the settings name no export directory")
        output = export_directory
        output.mkdir(parents=True, exist_ok=True)

    scheduler = ManualScheduler()
    controller = CropSessionController(state, scheduler=scheduler)
    try:
        if viewport_height is not None:
            controller.set_viewport_height(viewport_height)
        if dpi is not None:
            controller.set_dpi(dpi)
        if paper is not None:
            if paper.lower() not in PAPER_PRESETS:
                _fail(f"Unknown paper preset {paper!r}")
            controller.set_paper_preset(paper.lower())
        if paper_width is not None or paper_height is not None:
            current = controller.state.paper
            controller.set_paper_size(
                paper_width if paper_width is not None else current.width_in,
                paper_height if paper_height is not None else current.height_in,
            )
        if crop_width is not None or crop_height is not None:
            if crop_width is None or crop_height is None:
                _fail("--crop-width and --crop-height must be given together")
            before = controller.state.crop
            if controller.apply_crop_input(crop_width, crop_height).crop is before:
                _fail(f"Invalid crop size {crop_width!r} x {crop_height!r}")
        controller.set_fit_mode(fit)

        if not controller.load_path(source):
            _fail(f"Could not decode {source}")

        if zoom is not None:
            controller.set_zoom(zoom)
        if pan_x or pan_y:
            controller.pan(pan_x, pan_y)

        controller.set_filter(FilterName.BRIGHTNESS, brightness)
        controller.set_filter(FilterName.CONTRAST, contrast)
        controller.set_clarity(clarity)
        scheduler.run_until_idle()

        crop = controller.export_crop()
        if crop is None:
            _fail("Nothing to export: the crop region is empty")

        if output.is_dir():
            destination = crop.save(output, export_format)
        else:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_bytes(crop.encode(output.suffix.lstrip(".") or export_format))
            destination = output
        print(f"[green]Saved {crop.width}x{crop.height} crop to {destination}")

        if preview:
            preview_path = destination.with_name(f"{destination.stem}_preview.png")
            Image.fromarray(controller.render_preview()).save(preview_path)
            print(f"[green]Saved preview to {preview_path}")
    finally:
        controller.shutdown()


@app.command()
def presets() -> None:
    """List the built-in paper, DPI and crop presets."""

    table = Table(title="Paper")
    table.add_column("Name")
    table.add_column("Size (in)")
    for name, (width, height) in PAPER_PRESETS.items():
        table.add_row(name, f"{width} x {height}")
    print(table)

    print(f"DPI choices: {', '.join(str(value) for value in DPI_CHOICES)}")

    crops = Table(title="Crop sizes")
    crops.add_column("Width")
    crops.add_column("Height")
    for width, height in CROP_PRESETS:
        crops.add_row(width, height)
    print(crops)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    app()
