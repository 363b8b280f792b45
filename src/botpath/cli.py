from __future__ import annotations

import math
import pathlib
import traceback
from dataclasses import dataclass, replace
from typing import Callable

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from watchfiles import Change, watch

from botpath._config import OutputSettings, SplineSettings, TubeSettings, get_user_settings
from botpath.io.bundle import bundle_to_zip, next_available_path, write_bundle
from botpath.io.pathlog import format_log, parse_log
from botpath.io.spline_save import load_spline
from botpath.io.stl import write_stl
from botpath.mesh import analyze_mesh
from botpath.modeling._color import Color
from botpath.modeling.spline import sample_spline
from botpath.pipeline import ModelBuild, generate_from_spline, generate_model
from botpath.validation import BotpathError

console = Console()
app = typer.Typer(help="Generate tube models from recorded paths and authored splines.")


@dataclass(frozen=True)
class BuildOptions:
    tube: TubeSettings
    output: OutputSettings
    color: Color
    gradient_end: Color | None
    output_dir: pathlib.Path
    zip_path: pathlib.Path | None
    stl_path: pathlib.Path | None
    overwrite: bool


def _parse_color_option(value: str | None) -> Color | None:
    if value is None:
        return None
    try:
        return Color.from_hex(value)
    except BotpathError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _format_exception(exc: BaseException) -> str:
    return "".join(traceback.format_exception(exc))


def _resolve_options(
    color: str | None,
    gradient: str | None,
    name: str | None,
    prisms: int | None,
    radius: float | None,
    sides: int | None,
    tolerance: float | None,
    output_dir: pathlib.Path,
    base: str | None,
    zip_path: pathlib.Path | None,
    stl_path: pathlib.Path | None,
    overwrite: bool,
) -> tuple[BuildOptions, SplineSettings]:
    settings = get_user_settings()
    tube = replace(
        settings.tube,
        radius=settings.tube.radius if radius is None else radius,
        sides=settings.tube.sides if sides is None else sides,
        prisms_per_chunk=settings.tube.prisms_per_chunk if prisms is None else prisms,
        prune_tolerance_deg=settings.tube.prune_tolerance_deg if tolerance is None else tolerance,
    )
    output = replace(
        settings.output,
        model_name=settings.output.model_name if name is None else name,
        base_name=settings.output.base_name if base is None else base,
    )
    base_color = _parse_color_option(color) or _parse_color_option(output.color)
    options = BuildOptions(
        tube=tube,
        output=output,
        color=base_color,
        gradient_end=_parse_color_option(gradient),
        output_dir=output_dir,
        zip_path=zip_path,
        stl_path=stl_path,
        overwrite=overwrite,
    )
    return options, settings.spline


def _report(build: ModelBuild, written: list[pathlib.Path]) -> None:
    for issue in build.issues:
        console.print(f"[yellow]{issue.message} ({issue.code})[/yellow]")
    if not build.chunks:
        console.print("[yellow]No model was produced.[/yellow]")
        return

    table = Table(title="Written files", show_header=True, header_style="bold")
    table.add_column("File")
    table.add_column("Bytes", justify="right")
    for path in written:
        table.add_row(str(path), str(path.stat().st_size))
    console.print(table)

    summary = (
        f"{build.points.shape[0]} vertices after pruning, "
        f"{build.n_triangles} triangles in {len(build.chunks)} model(s), "
        f"{len(build.materials)} material(s)."
    )
    console.print(Panel(summary, title="Build complete", border_style="green"))
    for problem in analyze_mesh(build.mesh()).issues():
        console.print(f"[yellow]Mesh check: {problem}[/yellow]")


def _write_outputs(build: ModelBuild, options: BuildOptions) -> list[pathlib.Path]:
    if not build.chunks:
        return []
    written: list[pathlib.Path] = []
    if options.zip_path is not None:
        target = options.zip_path
        if target.exists() and not options.overwrite:
            target = next_available_path(target)
            console.print(f"[yellow]{options.zip_path} exists; writing to {target} instead.[/yellow]")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(bundle_to_zip(build))
        written.append(target)
    else:
        written.extend(write_bundle(build, options.output_dir, overwrite=options.overwrite))

    if options.stl_path is not None:
        options.stl_path.parent.mkdir(parents=True, exist_ok=True)
        write_stl(build.triangles(), options.stl_path)
        written.append(options.stl_path)
    return written


def _run_build(produce: Callable[[], ModelBuild], options: BuildOptions) -> ModelBuild:
    try:
        build = produce()
    except BotpathError as exc:
        raise typer.BadParameter(str(exc)) from exc
    written = _write_outputs(build, options)
    _report(build, written)
    return build


def _build_from_log(log: pathlib.Path, options: BuildOptions) -> ModelBuild:
    points = parse_log(log.read_text())
    console.print(f"Read [green]{points.shape[0]}[/green] positions from [green]{log}[/green]")
    return generate_model(
        points,
        tube=options.tube,
        output=options.output,
        color=options.color,
        gradient_end=options.gradient_end,
    )


def _watch_log(log: pathlib.Path, options: BuildOptions) -> None:
    resolved = log.resolve()
    console.print("[cyan]Watching for changes. Save the log to rebuild, Ctrl+C to stop.[/cyan]")
    try:
        for changes in watch(str(resolved.parent), debounce=300):
            if not any(_is_target(path, resolved) and change != Change.deleted for change, path in changes):
                continue
            console.rule("Rebuilding")
            try:
                _run_build(lambda: _build_from_log(log, options), options)
            except (typer.BadParameter, OSError) as exc:
                console.print(Panel.fit(_format_exception(exc), title="Rebuild failed", style="red"))
    except KeyboardInterrupt:
        console.print("[cyan]Stopped watching.[/cyan]")


def _is_target(changed: str, target: pathlib.Path) -> bool:
    return pathlib.Path(changed).resolve() == target


def _tolerance_callback(value: float | None) -> float | None:
    if value is not None and (not math.isfinite(value) or value < 0 or value >= 180):
        raise typer.BadParameter("Tolerance must be in [0, 180) degrees.")
    return value


def _radius_callback(value: float | None) -> float | None:
    if value is not None and (not math.isfinite(value) or value <= 0):
        raise typer.BadParameter("Radius must be positive.")
    return value


@app.command()
def build(
    log: pathlib.Path = typer.Argument(..., help="Console log containing setpos/setang lines."),
    color: str | None = typer.Option(None, "--color", "-c", help="Tube colour as #RRGGBB."),
    gradient: str | None = typer.Option(None, "--gradient", "-g", help="Blend to this #RRGGBB along the path."),
    name: str | None = typer.Option(None, "--name", "-n", help="Name of the model after compilation."),
    prisms: int | None = typer.Option(None, "--prisms", "-p", min=1, help="Connecting prisms per model."),
    radius: float | None = typer.Option(None, "--radius", "-r", callback=_radius_callback, help="Radius of the tube."),
    sides: int | None = typer.Option(None, "--sides", "-s", min=2, help="Number of sides of the tube."),
    tolerance: float | None = typer.Option(
        None, "--tolerance", "-t", callback=_tolerance_callback, help="Pruning angle tolerance in degrees."
    ),
    output_dir: pathlib.Path = typer.Option(pathlib.Path("."), "--output-dir", "-o", help="Directory for output files."),
    base: str | None = typer.Option(None, "--base", help="Base file name of the generated model sources."),
    zip_path: pathlib.Path | None = typer.Option(None, "--zip", help="Pack all outputs into this zip file instead."),
    stl: pathlib.Path | None = typer.Option(None, "--stl", help="Also write the whole tube as a binary STL."),
    overwrite: bool = typer.Option(False, "--overwrite", help="Replace existing output files."),
    watch_log: bool = typer.Option(False, "--watch/--no-watch", help="Rebuild whenever the log changes."),
) -> None:
    """
    Build model sources and materials from a recorded path log.
    """

    if not log.is_file():
        raise typer.BadParameter(f"Input log {log} does not exist.")

    options, _ = _resolve_options(
        color, gradient, name, prisms, radius, sides, tolerance, output_dir, base, zip_path, stl, overwrite
    )
    console.rule("botpath build")
    _run_build(lambda: _build_from_log(log, options), options)
    if watch_log:
        _watch_log(log, options)


@app.command()
def spline(
    save: pathlib.Path = typer.Argument(..., help="Spline save file (x y z heading pitch length [#color])."),
    samples: int | None = typer.Option(None, "--samples", min=1, help="Samples per spline segment."),
    log_out: pathlib.Path | None = typer.Option(None, "--log", help="Also export the sampled path as a setpos log."),
    color: str | None = typer.Option(None, "--color", "-c", help="Tube colour as #RRGGBB."),
    gradient: str | None = typer.Option(None, "--gradient", "-g", help="Blend to this #RRGGBB along the path."),
    name: str | None = typer.Option(None, "--name", "-n", help="Name of the model after compilation."),
    prisms: int | None = typer.Option(None, "--prisms", "-p", min=1, help="Connecting prisms per model."),
    radius: float | None = typer.Option(None, "--radius", "-r", callback=_radius_callback, help="Radius of the tube."),
    sides: int | None = typer.Option(None, "--sides", "-s", min=2, help="Number of sides of the tube."),
    tolerance: float | None = typer.Option(
        None, "--tolerance", "-t", callback=_tolerance_callback, help="Pruning angle tolerance in degrees."
    ),
    output_dir: pathlib.Path = typer.Option(pathlib.Path("."), "--output-dir", "-o", help="Directory for output files."),
    base: str | None = typer.Option(None, "--base", help="Base file name of the generated model sources."),
    zip_path: pathlib.Path | None = typer.Option(None, "--zip", help="Pack all outputs into this zip file instead."),
    stl: pathlib.Path | None = typer.Option(None, "--stl", help="Also write the whole tube as a binary STL."),
    overwrite: bool = typer.Option(False, "--overwrite", help="Replace existing output files."),
) -> None:
    """
    Sample an authored spline and build it into model sources.
    """

    if not save.is_file():
        raise typer.BadParameter(f"Spline save {save} does not exist.")

    options, spline_settings = _resolve_options(
        color, gradient, name, prisms, radius, sides, tolerance, output_dir, base, zip_path, stl, overwrite
    )
    if samples is not None:
        spline_settings = replace(spline_settings, samples_per_segment=samples)

    try:
        control_points = load_spline(save.read_text())
    except BotpathError as exc:
        raise typer.BadParameter(str(exc)) from exc
    console.rule("botpath spline")
    console.print(f"Loaded [green]{len(control_points)}[/green] control points from [green]{save}[/green]")

    if log_out is not None:
        log_out.parent.mkdir(parents=True, exist_ok=True)
        log_out.write_text(format_log(sample_spline(control_points, spline_settings)))
        console.print(f"Wrote sampled path to [green]{log_out}[/green]")

    _run_build(
        lambda: generate_from_spline(
            control_points,
            tube=options.tube,
            spline=spline_settings,
            output=options.output,
            color=options.color,
            gradient_end=options.gradient_end,
        ),
        options,
    )


__all__ = ["app"]
