"""CLI entry point using Typer."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer

if TYPE_CHECKING:
    from paintforge.models.effects import EffectsConfig
    from paintforge.models.scene import Timeline

app = typer.Typer(
    name="paintforge",
    help="Deterministic procedural animation and painterly compositing engine.",
    no_args_is_help=True,
)

PRESET_KINDS = ("emotions", "gestures", "positions", "paint", "camera", "transitions", "overlays")


def _load_timeline(path: Path) -> Timeline:
    from paintforge.models.scene import Timeline, TimelineLoadError

    try:
        return Timeline.load(path)
    except TimelineLoadError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None


def _effects(preset: str | None) -> EffectsConfig | None:
    if preset is None:
        return None
    from paintforge.models.effects import EffectsConfig

    return EffectsConfig(preset=preset)


@app.command()
def frame(
    timeline_path: Annotated[Path, typer.Argument(help="Timeline JSON file")],
    frame_index: Annotated[int, typer.Option("--frame", "-f", min=0, help="Absolute frame index")],
    preset: Annotated[
        str | None,
        typer.Option("--preset", "-p", help="Paint preset when a scene sets none"),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the tree here instead of stdout"),
    ] = None,
    debug: Annotated[bool, typer.Option("--debug", help="Include the debug overlay")] = False,
) -> None:
    """Composite one frame and print its visual tree as JSON."""
    from paintforge.config import load_config
    from paintforge.pipeline.render import render_frame_at

    timeline = _load_timeline(timeline_path)
    tree = render_frame_at(
        frame_index, timeline, _effects(preset), config=load_config(), show_debug=debug or None,
    )
    payload = tree.to_json(indent=2)
    if output is None:
        typer.echo(payload)
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(payload + "\n", encoding="utf-8")
        typer.echo(f"Wrote frame {frame_index} to {output}")


@app.command()
def validate(
    timeline_path: Annotated[Path, typer.Argument(help="Timeline JSON file")],
) -> None:
    """Check a timeline against the schema and the scene interval rules."""
    import json

    import jsonschema

    from paintforge.validation import validate_timeline_json

    try:
        data = json.loads(timeline_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        typer.echo(f"Error: timeline file not found: {timeline_path}", err=True)
        raise typer.Exit(1) from None
    except json.JSONDecodeError as e:
        typer.echo(f"Error: invalid JSON: {e}", err=True)
        raise typer.Exit(1) from None

    try:
        validate_timeline_json(data)
    except jsonschema.ValidationError as e:
        typer.echo(f"Schema error: {e.message}", err=True)
        raise typer.Exit(1) from None

    timeline = _load_timeline(timeline_path)
    typer.echo(f"OK: {len(timeline.scenes)} scenes, frames 0-{timeline.end}")


@app.command()
def presets(
    kind: Annotated[
        str | None,
        typer.Argument(help=f"One of: {', '.join(PRESET_KINDS)}"),
    ] = None,
) -> None:
    """List the named presets scene authors can use."""
    from paintforge.models.enums import CameraPreset, Emotion, Gesture, OverlayType, PaintPreset, TransitionType
    from paintforge.staging.positions import preset_manifest

    listings: dict[str, list[str]] = {
        "emotions": [e.value for e in Emotion],
        "gestures": [g.value for g in Gesture],
        "positions": [f"{p['name']}: {p['description']}" for p in preset_manifest()],
        "paint": [p.value for p in PaintPreset],
        "camera": [c.value for c in CameraPreset],
        "transitions": [t.value for t in TransitionType],
        "overlays": [o.value for o in OverlayType],
    }
    if kind is not None and kind not in listings:
        typer.echo(f"Error: unknown preset kind {kind!r}; expected one of {', '.join(PRESET_KINDS)}", err=True)
        raise typer.Exit(1)

    for name in [kind] if kind else PRESET_KINDS:
        typer.echo(f"{name}:")
        for entry in listings[name]:
            typer.echo(f"  {entry}")


@app.command()
def preview(
    timeline_path: Annotated[Path, typer.Argument(help="Timeline JSON file")],
    frame_index: Annotated[int, typer.Option("--frame", "-f", min=0, help="Absolute frame index")],
    output: Annotated[Path, typer.Option("--output", "-o", help="PNG file to write")],
    preset: Annotated[
        str | None,
        typer.Option("--preset", "-p", help="Paint preset when a scene sets none"),
    ] = None,
) -> None:
    """Rasterise one frame with the effect stack to a PNG."""
    from paintforge.config import load_config
    from paintforge.pipeline.raster import preview_frame, save_preview

    timeline = _load_timeline(timeline_path)
    image = preview_frame(frame_index, timeline, _effects(preset), config=load_config())
    save_preview(image, output)
    typer.echo(f"Saved: {output}")


@app.callback(invoke_without_command=True)
def main(
    version: Annotated[
        bool, typer.Option("--version", "-V", help="Show version")
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log debug output")
    ] = False,
) -> None:
    """PaintForge - procedural animation and painterly compositing."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if version:
        from paintforge import __version__

        typer.echo(f"paintforge {__version__}")
        raise typer.Exit()
