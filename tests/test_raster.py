"""Tests for the Pillow preview rasteriser."""

from PIL import Image

from paintforge.config import AppConfig, RenderSettings
from paintforge.models.effects import EffectsConfig
from paintforge.models.enums import BlendMode, CanvasPreset, ColorGradePreset, KuwaharaStrength, PaintStrength
from paintforge.models.scene import OverlayData
from paintforge.pipeline import raster
from paintforge.pipeline.effects import (
    CanvasTextureStage,
    ColorGradeStage,
    FilmGrainStage,
    KuwaharaStage,
    OilPaintStage,
    PigmentStage,
    VignetteStage,
)
from paintforge.pipeline.overlays import overlay_node
from paintforge.pipeline.raster import (
    apply_stages,
    blend,
    draw_screen,
    noise_image,
    preview_frame,
    save_preview,
    vignette,
)
from paintforge.pipeline.tree import Node

SIZE = (96, 54)


def _grey() -> Image.Image:
    return Image.new("RGB", SIZE, (128, 128, 128))


def _small_config() -> AppConfig:
    return AppConfig(render=RenderSettings(width=192, height=108))


def test_noise_is_seeded():
    a = noise_image(SIZE, 0.1, 3, seed=7)
    b = noise_image(SIZE, 0.1, 3, seed=7)
    c = noise_image(SIZE, 0.1, 3, seed=8)
    assert a.tobytes() == b.tobytes()
    assert a.tobytes() != c.tobytes()
    assert a.mode == "L"
    assert a.size == SIZE


def test_blend_zero_opacity_is_identity():
    base = _grey()
    assert blend(base, Image.new("RGB", SIZE, (255, 0, 0)), BlendMode.MULTIPLY, 0) is base


def test_blend_multiply_darkens():
    out = blend(_grey(), Image.new("RGB", SIZE, (0, 0, 0)), "multiply", 1.0)
    assert out.getpixel((10, 10)) == (0, 0, 0)


def test_vignette_darkens_corners_only():
    out = vignette(_grey(), VignetteStage(1.0))
    assert out.getpixel((48, 27)) == (128, 128, 128)
    assert sum(out.getpixel((0, 0))) < 3 * 128


def test_every_stage_runs():
    stages = [
        KuwaharaStage(KuwaharaStrength.MEDIUM),
        OilPaintStage(PaintStrength.HEAVY),
        CanvasTextureStage(CanvasPreset.BURLAP, 0.08),
        FilmGrainStage(0.05),
        PigmentStage(0.06),
        ColorGradeStage(ColorGradePreset.SEPIA, 1.0),
        VignetteStage(0.5),
    ]
    out = apply_stages(_grey(), stages, frame=12)
    assert out.size == SIZE
    assert out.mode == "RGB"
    assert out.tobytes() == apply_stages(_grey(), stages, frame=12).tobytes()


def test_preview_frame_deterministic(sample_timeline):
    config = _small_config()
    a = preview_frame(40, sample_timeline, config=config)
    b = preview_frame(40, sample_timeline, config=config)
    assert a.size == (192, 108)
    assert a.tobytes() == b.tobytes()


def test_preview_without_scene(sample_timeline):
    image = preview_frame(900, sample_timeline, EffectsConfig(preset="heavy"), config=_small_config())
    assert image.getpixel((0, 0)) == (26, 26, 26)


def test_save_preview(tmp_path, sample_timeline):
    image = preview_frame(40, sample_timeline, EffectsConfig(preset="none"), config=_small_config())
    out = save_preview(image, tmp_path / "nested" / "frame.png")
    assert out.exists()
    with Image.open(out) as loaded:
        assert loaded.size == (192, 108)


def test_subtitle_drawn_after_stages(sample_timeline, monkeypatch):
    seen = []

    def flat_green(image, stages, frame):
        seen.append(image)
        return Image.new("RGB", image.size, (0, 255, 0))

    monkeypatch.setattr(raster, "apply_stages", flat_green)
    image = preview_frame(50, sample_timeline, config=_small_config())
    # subtitle box spans the bottom of the canvas, untouched by the stages
    assert image.getpixel((96, 10)) == (0, 0, 0)
    assert image.getpixel((5, 100)) == (0, 255, 0)
    assert seen[0].getpixel((96, 10)) != (0, 0, 0)


def test_draw_screen_paints_cards():
    overlay = OverlayData(type="factBox", start_frame=0, end_frame=60, props={"text": "Fun", "position": "left"})
    tree = Node("frame", {}, (overlay_node(overlay, 30),))
    out = draw_screen(Image.new("RGB", (400, 400), (255, 255, 255)), tree)
    assert out.getpixel((62, 322)) != (255, 255, 255)
    assert out.getpixel((390, 390)) == (255, 255, 255)
