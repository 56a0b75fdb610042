"""Tests for the frame compositor and screen overlays."""

import pytest
from pydantic import ValidationError

from paintforge.config import AppConfig, EffectSettings, RenderSettings
from paintforge.models.effects import EffectsConfig
from paintforge.models.enums import MouthShape, OverlayType, PaintPreset
from paintforge.models.scene import (
    AudioSegment,
    CameraKeyframe,
    CameraPath,
    CameraPose,
    CharacterPlacement,
    OverlayData,
    PhonemeEvent,
    SceneRecord,
    Timeline,
)
from paintforge.pipeline.effects import apply_effects
from paintforge.pipeline.overlays import debug_node, overlay_node, subtitle_node
from paintforge.pipeline.render import (
    register_background,
    register_character,
    registered_renderers,
    render_frame_at,
    scene_effects,
)
from paintforge.pipeline.timeline import resolve_frame
from paintforge.pipeline.tree import Node

NO_EFFECTS = EffectsConfig(preset="none")


def _camera(tree: Node) -> Node:
    return tree.find_all("camera")[0]


# --- overlays ---


def test_subtitle_window_and_fade():
    assert subtitle_node("", 5, 95, 50) is None
    assert subtitle_node("Hi", 5, 95, 4) is None
    assert subtitle_node("Hi", 5, 95, 96) is None
    assert subtitle_node("Hi", 5, 95, 5).props["opacity"] == 0
    middle = subtitle_node("Hi", 5, 95, 50)
    assert middle.props["opacity"] == 1
    assert middle.props["translate_y"] == 0
    assert subtitle_node("Hi", 5, 95, 91).props["opacity"] == pytest.approx(0.5)
    assert subtitle_node("Hi", 5, 95, 5).props["translate_y"] == 10


def test_debug_lines(sample_timeline):
    resolved = resolve_frame(sample_timeline, 120)
    node = debug_node(resolved, 2, {"presenter": True}, audio_segments=3)
    assert node.props["lines"] == [
        "Scene 2/2 [s2]",
        "Frame 120 | 100-200",
        "presenter: happy (talking) | student: confused",
        "Audio: 3 segments",
    ]


STAT = OverlayData(type="statCard", start_frame=20, end_frame=80, props={"value": "7.2%", "label": "Average return"})


def test_stat_card_envelope():
    assert overlay_node(STAT, 19) is None
    assert overlay_node(STAT, 81) is None
    first = overlay_node(STAT, 20)
    assert first.kind == "card"
    assert first.props["type"] == "statCard"
    assert first.props["opacity"] == 0
    assert first.props["scale"] == pytest.approx(0.8)
    assert first.props["translate_x"] == 60
    assert first.props["color"] == "#D4A012"
    # back easing overshoots past full size mid-entry
    assert overlay_node(STAT, 26).props["scale"] == pytest.approx(1.0125)
    settled = overlay_node(STAT, 32)
    assert (settled.props["opacity"], settled.props["scale"], settled.props["translate_x"]) == pytest.approx((1, 1, 0))
    assert overlay_node(STAT, 75).props["opacity"] == pytest.approx(0.5)
    assert overlay_node(STAT, 80).props["opacity"] == 0


def test_stat_card_slides_from_its_side():
    left = OverlayData(type="statCard", start_frame=0, end_frame=50, props={"position": "left"})
    center = OverlayData(type="statCard", start_frame=0, end_frame=50, props={"position": "center"})
    assert overlay_node(left, 0).props["translate_x"] == -60
    assert overlay_node(center, 0).props["translate_x"] == 0


def test_bar_chart_bars_grow_in_turn():
    chart = OverlayData(
        type="barChart", start_frame=0, end_frame=100,
        props={"title": "Returns", "bars": [{"label": "A", "value": 10}, {"label": "B", "value": 5}]},
    )
    early = overlay_node(chart, 10)
    assert early.props["position"] == "left"
    assert [bar.props["width"] for bar in early.children] == [0, 0]
    done = overlay_node(chart, 60)
    assert [bar.props["width"] for bar in done.children] == [pytest.approx(220), pytest.approx(110)]
    assert [bar.props["shown_value"] for bar in done.children] == [10, 5]
    assert done.children[1].props["color"] == "hsl(70, 70%, 55%)"
    # second bar starts five frames after the first
    staggered = overlay_node(chart, 30)
    assert staggered.children[0].props["width"] == pytest.approx(220)
    assert staggered.children[1].props["width"] < 110


def test_fact_box_and_topic_card_entry():
    fact = overlay_node(OverlayData(type="factBox", start_frame=0, end_frame=60, props={"text": "Fun"}), 0)
    assert fact.props["translate_y"] == 20
    assert fact.props["accent"] == "!"
    topic = OverlayData(type="topicCard", start_frame=0, end_frame=60, props={"topic": "Light"})
    assert overlay_node(topic, 0).props["translate_x"] == -300
    assert overlay_node(topic, 5).props["bar_width"] == 0
    assert overlay_node(topic, 20).props["bar_width"] == 360
    assert overlay_node(topic, 20).props["translate_x"] == 0


def test_unknown_card_type_draws_nothing():
    card = OverlayData(type="pieChart", start_frame=0, end_frame=10)
    assert card.type is None
    assert overlay_node(card, 5) is None


def test_card_window_must_be_ordered():
    with pytest.raises(ValidationError):
        OverlayData(type="factBox", start_frame=10, end_frame=5)


def test_overlays_load_from_camel_case():
    timeline = Timeline.model_validate({
        "scenes": [{
            "id": "a", "start": 0, "end": 10,
            "overlays": [{"type": "factBox", "startFrame": 0, "endFrame": 5, "props": {"text": "x"}}],
        }],
        "globalOverlays": [{"type": "topicCard", "startFrame": 0, "endFrame": 10}],
    })
    assert timeline.scenes[0].overlays[0].end_frame == 5
    assert timeline.global_overlays[0].type is OverlayType.TOPIC_CARD


# --- compositor ---


def test_render_is_deterministic(sample_timeline):
    for frame in (0, 57, 104, 199):
        assert render_frame_at(frame, sample_timeline).to_json() == render_frame_at(frame, sample_timeline).to_json()


def test_out_of_order_rendering(sample_timeline):
    forward = [render_frame_at(f, sample_timeline).to_json() for f in range(95, 110)]
    backward = [render_frame_at(f, sample_timeline).to_json() for f in reversed(range(95, 110))]
    assert forward == list(reversed(backward))


def test_no_active_scene(sample_timeline):
    tree = render_frame_at(500, sample_timeline)
    assert tree.kind == "frame"
    assert tree.props["scene"] is None
    assert tree.children == ()
    assert render_frame_at(0, Timeline()).props["scene"] is None


def test_placeholder_character_and_background(sample_timeline):
    tree = render_frame_at(50, sample_timeline, NO_EFFECTS)
    assert tree.props["scene"] == "s1"
    background = tree.find_all("background")[0]
    assert background.props == {"name": "classroom"}
    assert background.children[1].props["text"] == "BG: classroom"
    (character,) = tree.find_all("character")
    assert character.props["placeholder"] is True
    assert character.props["x"] == 960
    assert character.props["scale"] == 2.0
    assert character.props["pose"]["talking"] is True


def test_none_preset_matches_bare_content(sample_timeline):
    bare = render_frame_at(50, sample_timeline, NO_EFFECTS)
    painted = render_frame_at(50, sample_timeline, EffectsConfig(preset="standard"))
    assert not bare.find_all("effects")
    camera = bare.children[0]
    assert camera.kind == "camera"
    assert camera == painted.find_all("camera")[0]
    assert bare.children[1:] == painted.children[1:]
    assert apply_effects(camera, NO_EFFECTS, 50) is camera


def test_effects_default_to_configured_preset(sample_timeline):
    tree = render_frame_at(50, sample_timeline)
    (effects,) = tree.find_all("effects")
    assert effects.props["preset"] == "standard"
    assert effects.children[0].props["id"] == "s1-fx-0-oil_paint"


def test_scene_effects_precedence():
    own = SceneRecord(id="a", start=0, end=10, effects=EffectsConfig(preset="heavy"))
    bare = SceneRecord(id="b", start=0, end=10)
    assert scene_effects(own, NO_EFFECTS).preset is PaintPreset.HEAVY
    assert scene_effects(bare, NO_EFFECTS).preset is PaintPreset.NONE
    assert scene_effects(bare, None, EffectSettings(preset=PaintPreset.SUBTLE)).preset is PaintPreset.SUBTLE


def test_transition_wraps_content(sample_timeline):
    start = render_frame_at(100, sample_timeline, NO_EFFECTS)
    assert not start.find_all("camera")
    during = render_frame_at(105, sample_timeline, NO_EFFECTS)
    (transition,) = during.find_all("transition")
    assert transition.props["type"] == "crossfade"
    assert transition.children[0].kind == "camera"
    after = render_frame_at(120, sample_timeline, NO_EFFECTS)
    assert not after.find_all("transition")


def test_positions_resolve_for_characters(sample_timeline):
    tree = render_frame_at(150, sample_timeline, NO_EFFECTS)
    presenter, student = tree.find_all("character")
    assert presenter.props["x"] == pytest.approx(480)
    assert student.props["x"] == pytest.approx(1440)
    assert presenter.props["scale"] == 1.0


def test_subtitle_outside_camera(sample_timeline):
    tree = render_frame_at(50, sample_timeline, NO_EFFECTS)
    assert tree.children[-1].kind == "subtitle"
    assert not _camera(tree).find_all("subtitle")


def test_debug_overlay_toggle(sample_timeline):
    assert not render_frame_at(50, sample_timeline).find_all("debug")
    assert render_frame_at(50, sample_timeline, show_debug=True).find_all("debug")
    config = AppConfig(render=RenderSettings(show_debug=True))
    assert render_frame_at(50, sample_timeline, config=config).find_all("debug")


def test_config_canvas_size(sample_timeline):
    config = AppConfig(render=RenderSettings(width=640, height=360))
    tree = render_frame_at(10, sample_timeline, config=config)
    assert (tree.props["width"], tree.props["height"]) == (640, 360)


def test_camera_blends_between_scenes():
    timeline = Timeline(scenes=[
        SceneRecord(id="a", start=0, end=50, camera=CameraPose(x=0, zoom=1)),
        SceneRecord(id="b", start=50, end=150, camera=CameraPose(x=100, zoom=2)),
    ])
    assert _camera(render_frame_at(50, timeline, NO_EFFECTS)).props["zoom"] == 1
    assert _camera(render_frame_at(100, timeline, NO_EFFECTS)).props["zoom"] == 2


def test_camera_path_scene():
    scene = SceneRecord(
        id="a", start=0, end=100,
        camera_path=CameraPath(keyframes=[CameraKeyframe(frame=0, zoom=1.0), CameraKeyframe(frame=100, zoom=1.5)]),
    )
    camera = _camera(render_frame_at(100 - 1, Timeline(scenes=[scene]), NO_EFFECTS))
    assert camera.props["zoom"] > 1.4
    assert camera.props["matrix"][0] == camera.props["zoom"]


def test_registered_renderers_are_called(sample_timeline):
    calls = []

    def presenter(frame, config):
        calls.append((frame, config["emotion"], config["talking"]))
        return Node("artwork", {"who": "presenter"})

    register_character("presenter", presenter)
    register_background("classroom", lambda frame, config: Node("artwork", {"board": config["board_text"]}))
    assert registered_renderers() == {"characters": ["presenter"], "backgrounds": ["classroom"]}

    tree = render_frame_at(30, sample_timeline, NO_EFFECTS)
    assert calls == [(30, "neutral", True)]
    character = tree.find_all("character")[0]
    assert "placeholder" not in character.props
    assert character.children == (Node("artwork", {"who": "presenter"}),)
    background = tree.find_all("background")[0]
    assert background.children[0].props == {"board": "Photosynthesis"}


def test_audio_drives_talking(sample_scenes):
    timeline = Timeline(
        scenes=sample_scenes,
        audio_segments=[AudioSegment(
            character_id="student",
            start_frame=120,
            phonemes=[PhonemeEvent(time=0.0, phoneme="AA"), PhonemeEvent(time=0.5, phoneme="SIL")],
        )],
    )
    tree = render_frame_at(125, timeline, NO_EFFECTS)
    presenter, student = tree.find_all("character")
    assert student.props["pose"]["talking"] is True
    assert student.props["pose"]["mouth"] == int(MouthShape.WIDE)
    assert presenter.props["pose"]["talking"] is False


def test_audio_tail_keeps_mouth_closed(sample_scenes):
    timeline = Timeline(
        scenes=sample_scenes,
        audio_segments=[AudioSegment(
            character_id="student",
            start_frame=120,
            phonemes=[PhonemeEvent(time=0.0, phoneme="AA"), PhonemeEvent(time=1.0, phoneme="AA")],
        )],
    )
    # last onset at frame 150; the lip-sync tail runs to 180
    _, speaking = render_frame_at(145, timeline, NO_EFFECTS).find_all("character")
    assert speaking.props["pose"]["talking"] is True
    assert speaking.props["pose"]["mouth"] == int(MouthShape.WIDE)
    _, tail = render_frame_at(165, timeline, NO_EFFECTS).find_all("character")
    assert tail.props["pose"]["talking"] is False
    assert tail.props["pose"]["mouth"] == int(MouthShape.CLOSED)


def test_render_accepts_bare_scene_list():
    scenes = [SceneRecord(id="s1", start=0, end=100, characters=[CharacterPlacement(id="p")])]
    tree = render_frame_at(10, scenes, NO_EFFECTS)
    assert tree.props["scene"] == "s1"
    assert tree == render_frame_at(10, Timeline(scenes=scenes), NO_EFFECTS)


def test_render_rejects_overlapping_scene_list():
    scenes = [SceneRecord(id="a", start=0, end=50), SceneRecord(id="b", start=40, end=90)]
    with pytest.raises(ValidationError):
        render_frame_at(45, scenes)


def test_jitter_seed_defaults_to_character_index():
    scene = SceneRecord(id="a", start=0, end=10, characters=[
        CharacterPlacement(id="one", position="center_mid", jitter=True),
        CharacterPlacement(id="two", position="center_mid", jitter=True),
    ])
    one, two = render_frame_at(0, [scene], NO_EFFECTS).find_all("character")
    assert one.props["x"] != two.props["x"]

    seeded = scene.model_copy(update={"characters": [
        c.model_copy(update={"seed": 7}) for c in scene.characters
    ]})
    one, two = render_frame_at(0, [seeded], NO_EFFECTS).find_all("character")
    assert one.props["x"] == two.props["x"]


def test_cards_sit_between_content_and_subtitle():
    scene = SceneRecord(
        id="a", start=0, end=100, subtitle="Hi",
        overlays=[OverlayData(type="statCard", start_frame=20, end_frame=80, props={"value": "1"})],
    )
    timeline = Timeline(
        scenes=[scene],
        global_overlays=[OverlayData(type="topicCard", start_frame=0, end_frame=200, props={"topic": "Light"})],
    )
    tree = render_frame_at(50, timeline, NO_EFFECTS)
    assert [c.kind for c in tree.children] == ["camera", "card", "card", "subtitle"]
    assert [c.props["type"] for c in tree.children[1:3]] == ["statCard", "topicCard"]
    assert not _camera(tree).find_all("card")
    early = render_frame_at(10, timeline, NO_EFFECTS)
    assert [c.kind for c in early.children] == ["camera", "card", "subtitle"]
