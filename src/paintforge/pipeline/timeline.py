"""Resolve which scene is active at a frame and how its characters enter it.

Everything here is a pure function of the timeline and the absolute frame,
so frames can be resolved in any order or in parallel.  Emotion carry-over
between scenes is expressed as an explicit :class:`TransitionRecord` per
character rather than tracker state.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from paintforge.models.enums import Emotion, TransitionType
from paintforge.models.expression import TransitionRecord
from paintforge.models.scene import CharacterPlacement, SceneRecord, Timeline
from paintforge.motion.expressions import TRANSITION_FRAMES, transition_progress
from paintforge.pipeline import transitions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedCharacter:
    placement: CharacterPlacement
    transition: TransitionRecord
    emotion_progress: float

    @property
    def previous_emotion(self) -> Emotion:
        return self.transition.from_emotion


@dataclass(frozen=True)
class ResolvedFrame:
    """The active scene at one frame plus everything derived from it."""

    frame: int
    index: int
    scene: SceneRecord
    previous: SceneRecord | None
    frames_into_scene: int
    emotion_progress: float
    transition_progress: float
    characters: tuple[ResolvedCharacter, ...]

    @property
    def in_transition(self) -> bool:
        """Whether the scene's entry transition is still running."""
        entry = self.scene.transition
        return (
            entry is not None
            and entry.type is not TransitionType.NONE
            and self.transition_progress < 1
        )


def find_scene_index(scenes: Sequence[SceneRecord], frame: int) -> int | None:
    """Index of the last scene whose ``[start, end)`` contains *frame*.

    Scans from the end, so a later record wins over an earlier one covering
    the same frame.  :class:`Timeline` rejects such overlaps up front.
    """
    for index in range(len(scenes) - 1, -1, -1):
        if scenes[index].contains(frame):
            return index
    return None


def find_scene_at_frame(scenes: Sequence[SceneRecord], frame: int) -> SceneRecord | None:
    index = find_scene_index(scenes, frame)
    return scenes[index] if index is not None else None


def character_transition(
    placement: CharacterPlacement,
    scene: SceneRecord,
    previous: SceneRecord | None,
) -> TransitionRecord:
    """Emotion carry-over for one character entering *scene*.

    A character also present in *previous* blends from its emotion there;
    a newcomer starts settled on its own emotion.
    """
    before = previous.character(placement.id) if previous is not None else None
    from_emotion = before.emotion if before is not None else placement.emotion
    return TransitionRecord(
        from_emotion=from_emotion, to_emotion=placement.emotion, start_frame=scene.start,
    )


def resolve_frame(
    timeline: Timeline | Sequence[SceneRecord],
    frame: int,
    *,
    expression_frames: int = TRANSITION_FRAMES,
) -> ResolvedFrame | None:
    """Resolve the active scene at *frame*, or ``None`` if no scene covers it."""
    scenes = timeline.scenes if isinstance(timeline, Timeline) else timeline
    index = find_scene_index(scenes, frame)
    if index is None:
        logger.debug("No active scene at frame %d", frame)
        return None

    scene = scenes[index]
    previous = scenes[index - 1] if index > 0 else None
    frames_into_scene = frame - scene.start

    characters = []
    for placement in scene.characters:
        record = character_transition(placement, scene, previous)
        characters.append(ResolvedCharacter(
            placement=placement,
            transition=record,
            emotion_progress=transition_progress(record, frame, expression_frames),
        ))

    entry = scene.transition
    if entry is not None and entry.type is not TransitionType.NONE:
        progress = transitions.transition_progress(frame, scene.start, entry.duration)
    else:
        progress = 1.0

    return ResolvedFrame(
        frame=frame,
        index=index,
        scene=scene,
        previous=previous,
        frames_into_scene=frames_into_scene,
        emotion_progress=min(1.0, frames_into_scene / expression_frames) if expression_frames > 0 else 1.0,
        transition_progress=progress,
        characters=tuple(characters),
    )
