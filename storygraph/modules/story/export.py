from __future__ import annotations

from typing import Any

from storygraph.config import settings
from storygraph.modules.story.constants import ENDING_TYPE_PREFIX
from storygraph.modules.story.normalize import list_scene_ids
from storygraph.modules.story.schemas import Choice, Scene, SceneOverviewItem, Story


def export_scene(scene: Scene) -> dict[str, Any]:
    out: dict[str, Any] = {
        "text": str(scene.text or ""),
        "choices": [{"label": str(choice.label or ""), "to": str(choice.to or "")} for choice in scene.options],
    }
    if scene.type is not None:
        out["type"] = scene.type
    return out


def export_story(story: Story) -> dict[str, Any]:
    """Serialize a story to the canonical interchange shape.

    Carried top-level fields (``meta`` and the like) come first, then
    ``start`` and the scenes in natural id order, each with ``choices``.
    """
    return {
        **story.carried_fields(),
        "start": story.start,
        "scenes": {scene_id: export_scene(story.scenes[scene_id]) for scene_id in list_scene_ids(story)},
    }


def is_ending_scene(scene: Scene | None) -> bool:
    if scene is None:
        return False
    return str(scene.type or "").strip().lower().startswith(ENDING_TYPE_PREFIX)


def default_active_scene(story: Story) -> str | None:
    if story.start and story.start in story.scenes:
        return story.start
    ids = list_scene_ids(story)
    return ids[0] if ids else None


def scene_overview(story: Story) -> list[SceneOverviewItem]:
    return [
        SceneOverviewItem(
            id=scene_id,
            choice_count=len(story.scenes[scene_id].options),
            is_start=scene_id == story.start,
            is_ending=is_ending_scene(story.scenes[scene_id]),
        )
        for scene_id in list_scene_ids(story)
    ]


def scene_detail(story: Story, scene_id: str) -> dict[str, Any] | None:
    scene = story.scenes.get(scene_id)
    if scene is None:
        return None

    slots = settings.story_max_visible_choices
    pills: list[Choice | None] = [
        scene.options[idx] if idx < len(scene.options) else None for idx in range(slots)
    ]
    return {
        "id": scene_id,
        "text": str(scene.text or ""),
        "is_start": scene_id == story.start,
        "is_ending": is_ending_scene(scene),
        "total_choices": len(scene.options),
        "pills": pills,
    }


def sample_story() -> dict[str, Any]:
    return {
        "meta": {"id": "sample", "title": "Sample"},
        "start": "S01",
        "scenes": {
            "S01": {
                "text": "You wake up in a silent corridor.",
                "choices": [
                    {"label": "Sneak Forward", "to": "S02"},
                    {"label": "Call Out", "to": "S03"},
                    {"label": "Wait", "to": ""},
                ],
            },
            "S02": {
                "text": "A door clicks open. Something watches.",
                "choices": [
                    {"label": "Open The Door", "to": "S04"},
                    {"label": "Back Away", "to": "S03"},
                ],
            },
            "S03": {
                "text": "Your voice echoes. The air turns cold.",
                "choices": [],
            },
            "S04": {
                "text": "You step into light.",
                "type": "ending",
                "choices": [],
            },
        },
    }
