"""Copy-on-write edits for an in-memory story.

Every function returns a new ``Story`` and leaves its input untouched, so an
editor can keep the previous value around and re-run the audit after each
edit. Deleting a scene does not rewrite choices that pointed to it; the next
audit reports those as dangling links.

Choices are stored the way the normalizer would read them back: label and
target are trimmed, a blank label on a linked choice becomes the default
label, and a choice with neither is rejected.
"""

from __future__ import annotations

from typing import Any

from storygraph.config import settings
from storygraph.modules.story.schemas import Choice, Scene, Story

_UNSET: Any = object()


class StoryEditError(ValueError):
    pass


def _copy(story: Story) -> Story:
    return story.model_copy(deep=True)


def _clean_id(scene_id: Any) -> str:
    cleaned = str(scene_id or "").strip()
    if not cleaned:
        raise StoryEditError("scene id must be non-empty")
    return cleaned


def _require_scene(story: Story, scene_id: str) -> Scene:
    scene = story.scenes.get(scene_id)
    if scene is None:
        raise StoryEditError(f"unknown scene `{scene_id}`")
    return scene


def _require_index(scene: Scene, index: int) -> int:
    if not 0 <= index < len(scene.options):
        raise StoryEditError(f"scene `{scene.id}` has no choice at index {index}")
    return index


def add_scene(story: Story, scene_id: str, *, text: str = "", type: str | None = None) -> Story:
    cleaned = _clean_id(scene_id)
    if cleaned in story.scenes:
        raise StoryEditError(f"scene `{cleaned}` already exists")
    out = _copy(story)
    out.scenes[cleaned] = Scene(id=cleaned, text=str(text or ""), options=[], type=type)
    return out


def delete_scene(story: Story, scene_id: str) -> Story:
    _require_scene(story, scene_id)
    out = _copy(story)
    del out.scenes[scene_id]
    return out


def update_scene(story: Story, scene_id: str, *, text: Any = _UNSET, type: Any = _UNSET) -> Story:
    _require_scene(story, scene_id)
    out = _copy(story)
    scene = out.scenes[scene_id]
    if text is not _UNSET:
        scene.text = str(text or "")
    if type is not _UNSET:
        scene.type = None if type is None else str(type)
    return out


def _clean_choice(label: Any, to: Any) -> Choice:
    label = str(label or "").strip()
    to = str(to or "").strip()
    if not label and not to:
        raise StoryEditError("choice needs a label or a target")
    return Choice(label=label or settings.story_default_choice_label, to=to)


def add_choice(story: Story, scene_id: str, label: str, to: str = "") -> Story:
    _require_scene(story, scene_id)
    choice = _clean_choice(label, to)
    out = _copy(story)
    out.scenes[scene_id].options.append(choice)
    return out


def update_choice(
    story: Story,
    scene_id: str,
    index: int,
    *,
    label: Any = _UNSET,
    to: Any = _UNSET,
) -> Story:
    scene = _require_scene(story, scene_id)
    current = scene.options[_require_index(scene, index)]
    choice = _clean_choice(
        current.label if label is _UNSET else label,
        current.to if to is _UNSET else to,
    )
    out = _copy(story)
    out.scenes[scene_id].options[index] = choice
    return out


def delete_choice(story: Story, scene_id: str, index: int) -> Story:
    _require_index(_require_scene(story, scene_id), index)
    out = _copy(story)
    del out.scenes[scene_id].options[index]
    return out


def set_start(story: Story, scene_id: str) -> Story:
    out = _copy(story)
    out.start = str(scene_id or "").strip()
    return out


def set_meta(story: Story, **fields: Any) -> Story:
    """Merge ``fields`` into the story's ``meta`` mapping."""
    out = _copy(story)
    current = out.carried_fields().get("meta")
    meta = dict(current) if isinstance(current, dict) else {}
    meta.update(fields)
    setattr(out, "meta", meta)
    return out
