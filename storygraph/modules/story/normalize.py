from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from typing import Any

from storygraph.config import settings
from storygraph.modules.story.constants import (
    CHOICE_LABEL_KEYS,
    CHOICE_LIST_KEYS,
    CHOICE_TARGET_KEYS,
    CONSUMED_TOP_LEVEL_KEYS,
    SCENE_COLLECTION_KEYS,
    SECTION_ID_KEYS,
    SECTIONS_KEY,
    START_KEYS,
    TEXT_KEYS,
)
from storygraph.modules.story.schemas import Choice, Scene, Story

logger = logging.getLogger(__name__)

_DIGITS_RE = re.compile(r"(\d+)")


def _first_present(node: Any, keys: Iterable[str], default: Any = None) -> Any:
    if not isinstance(node, Mapping):
        return default
    for key in keys:
        value = node.get(key)
        if value is not None:
            return value
    return default


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def normalize_choice(raw: Any) -> Choice | None:
    if isinstance(raw, str):
        label = raw.strip()
        return Choice(label=label, to="") if label else None
    if not isinstance(raw, Mapping):
        return None

    label = _as_text(_first_present(raw, CHOICE_LABEL_KEYS, "")).strip()
    to = _as_text(_first_present(raw, CHOICE_TARGET_KEYS, "")).strip()
    if not label and not to:
        return None
    return Choice(label=label or settings.story_default_choice_label, to=to)


def normalize_scene(scene_id: str, node: Any) -> Scene:
    raw_choices = _first_present(node, CHOICE_LIST_KEYS, [])
    options: list[Choice] = []
    for raw_choice in (raw_choices if isinstance(raw_choices, list) else []):
        choice = normalize_choice(raw_choice)
        if choice is None:
            logger.debug("dropped empty choice in scene %s", scene_id)
            continue
        options.append(choice)

    raw_type = node.get("type") if isinstance(node, Mapping) else None
    return Scene(
        id=scene_id,
        text=_as_text(_first_present(node, TEXT_KEYS, "")),
        options=options,
        type=None if raw_type is None else _as_text(raw_type),
    )


def _scene_entries(raw: Mapping) -> Iterable[tuple[Any, Any]]:
    for key in SCENE_COLLECTION_KEYS:
        candidate = raw.get(key)
        if isinstance(candidate, Mapping):
            return list(candidate.items())

    sections = raw.get(SECTIONS_KEY)
    if isinstance(sections, list):
        return [(_first_present(section, SECTION_ID_KEYS, ""), section) for section in sections]
    return []


def normalize_story(raw: Any) -> Story | None:
    """Map an arbitrary input document onto the canonical ``Story`` shape.

    Returns ``None`` only when ``raw`` is not a mapping. Unrecognized shapes
    degrade to a story with no scenes rather than failing.
    """
    if not isinstance(raw, Mapping):
        logger.debug("cannot normalize story root of type %s", type(raw).__name__)
        return None

    scenes: dict[str, Scene] = {}
    for raw_id, node in _scene_entries(raw):
        scene_id = _as_text(raw_id).strip()
        if not scene_id:
            logger.debug("skipped scene entry with blank id")
            continue
        scenes[scene_id] = normalize_scene(scene_id, node)

    start = _as_text(_first_present(raw, START_KEYS, "")).strip() or settings.story_default_start_id
    carried = {str(key): value for key, value in raw.items() if str(key) not in CONSUMED_TOP_LEVEL_KEYS}
    return Story.model_validate({**carried, "start": start, "scenes": scenes})


def scene_sort_key(scene_id: str) -> tuple:
    parts: list[tuple[int, int, str]] = []
    for chunk in _DIGITS_RE.split(scene_id):
        if not chunk:
            continue
        if _DIGITS_RE.fullmatch(chunk):
            parts.append((0, int(chunk), ""))
        else:
            parts.append((1, 0, chunk.casefold()))
    return tuple(parts), scene_id


def list_scene_ids(story: Story | None) -> list[str]:
    """Scene ids in natural order (``S2`` before ``S10``)."""
    scenes = story.scenes if story is not None else {}
    return sorted(scenes, key=scene_sort_key)
