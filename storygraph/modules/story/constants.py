from __future__ import annotations

from typing import Final

SEVERITY_ERROR: Final = "error"
SEVERITY_WARN: Final = "warn"
SEVERITY_INFO: Final = "info"

SEVERITY_RANK = {
    SEVERITY_ERROR: 0,
    SEVERITY_WARN: 1,
    SEVERITY_INFO: 2,
}

E_MISSING_START = "E_MISSING_START"
E_NO_SCENES = "E_NO_SCENES"
E_START_NOT_FOUND = "E_START_NOT_FOUND"
E_DANGLING_TO = "E_DANGLING_TO"
W_EMPTY_TEXT = "W_EMPTY_TEXT"
W_TOO_MANY_CHOICES = "W_TOO_MANY_CHOICES"
W_EMPTY_CHOICE_LABEL = "W_EMPTY_CHOICE_LABEL"
W_DEAD_END = "W_DEAD_END"
W_UNREACHABLE_SCENE = "W_UNREACHABLE_SCENE"
I_CYCLES_DETECTED = "I_CYCLES_DETECTED"

# Ordered synonym lists, first present value wins.
SCENE_COLLECTION_KEYS = ("scenes", "nodes")
SECTIONS_KEY = "sections"
SECTION_ID_KEYS = ("id", "key", "name")
START_KEYS = ("start", "entry", "begin", "root")
TEXT_KEYS = ("text", "body", "narrative", "content")
CHOICE_LIST_KEYS = ("options", "choices", "choice", "links")
CHOICE_LABEL_KEYS = ("label", "text", "title", "name")
CHOICE_TARGET_KEYS = ("to", "next", "go", "target", "id")

CONSUMED_TOP_LEVEL_KEYS = frozenset((*SCENE_COLLECTION_KEYS, SECTIONS_KEY, *START_KEYS))

ENDING_TYPE_PREFIX = "ending"
