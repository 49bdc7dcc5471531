from __future__ import annotations

from collections import deque
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum

from storygraph.modules.story.schemas import Choice, Scene


class NodeState(Enum):
    UNVISITED = "unvisited"
    ON_STACK = "on_stack"
    DONE = "done"


@dataclass(frozen=True)
class GraphWalk:
    reachable: frozenset[str] = frozenset()
    cycles: list[list[str]] = field(default_factory=list)


def choice_target(choice: Choice | None) -> str:
    if choice is None:
        return ""
    return str(choice.to or "").strip()


def _edges(scenes: Mapping[str, Scene], scene_id: str, allowed: frozenset[str] | None = None) -> Iterator[str]:
    scene = scenes.get(scene_id)
    for choice in (scene.options if scene is not None else []):
        target = choice_target(choice)
        if not target or target not in scenes:
            continue
        if allowed is not None and target not in allowed:
            continue
        yield target


def reachable_scene_ids(start: str, scenes: Mapping[str, Scene]) -> frozenset[str]:
    """Breadth-first walk from ``start`` over targets that key an existing scene."""
    start_id = str(start or "").strip()
    if not start_id or start_id not in scenes:
        return frozenset()

    seen = {start_id}
    queue = deque([start_id])
    while queue:
        scene_id = queue.popleft()
        for target in _edges(scenes, scene_id):
            if target in seen:
                continue
            seen.add(target)
            queue.append(target)
    return frozenset(seen)


def detect_cycles(
    start: str,
    scenes: Mapping[str, Scene],
    reachable: frozenset[str] | None = None,
) -> list[list[str]]:
    """Depth-first search from ``start`` reporting one path per back-edge.

    Each cycle runs from the first occurrence of the back-edge target on the
    current path and repeats that id at the end, e.g. ``["A", "B", "A"]``.
    Nodes already finished are never descended again, so shared sub-graphs are
    walked once. Uses an explicit frame stack instead of recursion.
    """
    start_id = str(start or "").strip()
    if reachable is None:
        reachable = reachable_scene_ids(start_id, scenes)
    if start_id not in reachable:
        return []

    state: dict[str, NodeState] = {start_id: NodeState.ON_STACK}
    path = [start_id]
    position = {start_id: 0}
    frames = [_edges(scenes, start_id, reachable)]
    cycles: list[list[str]] = []

    while frames:
        target = next(frames[-1], None)
        if target is None:
            finished = path.pop()
            del position[finished]
            state[finished] = NodeState.DONE
            frames.pop()
            continue

        target_state = state.get(target, NodeState.UNVISITED)
        if target_state is NodeState.UNVISITED:
            state[target] = NodeState.ON_STACK
            position[target] = len(path)
            path.append(target)
            frames.append(_edges(scenes, target, reachable))
        elif target_state is NodeState.ON_STACK:
            cycles.append(path[position[target]:] + [target])

    return cycles


def walk_story_graph(start: str, scenes: Mapping[str, Scene]) -> GraphWalk:
    reachable = reachable_scene_ids(start, scenes)
    return GraphWalk(reachable=reachable, cycles=detect_cycles(start, scenes, reachable))
