from __future__ import annotations

from storygraph.config import settings
from storygraph.modules.story.constants import (
    E_DANGLING_TO,
    E_MISSING_START,
    E_NO_SCENES,
    E_START_NOT_FOUND,
    I_CYCLES_DETECTED,
    SEVERITY_ERROR,
    SEVERITY_INFO,
    SEVERITY_RANK,
    SEVERITY_WARN,
    W_DEAD_END,
    W_EMPTY_CHOICE_LABEL,
    W_EMPTY_TEXT,
    W_TOO_MANY_CHOICES,
    W_UNREACHABLE_SCENE,
)
from storygraph.modules.story.graph import choice_target, walk_story_graph
from storygraph.modules.story.normalize import list_scene_ids
from storygraph.modules.story.schemas import (
    AuditResult,
    AuditSummary,
    Issue,
    IssueSeverity,
    Scene,
    Story,
)


def _issue(
    *,
    severity: IssueSeverity,
    code: str,
    message: str,
    scene: str | None = None,
    choice: str | None = None,
) -> Issue:
    return Issue(
        severity=severity,
        code=code,
        message=message,
        scene=scene,
        choice=choice,
    )


def _audit_scene(scene_id: str, scene: Scene, scenes: dict[str, Scene]) -> list[Issue]:
    issues: list[Issue] = []
    options = list(scene.options or [])
    max_visible = settings.story_max_visible_choices

    if not str(scene.text or "").strip():
        issues.append(_issue(severity=SEVERITY_WARN, code=W_EMPTY_TEXT, message="Scene text is empty.", scene=scene_id))

    if len(options) > max_visible:
        issues.append(
            _issue(
                severity=SEVERITY_WARN,
                code=W_TOO_MANY_CHOICES,
                message=f"Scene has {len(options)} choices; only the first {max_visible} can be shown to the player.",
                scene=scene_id,
            )
        )

    has_target = False
    for idx, choice in enumerate(options):
        choice_ref = f"{scene_id}.choice{idx}"
        if not str(choice.label or "").strip():
            issues.append(
                _issue(
                    severity=SEVERITY_WARN,
                    code=W_EMPTY_CHOICE_LABEL,
                    message="Choice label is empty.",
                    scene=scene_id,
                    choice=choice_ref,
                )
            )

        target = choice_target(choice)
        if not target:
            continue
        # A dangling target still counts as a target for the dead-end rule.
        has_target = True
        if target not in scenes:
            issues.append(
                _issue(
                    severity=SEVERITY_ERROR,
                    code=E_DANGLING_TO,
                    message=f'Choice points to missing scene "{target}".',
                    scene=scene_id,
                    choice=choice_ref,
                )
            )

    if not has_target:
        issues.append(
            _issue(
                severity=SEVERITY_WARN,
                code=W_DEAD_END,
                message="Scene has no choices with targets (`to`). Ignore this warning if the scene is an ending.",
                scene=scene_id,
            )
        )
    return issues


def sort_issues(issues: list[Issue]) -> list[Issue]:
    return sorted(issues, key=lambda issue: SEVERITY_RANK.get(issue.severity, len(SEVERITY_RANK)))


def summarize(scene_count: int, reachable: int, cycles: int, issues: list[Issue]) -> AuditSummary:
    return AuditSummary(
        scenes=scene_count,
        reachable=reachable,
        cycles=cycles,
        errors=sum(1 for issue in issues if issue.severity == SEVERITY_ERROR),
        warnings=sum(1 for issue in issues if issue.severity == SEVERITY_WARN),
        infos=sum(1 for issue in issues if issue.severity == SEVERITY_INFO),
    )


def audit_story(story: Story) -> AuditResult:
    """Check a canonical story for structural defects.

    Structural checks run per scene in natural id order, then unreachable
    scenes are flagged, then a single info line lists detected cycles. The
    returned issues are stably sorted by severity so discovery order survives
    within each severity.
    """
    scenes = dict(story.scenes or {})
    ids = list_scene_ids(story)
    start = str(story.start or "").strip()
    issues: list[Issue] = []

    if not start:
        issues.append(
            _issue(severity=SEVERITY_ERROR, code=E_MISSING_START, message="Missing or invalid `start` scene id.")
        )
    if not ids:
        issues.append(
            _issue(severity=SEVERITY_ERROR, code=E_NO_SCENES, message="No scenes found after normalization.")
        )
    if start and ids and start not in scenes:
        issues.append(
            _issue(
                severity=SEVERITY_ERROR,
                code=E_START_NOT_FOUND,
                message="`start` does not exist in scenes.",
                scene=start,
            )
        )

    for scene_id in ids:
        issues.extend(_audit_scene(scene_id, scenes[scene_id], scenes))

    walk = walk_story_graph(start, scenes)
    if start and start in scenes:
        for scene_id in ids:
            if scene_id not in walk.reachable:
                issues.append(
                    _issue(
                        severity=SEVERITY_WARN,
                        code=W_UNREACHABLE_SCENE,
                        message="Scene is unreachable from `start`.",
                        scene=scene_id,
                    )
                )

    if walk.cycles:
        max_reported = max(settings.story_max_cycles_reported, 0)
        preview = [" -> ".join(cycle) for cycle in walk.cycles[:max_reported]]
        issues.append(
            _issue(
                severity=SEVERITY_INFO,
                code=I_CYCLES_DETECTED,
                message=f"Cycles detected ({len(walk.cycles)} total, up to {max_reported} shown): {' | '.join(preview)}",
            )
        )

    ordered = sort_issues(issues)
    return AuditResult(
        issues=ordered,
        summary=summarize(len(ids), len(walk.reachable), len(walk.cycles), ordered),
        cycles=[list(cycle) for cycle in walk.cycles],
    )
