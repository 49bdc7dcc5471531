from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from storygraph.modules.story.audit import audit_story
from storygraph.modules.story.constants import SEVERITY_ERROR
from storygraph.modules.story.schemas import AuditResult, AuditSummary, Issue, Story
from storygraph.modules.story.normalize import normalize_story

logger = logging.getLogger(__name__)

_SUMMARY_ROWS = (
    ("Scenes", "scenes"),
    ("Reachable", "reachable"),
    ("Cycles", "cycles"),
    ("Errors", "errors"),
    ("Warnings", "warnings"),
    ("Info", "infos"),
)


@dataclass(frozen=True)
class StoryReport:
    story: Story
    result: AuditResult


def run_audit(story: Story) -> AuditResult:
    result = audit_story(story)
    summary = result.summary
    logger.debug(
        "audited story: scenes=%d reachable=%d cycles=%d errors=%d warnings=%d infos=%d",
        summary.scenes,
        summary.reachable,
        summary.cycles,
        summary.errors,
        summary.warnings,
        summary.infos,
    )
    return result


def normalize_and_audit(raw: Any) -> StoryReport | None:
    story = normalize_story(raw)
    if story is None:
        logger.info("story document rejected: root is not an object")
        return None
    return StoryReport(story=story, result=run_audit(story))


def has_errors(result: AuditResult) -> bool:
    return any(issue.severity == SEVERITY_ERROR for issue in result.issues)


def format_issue_line(issue: Issue) -> str:
    where_parts: list[str] = []
    if issue.scene:
        where_parts.append(f"scene={issue.scene}")
    if issue.choice:
        where_parts.append(f"choice={issue.choice}")
    where = f" ({', '.join(where_parts)})" if where_parts else ""
    return f"[{issue.severity.upper()}] {issue.code}{where}: {issue.message}"


def format_summary_block(summary: AuditSummary) -> list[str]:
    lines = ["Summary", "-------"]
    for label, attr in _SUMMARY_ROWS:
        lines.append(f"{label + ':':<13}{getattr(summary, attr)}")
    return lines
