from storygraph.modules.story.audit import audit_story
from storygraph.modules.story.export import export_story
from storygraph.modules.story.normalize import list_scene_ids, normalize_story
from storygraph.modules.story.schemas import AuditResult, AuditSummary, Choice, Issue, Scene, Story

__all__ = [
    "AuditResult",
    "AuditSummary",
    "Choice",
    "Issue",
    "Scene",
    "Story",
    "audit_story",
    "export_story",
    "list_scene_ids",
    "normalize_story",
]
