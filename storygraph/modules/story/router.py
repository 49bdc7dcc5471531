from __future__ import annotations

from fastapi import APIRouter, HTTPException

from storygraph.modules.story.export import default_active_scene, export_story, sample_story, scene_overview
from storygraph.modules.story.normalize import normalize_story
from storygraph.modules.story.schemas import (
    Story,
    StoryAuditResponse,
    StoryDocumentRequest,
    StoryNormalizeResponse,
    StoryOverviewResponse,
)
from storygraph.modules.story.service import has_errors, normalize_and_audit

router = APIRouter(prefix="/api/v1/stories", tags=["stories"])


def _not_an_object() -> HTTPException:
    return HTTPException(
        status_code=422,
        detail={
            "code": "STORY_NOT_OBJECT",
            "message": "Story document must be a JSON object at the root.",
        },
    )


def _normalized_or_422(payload: StoryDocumentRequest) -> Story:
    story = normalize_story(payload.document)
    if story is None:
        raise _not_an_object()
    return story


@router.get("/sample")
def get_sample_story() -> dict:
    return sample_story()


@router.post("/normalize", response_model=StoryNormalizeResponse)
def normalize_document(payload: StoryDocumentRequest) -> StoryNormalizeResponse:
    story = _normalized_or_422(payload)
    return StoryNormalizeResponse(story=export_story(story))


@router.post("/audit", response_model=StoryAuditResponse)
def audit_document(payload: StoryDocumentRequest) -> StoryAuditResponse:
    report = normalize_and_audit(payload.document)
    if report is None:
        raise _not_an_object()
    return StoryAuditResponse(
        ok=not has_errors(report.result),
        story=export_story(report.story),
        issues=report.result.issues,
        summary=report.result.summary,
        cycles=report.result.cycles,
    )


@router.post("/overview", response_model=StoryOverviewResponse)
def overview_document(payload: StoryDocumentRequest) -> StoryOverviewResponse:
    story = _normalized_or_422(payload)
    return StoryOverviewResponse(
        start=story.start,
        active_scene=default_active_scene(story),
        scenes=scene_overview(story),
    )
