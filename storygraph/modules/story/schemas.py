from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_serializer

IssueSeverity = Literal["error", "warn", "info"]


class Choice(BaseModel):
    model_config = ConfigDict(extra="forbid")

    label: str = ""
    to: str = ""


class Scene(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    text: str = ""
    options: list[Choice] = Field(default_factory=list)
    type: str | None = None


class Story(BaseModel):
    """Canonical scene graph.

    Top-level fields the normalizer does not consume (``meta``, titles, schema
    tags) are kept as model extras and travel with the story through edits and
    export.
    """

    model_config = ConfigDict(extra="allow")

    start: str = ""
    scenes: dict[str, Scene] = Field(default_factory=dict)

    def carried_fields(self) -> dict[str, Any]:
        return dict(self.model_extra or {})


class Issue(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    severity: IssueSeverity
    code: str
    message: str
    scene: str | None = None
    choice: str | None = None

    @model_serializer(mode="wrap")
    def drop_empty_location(self, handler):
        data = handler(self)
        for key in ("scene", "choice"):
            if data.get(key) is None:
                data.pop(key, None)
        return data


class AuditSummary(BaseModel):
    scenes: int = 0
    reachable: int = 0
    cycles: int = 0
    errors: int = 0
    warnings: int = 0
    infos: int = 0


class AuditResult(BaseModel):
    issues: list[Issue] = Field(default_factory=list)
    summary: AuditSummary = Field(default_factory=AuditSummary)
    cycles: list[list[str]] = Field(default_factory=list)


class StoryDocumentRequest(BaseModel):
    document: Any


class StoryNormalizeResponse(BaseModel):
    story: dict


class StoryAuditResponse(BaseModel):
    ok: bool
    story: dict
    issues: list[Issue] = Field(default_factory=list)
    summary: AuditSummary
    cycles: list[list[str]] = Field(default_factory=list)


class SceneOverviewItem(BaseModel):
    id: str
    choice_count: int
    is_start: bool = False
    is_ending: bool = False


class StoryOverviewResponse(BaseModel):
    start: str
    active_scene: str | None = None
    scenes: list[SceneOverviewItem] = Field(default_factory=list)
