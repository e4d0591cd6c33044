"""Render and build report models."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

from core.document.models import Document


class UnresolvedLink(BaseModel):
    """A ``[...]`` reference that matched no declared name."""

    model_config = ConfigDict(extra="forbid")

    target: str
    file: int
    line: int
    column: int


class RenderReport(BaseModel):
    """Recoverable findings collected while rendering."""

    model_config = ConfigDict(extra="forbid")

    unresolved_links: list[UnresolvedLink] = Field(default_factory=list)


class BuildReport(BaseModel):
    """Summary of one successful build.

    Rules:
    - passed is True whenever a report exists; fatal errors raise instead
    - unresolved_count == len(unresolved_links)
    """

    model_config = ConfigDict(extra="forbid")

    passed: bool = True
    item_count: int
    header_count: int
    group_count: int
    unresolved_count: int
    unresolved_links: list[UnresolvedLink] = Field(default_factory=list)

    @classmethod
    def from_render(cls, document: Document, render_report: RenderReport) -> BuildReport:
        return cls(
            item_count=len(document.items),
            header_count=len(document.headers),
            group_count=len(document.groups),
            unresolved_count=len(render_report.unresolved_links),
            unresolved_links=list(render_report.unresolved_links),
        )


@dataclass(frozen=True)
class BuildOutput:
    """In-memory build output; nothing has been written yet."""

    html: str
    document: Document
    report: BuildReport
