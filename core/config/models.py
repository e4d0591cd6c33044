"""Build settings model."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator, model_validator


class Settings(BaseModel):
    """Build settings loaded from YAML."""

    model_config = ConfigDict(extra="forbid")

    title: str
    stylesheet: str
    charset: str = "utf-8"
    group_separator: str
    superscript_marker: str = "^"
    subscript_marker: str = "_"
    unresolved_links: Literal["warn", "error"] = "warn"
    source_dir: str = "source"
    output_file: str = "index.html"

    @field_validator("superscript_marker", "subscript_marker")
    @classmethod
    def _single_character(cls, value: str) -> str:
        if len(value) != 1:
            raise ValueError("decoration markers must be exactly one character")
        return value

    @model_validator(mode="after")
    def _distinct_markers(self) -> Settings:
        if self.superscript_marker == self.subscript_marker:
            raise ValueError("superscript and subscript markers must differ")
        return self
