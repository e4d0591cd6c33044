"""Custom exceptions for core logic."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar

from core.source.models import span_text

if TYPE_CHECKING:
    from core.parse.models import Text
    from core.source.models import PositionedChar, Span


class GlossaryError(Exception):
    """Base class for fatal errors raised while building a glossary."""

    code: ClassVar[str] = "GLOSSARY_ERROR"
    stage: ClassVar[str] = "unknown"

    def detail(self) -> dict[str, Any]:
        return {}


class SourceError(GlossaryError):
    """Raised when the source directory cannot be turned into input."""

    stage = "source"


class SourceLayoutError(SourceError):
    """Raised when the source directory is missing or holds non-file entries."""

    code = "SOURCE_LAYOUT"

    def __init__(self, message: str, *, path: Path) -> None:
        super().__init__(message)
        self.path = path

    def detail(self) -> dict[str, Any]:
        return {"path": str(self.path)}


class DuplicateSourceKeyError(SourceError):
    """Raised when two source files share the same numeric prefix."""

    code = "SOURCE_DUPLICATE_KEY"

    def __init__(self, *, key: int, first: str, second: str) -> None:
        super().__init__(f"duplicate source key {key} (`{first}` and `{second}`)")
        self.key = key
        self.first = first
        self.second = second

    def detail(self) -> dict[str, Any]:
        return {"key": self.key, "first": self.first, "second": self.second}


class ParseError(GlossaryError):
    """Raised when markup cannot be parsed."""

    stage = "parse"


class UnexpectedCharacterError(ParseError):
    code = "PARSE_UNEXPECTED_CHARACTER"

    def __init__(self, char: PositionedChar) -> None:
        super().__init__(f"unexpected character `{char.value}` at {char.location}")
        self.char = char

    def detail(self) -> dict[str, Any]:
        return {"char": self.char.position_detail()}


class NoClosingBracketError(ParseError):
    code = "PARSE_NO_CLOSING_BRACKET"

    def __init__(self, opening: PositionedChar) -> None:
        super().__init__(f"no closing bracket to match `{opening.value}` at {opening.location}")
        self.opening = opening

    def detail(self) -> dict[str, Any]:
        return {"opening": self.opening.position_detail()}


class BracketsDoNotMatchError(ParseError):
    code = "PARSE_BRACKETS_DO_NOT_MATCH"

    def __init__(self, opening: PositionedChar, closing: PositionedChar) -> None:
        super().__init__(
            f"brackets `{opening.value}` at {opening.location} and "
            f"`{closing.value}` at {closing.location} do not match"
        )
        self.opening = opening
        self.closing = closing

    def detail(self) -> dict[str, Any]:
        return {
            "opening": self.opening.position_detail(),
            "closing": self.closing.position_detail(),
        }


class UnexpectedEndOfFileError(ParseError):
    code = "PARSE_UNEXPECTED_EOF"

    def __init__(self, opening: PositionedChar) -> None:
        super().__init__(
            f"unexpected end of file: `{opening.value}` at {opening.location} "
            "is never followed by `{`"
        )
        self.opening = opening

    def detail(self) -> dict[str, Any]:
        return {"opening": self.opening.position_detail()}


class NestingTooDeepError(ParseError):
    code = "PARSE_NESTING_TOO_DEEP"

    def __init__(self, opening: PositionedChar, *, limit: int) -> None:
        super().__init__(
            f"brackets nested deeper than {limit} levels at `{opening.value}` at {opening.location}"
        )
        self.opening = opening
        self.limit = limit

    def detail(self) -> dict[str, Any]:
        return {"opening": self.opening.position_detail(), "limit": self.limit}


class CompileError(GlossaryError):
    """Raised when parsed expressions cannot be linked into a document."""

    stage = "compile"


class NoIdentityBeforeNameError(CompileError):
    code = "COMPILE_NO_IDENTITY_BEFORE_NAME"

    def __init__(self, opening: PositionedChar) -> None:
        super().__init__(f"identity expected before name at {opening.location}")
        self.opening = opening

    def detail(self) -> dict[str, Any]:
        return {"opening": self.opening.position_detail()}


class NoIdentityBeforeDescError(CompileError):
    code = "COMPILE_NO_IDENTITY_BEFORE_DESC"

    def __init__(self, opening: PositionedChar) -> None:
        super().__init__(f"identity expected before description at {opening.location}")
        self.opening = opening

    def detail(self) -> dict[str, Any]:
        return {"opening": self.opening.position_detail()}


class DuplicateNameError(CompileError):
    code = "COMPILE_DUPLICATE_NAME"

    def __init__(
        self,
        *,
        identity: Span,
        existing: Text,
        duplicate: Text,
        opening: PositionedChar,
    ) -> None:
        identity_text = span_text(identity)
        super().__init__(
            f"name of `{identity_text}` is already `{existing.source()}`, "
            f"cannot redeclare it as `{duplicate.source()}` at {opening.location}"
        )
        self.identity = identity
        self.existing = existing
        self.duplicate = duplicate
        self.opening = opening

    def detail(self) -> dict[str, Any]:
        return {
            "identity": span_text(self.identity),
            "existing": self.existing.source(),
            "duplicate": self.duplicate.source(),
            "opening": self.opening.position_detail(),
        }


class RenderError(GlossaryError):
    """Raised when a document cannot be serialized to HTML."""

    stage = "render"


class NoNameError(RenderError):
    code = "RENDER_NO_NAME"

    def __init__(self, identity: Span) -> None:
        identity_text = span_text(identity)
        location = identity[0].location if identity else "unknown position"
        super().__init__(f"name of `{identity_text}` (declared at {location}) not provided")
        self.identity = identity

    def detail(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"identity": span_text(self.identity)}
        if self.identity:
            payload["declared"] = self.identity[0].position_detail()
        return payload


class NoDecorationTargetError(RenderError):
    code = "RENDER_NO_DECORATION_TARGET"

    def __init__(self, marker: PositionedChar) -> None:
        super().__init__(f"no text after `{marker.value}` at {marker.location}")
        self.marker = marker

    def detail(self) -> dict[str, Any]:
        return {"marker": self.marker.position_detail()}


class UnresolvedLinkError(RenderError):
    """Raised for unresolved links when links are configured strict."""

    code = "RENDER_UNRESOLVED_LINK"

    def __init__(self, *, target: str, opening: PositionedChar) -> None:
        super().__init__(f"link target `{target}` at {opening.location} not found")
        self.target = target
        self.opening = opening

    def detail(self) -> dict[str, Any]:
        return {"target": self.target, "opening": self.opening.position_detail()}
