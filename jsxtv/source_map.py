"""Source location utilities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class SourceSpan:
    """Represents a source range in 1-based coordinates."""

    file: str
    line: int
    column: int
    end_line: int
    end_column: int

    def to_dict(self) -> dict[str, Any]:
        """Serialize the span to a JSON-compatible mapping."""
        return {
            "file": self.file,
            "line": self.line,
            "column": self.column,
            "end_line": self.end_line,
            "end_column": self.end_column,
        }


def merge_spans(start: SourceSpan | None, end: SourceSpan | None) -> SourceSpan | None:
    """Build a span covering `start` through `end`."""
    if start is None:
        return end
    if end is None:
        return start
    return SourceSpan(
        file=start.file,
        line=start.line,
        column=start.column,
        end_line=end.end_line,
        end_column=end.end_column,
    )
