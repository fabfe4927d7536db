"""Progress callbacks shared by every pipeline.

Services never print. The CLI passes functions that render `[INFO]`,
`[SUCCESS]` and `[WARNING]` lines; tests pass nothing or a recorder.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable


@dataclass
class PipelineHooks:
    """Optional callbacks for UI layers."""

    status: Callable[[str], None] | None = None
    success: Callable[[str], None] | None = None
    warning: Callable[[str], None] | None = None
    error: Callable[[str], None] | None = None

    def emit_status(self, message: str) -> None:
        if self.status:
            self.status(message)

    def emit_success(self, message: str) -> None:
        if self.success:
            self.success(message)

    def emit_warning(self, message: str) -> None:
        if self.warning:
            self.warning(message)

    def emit_error(self, message: str) -> None:
        if self.error:
            self.error(message)
