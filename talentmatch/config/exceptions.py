"""Errors raised while reading configuration and seed files."""

from pathlib import Path
from typing import Iterable, List, Optional, Union


class ConfigurationError(Exception):
    """
    Raised when a configuration or seed file cannot be used.

    The rendered message lists each validation error and each suggested fix
    under the primary message, so the CLI can print ``str(error)`` as-is.

    Attributes:
        message: Primary error message
        errors: Individual validation errors, one per offending field
        suggestions: Hints for fixing the file
        source: File the error refers to, when known
    """

    def __init__(
        self,
        message: str,
        errors: Optional[Iterable[str]] = None,
        suggestions: Optional[Iterable[str]] = None,
        source: Optional[Union[str, Path]] = None,
    ):
        self.message = message
        self.errors: List[str] = list(errors or [])
        self.suggestions: List[str] = list(suggestions or [])
        self.source = Path(source) if source is not None else None
        super().__init__(self.render())

    def render(self) -> str:
        """Primary message followed by numbered errors and bulleted suggestions."""
        headline = self.message if self.source is None else f"{self.message} ({self.source})"
        lines = [headline]

        if self.errors:
            lines += ["", "Validation Errors:"]
            lines += [f"  {number}. {error}" for number, error in enumerate(self.errors, 1)]

        if self.suggestions:
            lines += ["", "Suggestions:"]
            lines += [f"  - {suggestion}" for suggestion in self.suggestions]

        return "\n".join(lines)


class FixtureError(ConfigurationError):
    """Raised when a seed fixture is unreadable or fails validation."""
