"""Match run orchestration."""

from .models import ExcludedCounterparty, MatchRunResult
from .runner import MatchPipeline

__all__ = ["ExcludedCounterparty", "MatchPipeline", "MatchRunResult"]
