"""
Advanced Matcher Interface (Port).

An optional, higher-confidence resolver that may sit upstream of the
resolver (for example an AI-backed matcher). The resolver treats it as
opaque: a None result or an exception simply skips the tier.
"""
from typing import Optional, Protocol

from domain.models import MatchResult


class AdvancedMatcher(Protocol):
    """Abstract interface for an external exercise name resolver."""

    async def resolve(self, name: str) -> Optional[MatchResult]:
        """
        Resolve a free-form exercise name.

        Args:
            name: The exercise name as generated upstream

        Returns:
            MatchResult or None if the matcher has no answer
        """
        ...
