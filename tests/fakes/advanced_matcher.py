"""
Fake AdvancedMatcher for testing.
"""
from typing import Dict, List, Optional

from domain.models import MatchResult


class FakeAdvancedMatcher:
    """
    Returns canned results keyed by lower-cased name.

    Set ``error`` to make every call raise it.
    """

    def __init__(
        self,
        results: Optional[Dict[str, MatchResult]] = None,
        error: Optional[Exception] = None,
    ):
        self._results = {k.lower(): v for k, v in (results or {}).items()}
        self.error = error
        self.calls: List[str] = []

    async def resolve(self, name: str) -> Optional[MatchResult]:
        self.calls.append(name)
        if self.error is not None:
            raise self.error
        return self._results.get(name.strip().lower())
