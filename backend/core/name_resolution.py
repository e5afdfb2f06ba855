"""
Name resolution engine: free-form exercise name -> canonical record.

Stages, first hit wins:
1. Exact: normalized query equals an indexed name (confidence 1.0)
2. Alias: query or a spelling variant is in the alias table (0.95 / 0.9)
3. Phrase: longest, leftmost run of query words that is an indexed name
   (0.8 minus 0.1 per unmatched word, never below the synthesis 0.6)
4. Semantic: first matching regular expression pattern (pattern confidence)
5. Fuzzy: word-overlap score against the inverted word index, accepted above
   0.3 and capped at 0.8
6. Synthesis: a record built from the query itself (0.6, fallback/generated)

The engine works entirely offline. Its index starts with the bundled
canonical catalog and can be extended with catalog records at runtime.
"""
import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from backend.core.catalog import (
    SemanticPattern,
    alias_mappings,
    canonical_records,
    semantic_patterns,
)
from backend.core.normalize import normalize, snake_key
from backend.core.similarity import indexable_words, rank_by_similarity, word_overlap_score
from backend.core.synthesis import synthesize_record
from domain.models import ExerciseRecord, MatchResult, MatchSource, MatchType

logger = logging.getLogger(__name__)


class NameResolutionEngine:
    """
    Multi-stage matcher over an in-memory index of canonical records.

    ``resolve`` always returns a MatchResult with a record that has media.
    """

    ALIAS_CONFIDENCE = 0.95
    ALIAS_VARIANT_CONFIDENCE = 0.9
    PHRASE_BASE_CONFIDENCE = 0.8
    PHRASE_WORD_PENALTY = 0.1
    FUZZY_THRESHOLD = 0.3
    FUZZY_MAX_CONFIDENCE = 0.8
    SYNTHESIS_CONFIDENCE = 0.6
    # A phrase match never ranks below a synthesized record
    PHRASE_MIN_CONFIDENCE = SYNTHESIS_CONFIDENCE

    def __init__(
        self,
        records: Optional[Iterable[ExerciseRecord]] = None,
        aliases: Optional[Mapping[str, str]] = None,
        patterns: Optional[Sequence[SemanticPattern]] = None,
    ):
        """
        Initialize the engine.

        Args:
            records: Records to index (bundled canonical catalog if None)
            aliases: Raw alias -> canonical name (bundled alias table if None)
            patterns: Ordered semantic patterns (bundled patterns if None)
        """
        self._exact: Dict[str, Tuple[ExerciseRecord, MatchSource]] = {}
        self._words: Dict[str, Set[str]] = {}
        if aliases is None:
            self._aliases = dict(alias_mappings())
        else:
            self._aliases = {snake_key(raw): name for raw, name in aliases.items()}
        self._patterns = list(semantic_patterns() if patterns is None else patterns)
        self.index_records(
            canonical_records() if records is None else records,
            source=MatchSource.LOCAL_MAPPING,
        )

    def __len__(self) -> int:
        return len(self._exact)

    def index_records(
        self,
        records: Iterable[ExerciseRecord],
        source: MatchSource = MatchSource.REMOTE,
    ) -> int:
        """
        Add records to the exact and word indexes.

        Records without media are skipped. A name that is already indexed
        keeps its existing record.

        Returns:
            Number of newly indexed names
        """
        added = 0
        for record in records:
            if not record.has_media:
                continue
            key = normalize(record.name)
            if not key or key in self._exact:
                continue
            self._exact[key] = (record, source)
            for word in indexable_words(key):
                self._words.setdefault(word, set()).add(key)
            added += 1
        if added:
            logger.debug(f"Indexed {added} exercise names ({source.value})")
        return added

    def resolve(self, query: str) -> MatchResult:
        """
        Resolve a free-form name to a canonical record.

        Args:
            query: Exercise name in any formatting

        Returns:
            MatchResult; never None, and the record always has media
        """
        normalized = normalize(query)
        if normalized:
            for stage in (
                self._try_exact,
                self._try_alias,
                self._try_phrase,
                self._try_semantic,
                self._try_fuzzy,
            ):
                match = stage(normalized)
                if match:
                    logger.debug(
                        f"Resolved '{query}' -> '{match.record.name}' "
                        f"({match.match_type.value}, {match.confidence:.2f})"
                    )
                    return match
        return self._synthesize(query)

    def suggest(self, query: str, limit: int = 5) -> List[Tuple[ExerciseRecord, float]]:
        """Indexed records ranked by Levenshtein similarity to the query."""
        normalized = normalize(query)
        if not normalized or limit < 1:
            return []
        ranked = rank_by_similarity(normalized, list(self._exact), limit=limit)
        return [(self._exact[key][0], score) for key, score in ranked]

    # -------------------------------------------------------------------------
    # Stages
    # -------------------------------------------------------------------------

    def _try_exact(self, normalized: str) -> Optional[MatchResult]:
        return self._result(normalized, 1.0, MatchType.EXACT)

    def _try_alias(self, normalized: str) -> Optional[MatchResult]:
        key = normalized.replace(" ", "_")
        variants = [
            (key, self.ALIAS_CONFIDENCE),
            (normalized.replace(" ", ""), self.ALIAS_VARIANT_CONFIDENCE),
        ]
        if key.endswith("s"):
            variants.append((key[:-1], self.ALIAS_VARIANT_CONFIDENCE))
        else:
            variants.append((key + "s", self.ALIAS_VARIANT_CONFIDENCE))

        for variant, confidence in variants:
            canonical = self._aliases.get(variant)
            if canonical is None:
                continue
            match = self._result(normalize(canonical), confidence, MatchType.NORMALIZED)
            if match:
                return match
            logger.warning(f"Alias '{variant}' points at unindexed exercise '{canonical}'")
        return None

    def _try_phrase(self, normalized: str) -> Optional[MatchResult]:
        words = normalized.split()
        total = len(words)
        for length in range(total - 1, 0, -1):
            for start in range(total - length + 1):
                phrase = " ".join(words[start:start + length])
                if phrase not in self._exact:
                    continue
                unmatched = total - length
                confidence = max(
                    self.PHRASE_BASE_CONFIDENCE - self.PHRASE_WORD_PENALTY * unmatched,
                    self.PHRASE_MIN_CONFIDENCE,
                )
                return self._result(phrase, round(confidence, 2), MatchType.NORMALIZED)
        return None

    def _try_semantic(self, normalized: str) -> Optional[MatchResult]:
        for pattern in self._patterns:
            if not pattern.regex.search(normalized):
                continue
            match = self._result(normalize(pattern.canonical_name), pattern.confidence, MatchType.SEMANTIC)
            if match:
                return match
        return None

    def _try_fuzzy(self, normalized: str) -> Optional[MatchResult]:
        candidates: Set[str] = set()
        for word in indexable_words(normalized):
            candidates |= self._words.get(word, set())
        if not candidates:
            return None

        best_key = None
        best_score = 0.0
        # index order keeps ties deterministic
        for key in self._exact:
            if key not in candidates:
                continue
            score = word_overlap_score(normalized, key)
            if score > best_score:
                best_key, best_score = key, score

        if best_key is None or best_score <= self.FUZZY_THRESHOLD:
            return None
        return self._result(best_key, min(best_score, self.FUZZY_MAX_CONFIDENCE), MatchType.FUZZY)

    def _synthesize(self, query: str) -> MatchResult:
        record = synthesize_record(query)
        logger.info(f"No indexed match for '{query}', synthesized '{record.name}'")
        return MatchResult(
            record=record,
            confidence=self.SYNTHESIS_CONFIDENCE,
            match_type=MatchType.FALLBACK,
            source=MatchSource.GENERATED,
        )

    def _result(self, key: str, confidence: float, match_type: MatchType) -> Optional[MatchResult]:
        entry = self._exact.get(key)
        if entry is None:
            return None
        record, source = entry
        return MatchResult(record=record, confidence=confidence, match_type=match_type, source=source)
