from __future__ import annotations

import enum
import hashlib
import logging
from dataclasses import dataclass
from typing import List, Optional, Set, Tuple

from models import RecordSnapshot, SearchResult

from .parse import decode_ranking_response, response_summary
from .prefilter import prefilter_records
from .prompts import check_language, search_instructions
from .providers import RankingBackend, RankingRequest
from .sanitize import sanitize_snapshot
from .scoring import rank_locally


logger = logging.getLogger(__name__)

# Above this many prefiltered candidates the ranking backend is skipped entirely.
RANKING_CANDIDATE_LIMIT = 50


class SearchPath(enum.Enum):
    EMPTY = "empty"
    OVERSIZED = "oversized"
    NO_BACKEND = "no_backend"
    RANKED = "ranked"
    BACKEND_FAILED = "backend_failed"


@dataclass(frozen=True)
class SearchOutcome:
    results: List[SearchResult]
    path: SearchPath


def query_fingerprint(query: str) -> str:
    """Short stable hash used in log lines instead of the raw query."""
    normalized = " ".join(query.strip().lower().split())
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()[:12]


def _candidate_keys(snapshot: RecordSnapshot) -> Set[Tuple[str, str]]:
    return {
        (record_type, str(record.id))
        for record_type, records in snapshot.groups()
        for record in records
    }


class SearchPipeline:
    """Prefilter, size-gate, sanitize and rank a record snapshot for one query.

    The ranking backend only ever receives sanitized projections of the
    prefiltered candidates. When the candidate set is too large, no backend is
    configured, or the backend call fails or returns something unusable, the
    local ranker scores the full snapshot in-process instead. Nothing is
    retried. The pipeline holds configuration only, so one instance can serve
    concurrent searches.
    """

    def __init__(
        self,
        backend: Optional[RankingBackend] = None,
        candidate_limit: int = RANKING_CANDIDATE_LIMIT,
    ) -> None:
        self.backend = backend
        self.candidate_limit = candidate_limit

    def search(
        self,
        query: str,
        snapshot: RecordSnapshot,
        language: str = "en",
    ) -> List[SearchResult]:
        return self.run(query, snapshot, language).results

    def run(
        self,
        query: str,
        snapshot: RecordSnapshot,
        language: str = "en",
    ) -> SearchOutcome:
        """Search and report which path produced the results."""
        if not isinstance(snapshot, RecordSnapshot):
            raise TypeError(f"snapshot must be a RecordSnapshot, got {type(snapshot).__name__}")
        check_language(language)
        fingerprint = query_fingerprint(query)

        candidates = prefilter_records(query, snapshot)
        total = candidates.total
        if total == 0:
            logger.info("[search %s] No prefilter candidates", fingerprint)
            return SearchOutcome([], SearchPath.EMPTY)

        if total > self.candidate_limit:
            logger.info(
                "[search %s] Large candidate set (%d items), ranking locally",
                fingerprint,
                total,
            )
            return self._rank_locally(query, snapshot, SearchPath.OVERSIZED)

        if self.backend is None:
            return self._rank_locally(query, snapshot, SearchPath.NO_BACKEND)

        sanitized = sanitize_snapshot(candidates)
        request = RankingRequest(
            instructions=search_instructions(language),
            query=query,
            sanitized_data=sanitized,
            language=language,
        )
        logger.info("[search %s] Sending candidates for ranking: %s", fingerprint, response_summary(sanitized))

        try:
            raw = self.backend.rank(request)
        except Exception as exc:
            logger.warning("[search %s] Ranking backend failed: %s", fingerprint, exc)
            return self._rank_locally(query, snapshot, SearchPath.BACKEND_FAILED)

        results = decode_ranking_response(raw, allowed=_candidate_keys(candidates))
        if results is None:
            logger.warning("[search %s] Ranking backend returned an unusable response", fingerprint)
            return self._rank_locally(query, snapshot, SearchPath.BACKEND_FAILED)

        logger.info("[search %s] Ranking backend returned %d results", fingerprint, len(results))
        return SearchOutcome(results, SearchPath.RANKED)

    def _rank_locally(
        self,
        query: str,
        snapshot: RecordSnapshot,
        path: SearchPath,
    ) -> SearchOutcome:
        results = rank_locally(query, snapshot)
        logger.info("[search %s] Local ranker returned %d results", query_fingerprint(query), len(results))
        return SearchOutcome(results, path)
