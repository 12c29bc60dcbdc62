"""AI-assisted helpers for the bail bonds back office.

Search goes through the :class:`smartsearch.SearchPipeline`; translation,
check-in photo verification, in-app help and compliance analysis call the
configured chat provider directly. Every helper degrades to a safe default
instead of raising when the provider is missing or fails.
"""
from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import asdict
from typing import Any, Dict, List, Optional, Sequence

from models import CheckIn, Case, ComplianceAnalysis, PhotoVerificationResult, RecordSnapshot, SearchResult
from smartsearch import SearchOutcome, SearchPipeline
from smartsearch.parse import parse_json_output
from smartsearch.prompts import (
    COMPLIANCE_INSTRUCTIONS,
    HELP_APOLOGY,
    PHOTO_VERIFICATION_INSTRUCTIONS,
    check_language,
    help_instructions,
    translation_instructions,
)
from smartsearch.providers import ChatProvider, ChatRankingBackend, ImageInput, ProviderError

logger = logging.getLogger(__name__)

MIN_IMAGE_PAYLOAD = 100
_DATA_URL_RE = re.compile(r"^data:image/(\w+);base64,(.+)$", re.DOTALL)

QUALITY_LEVELS = ("high", "medium", "low")
COMPLIANCE_STATUSES = ("compliant", "warning", "non-compliant")
RISK_LEVELS = ("low", "medium", "high")


def _as_str_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None]


def _as_confidence(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        return min(1.0, max(0.0, float(value)))
    except (TypeError, ValueError):
        return 0.0


def _pick_choice(value: Any, choices: Sequence[str], default: str) -> str:
    text = str(value or "").strip().lower()
    return text if text in choices else default


def split_image_data(image_data: str) -> ImageInput:
    """Split a data URL (or bare base64) into image type and payload."""
    media_type = "jpeg"
    payload = (image_data or "").strip()
    match = _DATA_URL_RE.match(payload)
    if match:
        media_type, payload = match.group(1).lower(), match.group(2)
    if not payload or len(payload) < MIN_IMAGE_PAYLOAD:
        raise ValueError("Invalid image data")
    return ImageInput(media_type=media_type, data=payload)


def development_mode() -> bool:
    return os.getenv("BAILDESK_ENV", "").strip().lower() == "development"


class AIService:
    def __init__(
        self,
        provider: Optional[ChatProvider] = None,
        pipeline: Optional[SearchPipeline] = None,
    ) -> None:
        self.provider = provider
        if pipeline is None:
            backend = ChatRankingBackend(provider) if provider is not None else None
            pipeline = SearchPipeline(backend=backend)
        self.pipeline = pipeline

    def _complete(self, system: str, user: str, **kwargs: Any) -> str:
        if self.provider is None:
            raise ProviderError("No AI provider configured")
        return self.provider.complete(system=system, user=user, **kwargs)

    def intelligent_search(
        self,
        query: str,
        snapshot: RecordSnapshot,
        language: str = "en",
    ) -> List[SearchResult]:
        return self.pipeline.search(query, snapshot, language=language)

    def search_outcome(
        self,
        query: str,
        snapshot: RecordSnapshot,
        language: str = "en",
    ) -> SearchOutcome:
        return self.pipeline.run(query, snapshot, language=language)

    def translate_text(self, text: str, from_language: str, to_language: str) -> str:
        """Translate between English and Spanish; returns ``text`` unchanged on failure."""
        if from_language == to_language:
            return text
        system = translation_instructions(from_language, to_language)
        try:
            translated = self._complete(system, text)
        except Exception as exc:
            logger.error("Translation error: %s", exc)
            return text
        return translated.strip() or text

    def verify_checkin_photo(self, image_data: str) -> PhotoVerificationResult:
        try:
            image = split_image_data(image_data)
            logger.info(
                "Verifying check-in photo - Type: %s, Size: %d characters",
                image.media_type,
                len(image.data),
            )
            raw = self._complete(
                PHOTO_VERIFICATION_INSTRUCTIONS,
                "Analyze this check-in photo for client verification:",
                json_response=True,
                image=image,
            )
            parsed = parse_json_output(raw)
            if not isinstance(parsed, dict):
                raise ProviderError("Photo verification response was not a JSON object")
        except Exception as exc:
            logger.error("Photo verification error: %s", exc)
            if development_mode():
                logger.info("Development mode - returning mock successful verification")
                return PhotoVerificationResult(
                    is_valid_photo=True,
                    confidence=0.85,
                    person_detected=True,
                    quality="medium",
                    issues=[],
                )
            return PhotoVerificationResult(
                is_valid_photo=False,
                confidence=0.0,
                person_detected=False,
                quality="low",
                issues=[f"Failed to analyze photo: {exc}"],
            )

        return PhotoVerificationResult(
            is_valid_photo=parsed.get("isValidPhoto") is True,
            confidence=_as_confidence(parsed.get("confidence")),
            person_detected=parsed.get("personDetected") is True,
            quality=_pick_choice(parsed.get("quality"), QUALITY_LEVELS, "low"),
            issues=_as_str_list(parsed.get("issues")),
        )

    def generate_help(self, question: str, language: str = "en") -> str:
        check_language(language)
        try:
            answer = self._complete(help_instructions(language), question)
        except Exception as exc:
            logger.error("Help generation error: %s", exc)
            return HELP_APOLOGY[language]
        return answer.strip() or HELP_APOLOGY[language]

    def analyze_case_compliance(self, case: Case, checkins: Sequence[CheckIn]) -> ComplianceAnalysis:
        user = (
            "Analyze this case:\n"
            f"Case Data: {json.dumps(asdict(case), default=str)}\n"
            f"Check-in History: {json.dumps([asdict(item) for item in checkins], default=str)}"
        )
        try:
            raw = self._complete(COMPLIANCE_INSTRUCTIONS, user, json_response=True)
            parsed = parse_json_output(raw)
            if not isinstance(parsed, dict):
                raise ProviderError("Compliance response was not a JSON object")
        except Exception as exc:
            logger.error("Compliance analysis error: %s", exc)
            return ComplianceAnalysis(
                compliance_status="warning",
                risk_level="medium",
                insights=["Unable to analyze compliance data"],
                recommendations=["Please review case manually"],
            )

        return ComplianceAnalysis(
            compliance_status=_pick_choice(parsed.get("complianceStatus"), COMPLIANCE_STATUSES, "warning"),
            risk_level=_pick_choice(parsed.get("riskLevel"), RISK_LEVELS, "medium"),
            insights=_as_str_list(parsed.get("insights")),
            recommendations=_as_str_list(parsed.get("recommendations")),
        )


def results_payload(results: Sequence[SearchResult]) -> Dict[str, Any]:
    return {"results": [result.to_dict() for result in results]}
