from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, TypeVar, Union

from openai import AsyncOpenAI
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are the promo copywriter for Akustik Produkt, a Zurich underground techno label. Return only valid JSON."""

DJ_PROMO_PROMPT = """
Write a DJ promo kit for the track below, aimed at club DJs and record pools.

Constraints:
- Underground, credible tone; no corporate language
- clubHype: one punchy line announcing the release
- poolDescription: 1-2 sentences describing sound and best set slot
- micShoutout: a short line a DJ could say on the mic
- targetBpm: a BPM range, e.g. "125-130 BPM"
- mixTips: one practical tip for mixing the track in

Inputs:
Track title: {subject_title}
Artist: {subject_author}
Vibe: {mood}
""".strip()

SOCIAL_UPLINK_PROMPT = """
Write release posts for the track below, one per platform.

Constraints:
- facebook: informative caption plus 3-6 hashtags
- instagram: aesthetic caption with emojis plus 5-10 hashtags
- tiktok: a scroll-stopping hook, 3-6 tags without '#', and an audio suggestion
- Hashtags in facebook and instagram start with '#'

Inputs:
Track title: {subject_title}
Artist: {subject_author}
Vibe: {mood}
""".strip()

GROWTH_CONTENT_PROMPT = """
Write one growth-marketing post for a music audience.

Constraints:
- Structure the content as Hook, Problem, Solution, CTA
- title: short and specific
- viralScore: your estimate from 0 to 100 of how shareable the post is

Inputs:
Topic: {subject_title}
Format: {mood}
""".strip()


class ContentKind(str, Enum):
    dj_promo = "dj_promo"
    social_uplink = "social_uplink"
    growth_content = "growth_content"


class GenerationFailure(str, Enum):
    missing_credential = "missing_credential"
    invalid_input = "invalid_input"
    transport_fault = "transport_fault"
    malformed_response = "malformed_response"


REQUIRED_FIELDS: dict[ContentKind, tuple[str, ...]] = {
    ContentKind.dj_promo: ("subject_title", "subject_author", "mood"),
    ContentKind.social_uplink: ("subject_title", "subject_author", "mood"),
    ContentKind.growth_content: ("subject_title", "mood"),
}


@dataclass(frozen=True)
class GenerationRequest:
    subject_title: str | None
    subject_author: str | None
    mood: str | None
    content_kind: ContentKind

    def missing_fields(self) -> list[str]:
        missing = []
        for name in REQUIRED_FIELDS[self.content_kind]:
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                missing.append(name)
        return missing

    def prompt_context(self) -> dict[str, str]:
        return {
            "subject_title": (self.subject_title or "").strip(),
            "subject_author": (self.subject_author or "").strip(),
            "mood": (self.mood or "").strip(),
        }


NonEmptyStr = Annotated[str, Field(min_length=1)]
# int first so an integer score is stored as sent.
ViralScore = Union[Annotated[int, Field(ge=0, le=100)], Annotated[float, Field(ge=0, le=100)]]


class _GeneratedPayload(BaseModel):
    # Aliases only: snake_case keys from the provider count as extra keys.
    model_config = ConfigDict(extra="forbid", strict=True)


class DjPromoKit(_GeneratedPayload):
    club_hype: NonEmptyStr = Field(alias="clubHype")
    pool_description: NonEmptyStr = Field(alias="poolDescription")
    mic_shoutout: NonEmptyStr = Field(alias="micShoutout")
    target_bpm: NonEmptyStr = Field(alias="targetBpm")
    mix_tips: NonEmptyStr = Field(alias="mixTips")


class PlatformPost(_GeneratedPayload):
    caption: NonEmptyStr
    hashtags: list[str]


class TikTokPost(_GeneratedPayload):
    hook: NonEmptyStr
    tags: list[str]
    audio_suggestion: NonEmptyStr = Field(alias="audioSuggestion")


class SocialUplinkBundle(_GeneratedPayload):
    facebook: PlatformPost
    instagram: PlatformPost
    tiktok: TikTokPost


class GrowthContent(_GeneratedPayload):
    title: NonEmptyStr
    content: NonEmptyStr
    viral_score: ViralScore = Field(alias="viralScore")


PayloadT = TypeVar("PayloadT", bound=_GeneratedPayload)

PAYLOAD_MODELS: dict[ContentKind, type[_GeneratedPayload]] = {
    ContentKind.dj_promo: DjPromoKit,
    ContentKind.social_uplink: SocialUplinkBundle,
    ContentKind.growth_content: GrowthContent,
}

PROMPT_TEMPLATES: dict[ContentKind, str] = {
    ContentKind.dj_promo: DJ_PROMO_PROMPT,
    ContentKind.social_uplink: SOCIAL_UPLINK_PROMPT,
    ContentKind.growth_content: GROWTH_CONTENT_PROMPT,
}


class ContentGeneratorService:
    """Generate promo content with the OpenAI responses API.

    Every failure (missing key, invalid input, provider error or timeout,
    malformed output) is logged with its failure kind and returned as ``None``.
    """

    def __init__(
        self,
        api_key: str | None,
        model: str = "gpt-4o",
        timeout_seconds: float = 30.0,
        max_output_tokens: int = 800,
        client: AsyncOpenAI | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._timeout_seconds = timeout_seconds
        self._max_output_tokens = max_output_tokens
        if client is None and api_key:
            client = AsyncOpenAI(api_key=api_key, max_retries=0)
        self._client = client

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def generate_dj_promo(
        self, track_title: str | None, artist: str | None, vibe: str | None
    ) -> DjPromoKit | None:
        request = GenerationRequest(track_title, artist, vibe, ContentKind.dj_promo)
        return await self._generate(request, DjPromoKit)

    async def generate_social_uplink(
        self, track_title: str | None, artist: str | None, vibe: str | None
    ) -> SocialUplinkBundle | None:
        request = GenerationRequest(track_title, artist, vibe, ContentKind.social_uplink)
        return await self._generate(request, SocialUplinkBundle)

    async def generate_growth_content(
        self, topic: str | None, content_format: str | None = "educational"
    ) -> GrowthContent | None:
        request = GenerationRequest(topic, None, content_format, ContentKind.growth_content)
        return await self._generate(request, GrowthContent)

    async def generate(self, request: GenerationRequest) -> _GeneratedPayload | None:
        return await self._generate(request, PAYLOAD_MODELS[request.content_kind])

    def _log_failure(
        self, request: GenerationRequest, failure: GenerationFailure, reason: str
    ) -> None:
        logger.warning(
            "Content generation failed: %s",
            reason,
            extra={"failure_kind": failure.value, "content_kind": request.content_kind.value},
        )

    def _build_input(self, request: GenerationRequest) -> list[dict[str, str]]:
        prompt = PROMPT_TEMPLATES[request.content_kind].format(**request.prompt_context())
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]

    @staticmethod
    def _output_format(request: GenerationRequest, model: type[_GeneratedPayload]) -> dict[str, Any]:
        return {
            "format": {
                "type": "json_schema",
                "name": request.content_kind.value,
                "schema": model.model_json_schema(by_alias=True),
                "strict": False,
            }
        }

    async def _generate(
        self, request: GenerationRequest, model: type[PayloadT]
    ) -> PayloadT | None:
        if not self._api_key or self._client is None:
            self._log_failure(request, GenerationFailure.missing_credential, "API key is not configured.")
            return None

        missing = request.missing_fields()
        if missing:
            self._log_failure(
                request,
                GenerationFailure.invalid_input,
                f"Missing required fields: {', '.join(missing)}.",
            )
            return None

        try:
            response = await asyncio.wait_for(
                self._client.responses.create(
                    model=self._model,
                    input=self._build_input(request),
                    text=self._output_format(request, model),
                    temperature=0.7,
                    max_output_tokens=self._max_output_tokens,
                ),
                timeout=self._timeout_seconds,
            )
        except asyncio.TimeoutError:
            self._log_failure(
                request,
                GenerationFailure.transport_fault,
                f"OpenAI request timed out after {self._timeout_seconds}s.",
            )
            return None
        except Exception as exc:  # noqa: BLE001 - any provider error is a transport fault
            self._log_failure(request, GenerationFailure.transport_fault, f"OpenAI request failed: {exc}")
            return None

        content = getattr(response, "output_text", None)
        if not isinstance(content, str) or not content.strip():
            self._log_failure(request, GenerationFailure.malformed_response, "OpenAI returned empty response.")
            return None

        try:
            return model.model_validate_json(content.strip())
        except ValidationError as exc:
            self._log_failure(
                request,
                GenerationFailure.malformed_response,
                f"OpenAI returned invalid output: {exc.error_count()} validation error(s).",
            )
            return None
