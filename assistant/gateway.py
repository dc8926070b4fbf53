import logging
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from google import genai
from google.genai import types

from config import AI_SETTINGS

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK = "The analysis could not be generated. Please check the API key."


@dataclass(frozen=True)
class SearchSource:
    title: str
    url: str


@dataclass(frozen=True)
class AIResponse:
    text: str
    sources: Tuple[SearchSource, ...] = ()
    ok: bool = True


def _grounding_sources(response: Any) -> Tuple[SearchSource, ...]:
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return ()
    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []
    sources = []
    for chunk in chunks:
        web = getattr(chunk, "web", None)
        uri = getattr(web, "uri", "") if web is not None else ""
        if uri:
            sources.append(SearchSource(title=getattr(web, "title", "") or "", url=uri))
    return tuple(sources)


def build_config(search: bool, json_output: bool) -> Optional[types.GenerateContentConfig]:
    """Request options for one call.

    Search grounding cannot be combined with a JSON response mime type on
    Gemini 2.x, so grounded calls ask for JSON in the prompt only.
    """
    if search:
        return types.GenerateContentConfig(tools=[types.Tool(google_search=types.GoogleSearch())])
    if json_output:
        return types.GenerateContentConfig(response_mime_type="application/json")
    return None


class AIGateway:
    """Single request/response facade over a Gemini model.

    Failures never escape: a missing key, an API error or an empty answer all
    come back as AIResponse(fallback, ok=False).
    """

    def __init__(self, api_key: str, model_name: str = "gemini-2.5-flash", client: Any = None):
        self.model_name = model_name
        self.available = bool(api_key) or client is not None
        if client is None and api_key:
            client = genai.Client(api_key=api_key)
        self._client = client

    @classmethod
    def from_env(cls) -> "AIGateway":
        return cls(api_key=AI_SETTINGS["api_key"], model_name=AI_SETTINGS["model"])

    def generate(
        self,
        prompt: str,
        *,
        search: bool = False,
        json_output: bool = False,
        fallback: str = DEFAULT_FALLBACK,
    ) -> AIResponse:
        if not self.available:
            logger.warning("AI request skipped: no GOOGLE_API_KEY configured")
            return AIResponse(text=fallback, ok=False)

        logger.debug("AI request model=%s search=%s json=%s chars=%d",
                     self.model_name, search, json_output, len(prompt))
        try:
            response = self._client.models.generate_content(
                model=self.model_name,
                contents=prompt,
                config=build_config(search, json_output),
            )
            text = response.text
        except Exception:
            logger.exception("AI request failed (model=%s)", self.model_name)
            return AIResponse(text=fallback, ok=False)

        if not text or not text.strip():
            logger.error("AI request returned an empty answer (model=%s)", self.model_name)
            return AIResponse(text=fallback, ok=False)

        return AIResponse(text=text.strip(), sources=_grounding_sources(response) if search else ())
