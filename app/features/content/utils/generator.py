import json
import logging

import httpx

from app.errors import ContentGenerationFailed
from app.features.content.schemas.content_schema import ContentGenerationRequest, GeneratedContent

logger = logging.getLogger(__name__)

LENGTHS = {
    "short": "Short (around 50-100 words)",
    "medium": "Medium (around 100-200 words)",
    "long": "Long (around 300-500 words)",
}


def language_name(language: str) -> str:
    return "Thai" if language == "th" else "English"


def default_title(params: ContentGenerationRequest) -> str:
    return f"{params.content_type} - {params.business_type} ({language_name(params.language)})"


def build_messages(params: ContentGenerationRequest) -> list[dict]:
    system = (
        f"You write {language_name(params.language)} marketing content for small businesses. "
        'Reply with a JSON object with "title" and "content" fields.'
    )
    user = "\n".join([
        f"Content Type: {params.content_type}",
        f"Business Type: {params.business_type}",
        f"Tone: {params.tone}",
        f"Length: {LENGTHS.get(params.length, 'Medium length')}",
        f"Additional Details: {params.details or 'No specific details provided'}",
    ])
    return [{"role": "system", "content": system}, {"role": "user", "content": user}]


def parse_completion(data: dict, params: ContentGenerationRequest) -> GeneratedContent:
    raw = data["choices"][0]["message"]["content"] or ""
    try:
        parsed = json.loads(raw)
    except ValueError:
        return GeneratedContent(title=default_title(params), content=raw)
    if not isinstance(parsed, dict):
        return GeneratedContent(title=default_title(params), content=raw)
    return GeneratedContent(
        title=parsed.get("title") or default_title(params),
        content=parsed.get("content") or "",
    )


class ContentGenerator:
    """Chat-completions client; the only contract callers rely on is generate()."""

    def __init__(self, api_key: str, model: str = "gpt-4o", base_url: str = "https://api.openai.com/v1"):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")

    async def generate(self, params: ContentGenerationRequest) -> GeneratedContent:
        if not self.api_key:
            logger.error("Content generation requested but no OpenAI API key is configured")
            raise ContentGenerationFailed()

        payload = {
            "model": self.model,
            "messages": build_messages(params),
            "temperature": 0.7,
            "response_format": {"type": "json_object"},
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        try:
            async with httpx.AsyncClient() as client:
                resp = await client.post(
                    f"{self.base_url}/chat/completions",
                    json=payload,
                    headers=headers,
                    timeout=60,
                )
        except httpx.HTTPError as exc:
            logger.error("OpenAI request failed: %s", exc)
            raise ContentGenerationFailed() from exc

        if resp.status_code != 200:
            logger.error("OpenAI returned status %s", resp.status_code)
            raise ContentGenerationFailed()

        try:
            return parse_completion(resp.json(), params)
        except (KeyError, IndexError, ValueError) as exc:
            logger.error("Unexpected OpenAI response shape: %s", exc)
            raise ContentGenerationFailed() from exc
