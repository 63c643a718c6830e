"""Content assistant adapter.

Delegates drafting, translation, extraction and editing to an
OpenAI-compatible chat completions API over httpx. No text is produced
locally: every failure of the provider surfaces as ``AdapterError``.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import httpx

from sitecms.config import Settings, settings
from sitecms.core.exceptions import AdapterError, ValidationError
from sitecms.core.logging import get_logger
from sitecms.modules.assistant.pages import PageContent, extract_page

logger = get_logger(__name__)


class AssistantKind(str, Enum):
    """What the assistant is asked to do."""

    DRAFT = "DRAFT"
    TRANSLATE = "TRANSLATE"
    EXTRACT = "EXTRACT"
    IMPROVE = "IMPROVE"


LANGUAGES = {"en": "English", "ar": "Arabic"}
TONES = ("professional", "casual", "technical", "friendly")
WORD_COUNTS = {"short": 500, "medium": 1000, "long": 2000}
EXTRACT_TARGETS = ("summary", "facts", "metadata")

# Input sent for extraction is capped; long pages are truncated
MAX_EXTRACT_CHARS = 12000


@dataclass
class AssistantTask:
    kind: AssistantKind
    input: str
    params: dict[str, Any] = field(default_factory=dict)


@dataclass
class Prompt:
    """System/user message pair plus sampling options for one task."""

    system: str
    user: str
    temperature: float | None = None
    max_tokens: int | None = None
    json_output: bool = False

    @property
    def text(self) -> str:
        return f"{self.system}\n\n{self.user}"

    def messages(self) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": self.system},
            {"role": "user", "content": self.user},
        ]


# ============================================================================
# Prompt builders
# ============================================================================


def _choice(params: dict[str, Any], name: str, allowed, default: str) -> str:
    value = params.get(name) or default
    if value not in allowed:
        raise ValidationError(
            f"Invalid {name}: {value}",
            errors=[{"field": f"params.{name}", "message": f"Allowed: {', '.join(allowed)}"}],
        )
    return value


def _draft_prompt(task: AssistantTask) -> Prompt:
    params = task.params
    tone = _choice(params, "tone", TONES, "professional")
    length = _choice(params, "length", tuple(WORD_COUNTS), "medium")
    language = _choice(params, "language", tuple(LANGUAGES), "en")
    keywords = [str(k) for k in params.get("keywords") or []]
    outline = params.get("outline")
    word_count = WORD_COUNTS[length]

    system_lines = [
        "You are an expert content writer creating high-quality articles for a legal practice.",
        f"Write in a {tone} tone.",
        f"Target language: {LANGUAGES[language]}.",
    ]
    if keywords:
        system_lines.append(f"Include these keywords naturally: {', '.join(keywords)}")
    system_lines.append(
        "Format the output in clean HTML with proper headings, paragraphs, and lists."
    )

    if outline:
        user = (
            f'Write a {word_count}-word article about "{task.input}" '
            f"following this outline:\n\n{outline}"
        )
    else:
        user = (
            f'Write a {word_count}-word article about "{task.input}". '
            "Include an engaging introduction, a well-structured body with headings, "
            "and a strong conclusion."
        )

    return Prompt(system="\n".join(system_lines), user=user, max_tokens=word_count * 2)


def _translate_prompt(task: AssistantTask) -> Prompt:
    params = task.params
    source = _choice(params, "source", tuple(LANGUAGES), "en")
    target = _choice(params, "target", tuple(LANGUAGES), "ar")
    if source == target:
        raise ValidationError(
            "Source and target languages must differ",
            errors=[{"field": "target", "message": f"Already in '{source}'"}],
        )
    preserve = params.get("preserve_formatting", True)

    system_lines = [
        f"You are an expert translator specializing in "
        f"{LANGUAGES[source]} to {LANGUAGES[target]} translation.",
        "Preserve all HTML formatting, tags, and structure exactly."
        if preserve
        else "Translate the text naturally.",
        "Maintain the tone and style of the original content.",
    ]
    if preserve:
        user = (
            f"Translate the following HTML content from {source} to {target}. "
            f"Keep all HTML tags exactly as they are:\n\n{task.input}"
        )
    else:
        user = f"Translate the following text from {source} to {target}:\n\n{task.input}"

    return Prompt(system="\n".join(system_lines), user=user, temperature=0.3)


def _extract_prompt(task: AssistantTask) -> Prompt:
    target = _choice(task.params, "target", EXTRACT_TARGETS, "summary")
    content = task.input[:MAX_EXTRACT_CHARS]

    if target == "facts":
        return Prompt(
            system="You are a careful research assistant. Extract only verifiable factual statements.",
            user=(
                "List the key factual statements made in the content below. "
                'Respond as JSON: {"facts": ["...", "..."]}\n\n'
                f"Content:\n{content}"
            ),
            temperature=0.2,
            json_output=True,
        )

    if target == "metadata":
        return Prompt(
            system="You are an SEO expert. Describe web pages with concise metadata.",
            user=(
                "Based on this page content, generate:\n"
                "1. A title (50-60 characters)\n"
                "2. A meta description (120-160 characters)\n"
                "3. 5-10 relevant keywords\n"
                "4. A two-sentence summary\n\n"
                'Respond as JSON: {"title": "...", "description": "...", '
                '"keywords": ["..."], "summary": "..."}\n\n'
                f"Content:\n{content}"
            ),
            temperature=0.5,
            json_output=True,
        )

    return Prompt(
        system="You are an expert editor. Summarize content faithfully and concisely.",
        user=f"Summarize the following content in one short paragraph:\n\n{content}",
        temperature=0.5,
    )


def _improve_prompt(task: AssistantTask) -> Prompt:
    instructions = task.params.get("instructions")
    system = (
        "You are an expert content editor. Improve articles while maintaining "
        "the author's voice and key points."
    )
    if instructions:
        user = (
            f"Improve this content following these instructions: {instructions}"
            f"\n\nContent:\n{task.input}"
        )
    else:
        user = (
            "Improve this content by:\n"
            "- Enhancing clarity and readability\n"
            "- Improving structure and flow\n"
            "- Strengthening the introduction and conclusion\n"
            "- Maintaining all key information\n\n"
            f"Content:\n{task.input}"
        )
    return Prompt(system=system, user=user)


PROMPT_BUILDERS = {
    AssistantKind.DRAFT: _draft_prompt,
    AssistantKind.TRANSLATE: _translate_prompt,
    AssistantKind.EXTRACT: _extract_prompt,
    AssistantKind.IMPROVE: _improve_prompt,
}


def build_prompt(task: AssistantTask) -> Prompt:
    """Prompt for a task.

    Raises:
        ValidationError: If the input is blank or a parameter is out of range
    """
    if not task.input or not task.input.strip():
        raise ValidationError(
            "Input is required",
            errors=[{"field": "input", "message": "Field is required"}],
        )
    return PROMPT_BUILDERS[AssistantKind(task.kind)](task)


# ============================================================================
# Adapter
# ============================================================================


class ContentAssistant:
    """Client for the generative-content provider."""

    def __init__(
        self,
        config: Settings = settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._transport = transport

    @property
    def is_enabled(self) -> bool:
        return self.config.ai_provider != "disabled"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.config.ai_request_timeout_seconds),
            transport=self._transport,
        )

    async def generate(self, task: AssistantTask) -> str:
        """Run one task against the provider and return the completion text.

        Raises:
            ValidationError: If the task parameters are invalid
            AdapterError: If the provider is disabled, unreachable or answers badly
        """
        prompt = build_prompt(task)

        if not self.is_enabled:
            raise AdapterError("Content assistant is disabled")

        payload: dict[str, Any] = {
            "model": self.config.ai_model,
            "messages": prompt.messages(),
            "temperature": (
                prompt.temperature if prompt.temperature is not None else self.config.ai_temperature
            ),
        }
        if prompt.max_tokens:
            payload["max_tokens"] = prompt.max_tokens
        if prompt.json_output:
            payload["response_format"] = {"type": "json_object"}

        url = f"{self.config.ai_api_base_url.rstrip('/')}/chat/completions"

        try:
            async with self._client() as client:
                response = await client.post(
                    url,
                    headers={
                        "Authorization": f"Bearer {self.config.ai_api_key}",
                        "Content-Type": "application/json",
                    },
                    json=payload,
                )
        except httpx.HTTPError as e:
            logger.error("adapter_request_failed", kind=task.kind, error=str(e))
            raise AdapterError("Content assistant request failed") from e

        if response.status_code != 200:
            logger.error(
                "adapter_error_response",
                kind=task.kind,
                status=response.status_code,
                body=response.text[:500],
            )
            raise AdapterError(f"Content assistant returned HTTP {response.status_code}")

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.error("adapter_malformed_response", kind=task.kind, error=str(e))
            raise AdapterError("Content assistant returned a malformed response") from e

        if not isinstance(content, str) or not content.strip():
            logger.error("adapter_empty_response", kind=task.kind)
            raise AdapterError("Content assistant returned an empty response")

        logger.info("adapter_request_completed", kind=task.kind, chars=len(content))
        return content.strip()

    async def fetch_page(self, url: str) -> PageContent:
        """Download a page and return its readable text and metadata.

        Raises:
            AdapterError: If the page cannot be fetched
            ValidationError: If the page is not HTML
        """
        try:
            async with self._client() as client:
                response = await client.get(url, follow_redirects=True)
        except httpx.HTTPError as e:
            logger.warning("page_fetch_failed", url=url, error=str(e))
            raise AdapterError("URL is not accessible", service="page_fetch") from e

        if response.status_code != 200:
            logger.warning("page_fetch_failed", url=url, status=response.status_code)
            raise AdapterError(
                f"URL answered HTTP {response.status_code}", service="page_fetch"
            )

        content_type = response.headers.get("content-type", "")
        if "html" not in content_type:
            raise ValidationError(
                "URL does not contain HTML content",
                errors=[{"field": "url", "message": f"Content type is '{content_type}'"}],
            )

        return extract_page(response.text)


def parse_json_output(output: str) -> Any:
    """Decode a JSON completion.

    Raises:
        AdapterError: If the completion is not JSON
    """
    try:
        return json.loads(output)
    except ValueError as e:
        logger.error("adapter_malformed_json", error=str(e))
        raise AdapterError("Content assistant returned malformed JSON") from e


def parse_metadata(output: str) -> dict[str, Any]:
    payload = parse_json_output(output)
    if not isinstance(payload, dict):
        raise AdapterError("Content assistant returned malformed metadata")
    return payload


def parse_facts(output: str) -> list[str]:
    """Statements from a facts completion, either a list or ``{"facts": [...]}``.

    Items may be plain strings or objects with a ``statement``; blank ones
    are dropped.
    """
    payload = parse_json_output(output)
    items = payload.get("facts") if isinstance(payload, dict) else payload
    if not isinstance(items, list):
        raise AdapterError("Content assistant returned malformed facts")

    statements = []
    for item in items:
        if isinstance(item, dict):
            item = item.get("statement")
        if isinstance(item, str) and item.strip():
            statements.append(item.strip())
    return statements


_assistant = ContentAssistant()


def get_content_assistant() -> ContentAssistant:
    """FastAPI dependency returning the configured assistant."""
    return _assistant
