"""Tests for the content assistant."""

import json
from collections.abc import Callable

import httpx
import pytest
from fastapi import FastAPI
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from sitecms.config import Settings
from sitecms.core.exceptions import AdapterError, ValidationError
from sitecms.modules.assistant.adapter import (
    AssistantKind,
    AssistantTask,
    ContentAssistant,
    build_prompt,
    get_content_assistant,
    parse_facts,
    parse_json_output,
)
from sitecms.modules.assistant.pages import extract_page
from tests.fixtures import AIGenerationFactory

Handler = Callable[[httpx.Request], httpx.Response]


def completion(content: str | None) -> httpx.Response:
    return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})


def make_assistant(handler: Handler, **overrides) -> ContentAssistant:
    config = Settings(ai_provider="openai", ai_api_key="test-key", **overrides)
    return ContentAssistant(config=config, transport=httpx.MockTransport(handler))


class FakeProvider:
    """Records provider calls and answers with the configured handler."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.handler: Handler = lambda request: completion("<p>Generated</p>")

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def payloads(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests if r.method == "POST"]


@pytest.fixture
def provider(app: FastAPI) -> FakeProvider:
    fake = FakeProvider()
    assistant = make_assistant(fake)
    app.dependency_overrides[get_content_assistant] = lambda: assistant
    return fake


# ============================================================================
# Prompt builders
# ============================================================================


@pytest.mark.unit
class TestBuildPrompt:
    def test_draft_uses_word_count_and_keywords(self) -> None:
        prompt = build_prompt(AssistantTask(
            kind=AssistantKind.DRAFT,
            input="Arbitration in the UAE",
            params={"length": "short", "tone": "friendly", "keywords": ["DIAC", "DIFC"]},
        ))

        assert "500-word article" in prompt.user
        assert prompt.max_tokens == 1000
        assert "friendly tone" in prompt.system
        assert "DIAC, DIFC" in prompt.system

    def test_draft_follows_outline(self) -> None:
        prompt = build_prompt(AssistantTask(
            kind=AssistantKind.DRAFT,
            input="Venture term sheets",
            params={"outline": "1. Valuation\n2. Control"},
        ))

        assert "following this outline" in prompt.user
        assert "2. Control" in prompt.user

    def test_draft_rejects_unknown_tone(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            build_prompt(AssistantTask(
                kind=AssistantKind.DRAFT, input="Topic", params={"tone": "sarcastic"}
            ))

        assert exc_info.value.errors[0]["field"] == "params.tone"

    def test_translate_rejects_same_language(self) -> None:
        with pytest.raises(ValidationError):
            build_prompt(AssistantTask(
                kind=AssistantKind.TRANSLATE, input="Hello", params={"source": "en", "target": "en"}
            ))

    def test_translate_preserves_markup_and_lowers_temperature(self) -> None:
        prompt = build_prompt(AssistantTask(
            kind=AssistantKind.TRANSLATE, input="<h1>Hello</h1>", params={"target": "ar"}
        ))

        assert "Keep all HTML tags" in prompt.user
        assert "Arabic" in prompt.system
        assert prompt.temperature == 0.3

    def test_extract_truncates_long_input(self) -> None:
        prompt = build_prompt(AssistantTask(
            kind=AssistantKind.EXTRACT, input="x" * 20000, params={"target": "facts"}
        ))

        assert prompt.json_output is True
        assert prompt.user.count("x") <= 12000 + 10

    def test_improve_uses_instructions(self) -> None:
        prompt = build_prompt(AssistantTask(
            kind=AssistantKind.IMPROVE, input="Draft text", params={"instructions": "Shorten it"}
        ))

        assert "Shorten it" in prompt.user

    def test_blank_input_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            build_prompt(AssistantTask(kind=AssistantKind.IMPROVE, input="   "))


@pytest.mark.unit
class TestExtractPage:
    def test_drops_scripts_and_page_chrome(self) -> None:
        html = (
            "<html><head><title>Site</title><style>p{}</style><script>alert(1)</script></head>"
            "<body><nav>Home | About</nav><header>Banner</header>"
            "<h1>Title</h1>\n<p>Body   text</p><aside>Related</aside>"
            "<footer>Copyright</footer></body></html>"
        )

        assert extract_page(html).text == "Title Body text"

    def test_entities_are_decoded(self) -> None:
        page = extract_page("<p>Smith &amp; Jones &mdash; LLP</p>")

        assert page.text == "Smith & Jones — LLP"

    def test_attribute_values_do_not_leak(self) -> None:
        assert extract_page('<a title="a > b">Link</a>').text == "Link"

    def test_open_graph_metadata_wins(self) -> None:
        html = (
            '<html lang="ar-AE"><head><title>Fallback</title>'
            '<meta property="og:title" content="Arbitration Services">'
            '<meta property="og:description" content="Dispute resolution.">'
            '<meta name="description" content="Ignored">'
            '<meta property="og:site_name" content="Law Office">'
            '<meta property="og:image" content="https://example.com/og.png">'
            "</head><body><h1>Heading</h1><p>One two three</p></body></html>"
        )

        page = extract_page(html)

        assert page.title == "Arbitration Services"
        assert page.description == "Dispute resolution."
        assert page.language == "ar"
        assert page.site_name == "Law Office"
        assert page.image_url == "https://example.com/og.png"
        assert page.word_count == 4

    def test_metadata_fallbacks(self) -> None:
        html = (
            '<html><head><title>Page title</title>'
            '<meta name="description" content="Plain description">'
            '<meta property="og:locale" content="en_US">'
            "</head><body><p>Text</p></body></html>"
        )

        page = extract_page(html)

        assert page.title == "Page title"
        assert page.description == "Plain description"
        assert page.language == "en"
        assert page.site_name is None


@pytest.mark.unit
def test_parse_json_output_rejects_prose() -> None:
    with pytest.raises(AdapterError):
        parse_json_output("Here are the facts: none")


@pytest.mark.unit
def test_parse_facts_accepts_statement_objects() -> None:
    output = json.dumps([{"statement": " Founded in 2010. "}, {"statement": ""}, "Offices in Dubai."])

    assert parse_facts(output) == ["Founded in 2010.", "Offices in Dubai."]


# ============================================================================
# Adapter
# ============================================================================


@pytest.mark.unit
class TestContentAssistant:
    @pytest.mark.asyncio
    async def test_generate_posts_chat_completion(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return completion("  <p>Article</p>  ")

        assistant = make_assistant(handler, ai_api_base_url="https://llm.example.com/v1/")

        output = await assistant.generate(AssistantTask(kind=AssistantKind.DRAFT, input="Topic"))

        assert output == "<p>Article</p>"
        assert str(seen[0].url) == "https://llm.example.com/v1/chat/completions"
        assert seen[0].headers["Authorization"] == "Bearer test-key"
        payload = json.loads(seen[0].content)
        assert payload["max_tokens"] == 2000
        assert payload["messages"][0]["role"] == "system"

    @pytest.mark.asyncio
    async def test_disabled_provider_raises(self) -> None:
        assistant = ContentAssistant(config=Settings(ai_provider="disabled"))

        with pytest.raises(AdapterError):
            await assistant.generate(AssistantTask(kind=AssistantKind.DRAFT, input="Topic"))

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(500, text="upstream exploded"),
            httpx.Response(200, text="not json"),
            httpx.Response(200, json={"choices": []}),
            completion(""),
            completion(None),
        ],
    )
    async def test_bad_provider_answers_raise(self, response: httpx.Response) -> None:
        assistant = make_assistant(lambda request: response)

        with pytest.raises(AdapterError):
            await assistant.generate(AssistantTask(kind=AssistantKind.IMPROVE, input="Text"))

    @pytest.mark.asyncio
    async def test_timeout_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        assistant = make_assistant(handler)

        with pytest.raises(AdapterError):
            await assistant.generate(AssistantTask(kind=AssistantKind.IMPROVE, input="Text"))

    @pytest.mark.asyncio
    async def test_fetch_page_rejects_non_html(self) -> None:
        assistant = make_assistant(
            lambda request: httpx.Response(
                200, json={"a": 1}, headers={"content-type": "application/json"}
            )
        )

        with pytest.raises(ValidationError):
            await assistant.fetch_page("https://example.com/data.json")

    @pytest.mark.asyncio
    async def test_fetch_page_failure_is_adapter_error(self) -> None:
        assistant = make_assistant(lambda request: httpx.Response(404))

        with pytest.raises(AdapterError) as exc_info:
            await assistant.fetch_page("https://example.com/missing")

        assert exc_info.value.error_detail["service"] == "page_fetch"


# ============================================================================
# API
# ============================================================================


@pytest.mark.asyncio
async def test_generate_records_completed_generation(
    admin_client: AsyncClient, provider: FakeProvider
) -> None:
    response = await admin_client.post(
        "/api/admin/ai/generate",
        json={"kind": "DRAFT", "input": "Arbitration in the UAE", "params": {"length": "long"}},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["output"] == "<p>Generated</p>"
    assert provider.payloads[0]["max_tokens"] == 4000

    response = await admin_client.get("/api/admin/ai/generations")
    generations = response.json()["items"]
    assert len(generations) == 1
    assert generations[0]["id"] == data["generation_id"]
    assert generations[0]["status"] == "COMPLETED"
    assert generations[0]["kind"] == "DRAFT"
    assert generations[0]["tokens_used"] > 0
    assert generations[0]["completed_at"] is not None


@pytest.mark.asyncio
async def test_provider_failure_returns_502_and_records_failure(
    admin_client: AsyncClient, provider: FakeProvider
) -> None:
    provider.handler = lambda request: httpx.Response(500, text="boom")

    response = await admin_client.post(
        "/api/admin/ai/generate", json={"kind": "IMPROVE", "input": "Some text"}
    )

    assert response.status_code == 502
    assert response.headers["content-type"].startswith("application/problem+json")

    generations = (await admin_client.get("/api/admin/ai/generations")).json()["items"]
    assert [g["status"] for g in generations] == ["FAILED"]
    assert generations[0]["output"] is None
    assert generations[0]["error"]


@pytest.mark.asyncio
async def test_disabled_assistant_returns_502(admin_client: AsyncClient, app: FastAPI) -> None:
    app.dependency_overrides[get_content_assistant] = lambda: ContentAssistant(
        config=Settings(ai_provider="disabled")
    )

    response = await admin_client.post(
        "/api/admin/ai/generate", json={"kind": "DRAFT", "input": "Topic"}
    )

    assert response.status_code == 502


@pytest.mark.asyncio
async def test_translate(admin_client: AsyncClient, provider: FakeProvider) -> None:
    provider.handler = lambda request: completion("<p>مرحبا</p>")

    response = await admin_client.post(
        "/api/admin/ai/translate", json={"text": "<p>Hello</p>", "target": "ar"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["translated"] == "<p>مرحبا</p>"
    assert data["source"] == "en"
    assert data["target"] == "ar"
    assert provider.payloads[0]["temperature"] == 0.3


@pytest.mark.asyncio
async def test_translate_same_language_is_rejected_before_recording(
    admin_client: AsyncClient, provider: FakeProvider
) -> None:
    response = await admin_client.post(
        "/api/admin/ai/translate", json={"text": "Hello", "source": "en", "target": "en"}
    )

    assert response.status_code == 400
    assert provider.requests == []
    generations = (await admin_client.get("/api/admin/ai/generations")).json()
    assert generations["total"] == 0


@pytest.mark.asyncio
async def test_facts_are_numbered_and_unverified(
    admin_client: AsyncClient, provider: FakeProvider
) -> None:
    provider.handler = lambda request: completion(
        json.dumps({"facts": ["The firm was founded in 2010.", "", "It has offices in Dubai."]})
    )

    response = await admin_client.post(
        "/api/admin/ai/facts", json={"content": "Long article text"}
    )

    assert response.status_code == 200
    assert response.json()["facts"] == [
        {"id": "fact-1", "statement": "The firm was founded in 2010.", "verified": False},
        {"id": "fact-2", "statement": "It has offices in Dubai.", "verified": False},
    ]
    assert provider.payloads[0]["response_format"] == {"type": "json_object"}


@pytest.mark.asyncio
async def test_facts_with_malformed_output_returns_502_and_records_failure(
    admin_client: AsyncClient, provider: FakeProvider
) -> None:
    provider.handler = lambda request: completion("I could not find any facts.")

    response = await admin_client.post("/api/admin/ai/facts", json={"content": "Text"})

    assert response.status_code == 502

    generations = (await admin_client.get("/api/admin/ai/generations")).json()["items"]
    assert [g["status"] for g in generations] == ["FAILED"]
    assert generations[0]["output"] == "I could not find any facts."
    assert generations[0]["error"] == "Content assistant returned malformed JSON"


@pytest.mark.asyncio
async def test_extract_url(admin_client: AsyncClient, provider: FakeProvider) -> None:
    metadata = {
        "title": "Arbitration services",
        "description": "Dispute resolution in the Gulf.",
        "keywords": ["arbitration"],
        "summary": "A firm page.",
    }

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(
                200,
                text=(
                    '<html lang="en"><body><nav>Menu</nav><h1>Arbitration</h1>'
                    "<p>We resolve disputes &amp; claims.</p></body></html>"
                ),
                headers={"content-type": "text/html; charset=utf-8"},
            )
        return completion(json.dumps(metadata))

    provider.handler = handler

    response = await admin_client.post(
        "/api/admin/ai/extract-url", json={"url": "https://example.com/services"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["url"] == "https://example.com/services"
    assert data["extracted"] == metadata
    assert data["page"]["title"] == "Arbitration"
    assert data["page"]["language"] == "en"
    assert data["page"]["word_count"] == 6
    prompt = provider.payloads[0]["messages"][1]["content"]
    assert "We resolve disputes & claims." in prompt
    assert "Menu" not in prompt
    assert "<h1>" not in prompt


@pytest.mark.asyncio
async def test_extract_url_unreachable_page_returns_502(
    admin_client: AsyncClient, provider: FakeProvider
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("no route", request=request)

    provider.handler = handler

    response = await admin_client.post(
        "/api/admin/ai/extract-url", json={"url": "https://unreachable.example.com/"}
    )

    assert response.status_code == 502
    assert response.json()["service"] == "page_fetch"


@pytest.mark.asyncio
async def test_ai_routes_require_admin(client: AsyncClient) -> None:
    response = await client.post("/api/admin/ai/generate", json={"kind": "DRAFT", "input": "x"})

    assert response.status_code == 401


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [None, {}, {"fact_id": "fact-1"}, {"anything": [1, 2, 3]}])
async def test_fact_approve_always_succeeds(client: AsyncClient, body: dict | None) -> None:
    response = await client.post("/api/admin/ai/facts/approve", json=body)

    assert response.status_code == 200
    assert response.json() == {"approved": True, "message": "Fact approved successfully"}


@pytest.mark.asyncio
async def test_list_generations_by_kind(admin_client: AsyncClient, db_session: AsyncSession) -> None:
    db_session.add_all([
        AIGenerationFactory(kind="DRAFT"),
        AIGenerationFactory(kind="TRANSLATE"),
        AIGenerationFactory(kind="TRANSLATE"),
    ])
    await db_session.commit()

    response = await admin_client.get("/api/admin/ai/generations", params={"kind": "TRANSLATE"})

    assert response.status_code == 200
    assert response.json()["total"] == 2
    assert {g["kind"] for g in response.json()["items"]} == {"TRANSLATE"}
