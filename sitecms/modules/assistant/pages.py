"""Readable text and metadata from fetched HTML pages."""

from dataclasses import dataclass

from bs4 import BeautifulSoup

# Page chrome that never belongs to the article body
BOILERPLATE_TAGS = ["script", "style", "noscript", "nav", "header", "footer", "aside"]


@dataclass
class PageContent:
    text: str
    title: str | None = None
    description: str | None = None
    language: str | None = None
    site_name: str | None = None
    image_url: str | None = None

    @property
    def word_count(self) -> int:
        return len(self.text.split())


def _meta(soup: BeautifulSoup, **attrs: str) -> str | None:
    tag = soup.find("meta", attrs=attrs)
    if tag is None:
        return None
    content = (tag.get("content") or "").strip()
    return content or None


def _first(*values: str | None) -> str | None:
    for value in values:
        if value:
            return value
    return None


def extract_page(html: str) -> PageContent:
    """Parse a page into its visible text plus Open Graph metadata.

    Entities are decoded and attribute values never leak into the text.
    """
    soup = BeautifulSoup(html, "html.parser")

    h1 = soup.find("h1")
    title_tag = soup.find("title")
    html_tag = soup.find("html")

    lang = html_tag.get("lang") if html_tag is not None else None
    language = _first(lang, _meta(soup, property="og:locale"))
    if language:
        language = language.replace("_", "-").split("-")[0].lower()

    page = PageContent(
        text="",
        title=_first(
            _meta(soup, property="og:title"),
            _meta(soup, name="twitter:title"),
            h1.get_text(" ", strip=True) if h1 else None,
            title_tag.get_text(strip=True) if title_tag else None,
        ),
        description=_first(
            _meta(soup, property="og:description"),
            _meta(soup, name="description"),
        ),
        language=language or None,
        site_name=_meta(soup, property="og:site_name"),
        image_url=_meta(soup, property="og:image"),
    )

    for tag in soup.find_all(BOILERPLATE_TAGS):
        tag.decompose()
    body = soup.body or soup
    page.text = " ".join(body.get_text(" ", strip=True).split())

    return page
