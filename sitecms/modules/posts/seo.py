"""SEO, readability and accessibility scoring for post drafts.

A check starts from 100 points and deducts for each problem found. Errors
fail the check; warnings only cost points. Scoring is local: links are
counted, never fetched.
"""

import re
from dataclasses import dataclass, field

from bs4 import BeautifulSoup

_VOWEL_GROUPS = re.compile(r"[aeiouy]+")
_SENTENCE_END = re.compile(r"[.!?]+")

TITLE_MIN = 10
TITLE_MAX = 70
EXCERPT_MIN = 50
EXCERPT_MAX = 160
MIN_WORDS = 300
LONG_PARAGRAPH_WORDS = 150


@dataclass
class CheckResult:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    score: int = 100
    word_count: int = 0
    readability_score: float = 0.0
    image_count: int = 0
    link_count: int = 0
    headings: dict[str, int] = field(default_factory=dict)

    @property
    def passed(self) -> bool:
        return not self.errors

    def error(self, message: str, cost: int) -> None:
        self.errors.append(message)
        self.score -= cost

    def warning(self, message: str, cost: int) -> None:
        self.warnings.append(message)
        self.score -= cost


def estimate_syllables(text: str) -> int:
    """Vowel groups per word, minus a silent final e, at least one per word."""
    total = 0
    for word in text.lower().split():
        syllables = len(_VOWEL_GROUPS.findall(word))
        if word.endswith("e"):
            syllables -= 1
        total += max(1, syllables)
    return total


def reading_ease(text: str, word_count: int) -> float:
    """Flesch reading ease of ``text``."""
    sentences = [s for s in _SENTENCE_END.split(text) if s.strip()]
    sentence_count = len(sentences) or 1
    syllables = estimate_syllables(text)
    return 206.835 - 1.015 * (word_count / sentence_count) - 84.6 * (syllables / word_count)


def check_post(
    title: str,
    content: str,
    excerpt: str | None = None,
    has_featured_image: bool = False,
) -> CheckResult:
    result = CheckResult()
    soup = BeautifulSoup(content, "html.parser")
    text = soup.get_text(" ")
    result.word_count = len(text.split())

    # Title
    if len(title) < TITLE_MIN:
        result.error(f"Title too short (minimum {TITLE_MIN} characters)", 20)
    elif len(title) > TITLE_MAX:
        result.warning("Title too long for SEO (recommended: 50-60 characters)", 5)
    if not title.strip():
        result.error("Title cannot be empty", 30)

    # Excerpt
    if not excerpt or len(excerpt) < EXCERPT_MIN:
        result.warning(
            "Excerpt missing or too short (recommended: 120-160 characters for SEO)", 10
        )
    elif len(excerpt) > EXCERPT_MAX:
        result.warning("Excerpt too long (recommended: 120-160 characters)", 5)

    # Length
    if result.word_count < MIN_WORDS:
        result.warning(
            f"Content too short ({result.word_count} words, "
            f"recommended: {MIN_WORDS}+ words for SEO)",
            15,
        )
    if result.word_count == 0:
        result.error("Content cannot be empty", 40)

    # Images
    images = soup.find_all("img")
    result.image_count = len(images)
    if not images:
        result.warning("No images in content (images improve engagement)", 10)
    missing_alt = sum(1 for img in images if not (img.get("alt") or "").strip())
    if missing_alt:
        result.error(
            f"{missing_alt} image(s) missing alt text (accessibility and SEO issue)",
            missing_alt * 5,
        )

    if not has_featured_image:
        result.warning("No featured image set (recommended for social sharing)", 10)

    result.link_count = len(soup.find_all("a", href=True))

    # Headings
    result.headings = {name: len(soup.find_all(name)) for name in ("h1", "h2", "h3")}
    if result.headings["h1"] > 1:
        result.error("Multiple H1 headings found (SEO issue - should only have one H1)", 10)
    if result.headings["h2"] == 0 and result.word_count > 500:
        result.warning("No H2 headings (improves readability and SEO)", 5)

    # Readability is undefined without words
    if result.word_count:
        result.readability_score = round(reading_ease(text, result.word_count), 1)
        if result.readability_score < 30:
            result.warning("Content may be very difficult to read (consider simpler language)", 10)
        elif result.readability_score < 50:
            result.warning("Content may be difficult to read", 5)

    long_paragraphs = sum(
        1 for p in soup.find_all("p") if len(p.get_text(" ").split()) > LONG_PARAGRAPH_WORDS
    )
    if long_paragraphs:
        result.warning(
            f"{long_paragraphs} paragraph(s) are very long "
            "(consider breaking up for readability)",
            3,
        )

    if not soup.find_all(["ul", "ol"]) and result.word_count > 800:
        result.warning("No lists found (lists improve scannability)", 3)

    result.score = max(0, min(100, result.score))
    return result
