"""Rich-text sanitizing for meeting note content."""

from __future__ import annotations

from bs4 import BeautifulSoup

ALLOWED_TAGS = {
    "p", "br", "div", "span",
    "h1", "h2", "h3", "h4",
    "strong", "b", "em", "i", "u", "s", "mark",
    "ul", "ol", "li",
    "blockquote", "a",
}

# Removed together with everything inside them
DROPPED_TAGS = {"script", "style", "iframe", "object", "embed", "form", "input", "button", "link", "meta"}

SAFE_URL_SCHEMES = ("http://", "https://", "mailto:")

SAFE_STYLE_PROPERTIES = {"background-color", "color", "text-align"}


def _clean_style(style: str) -> str:
    kept = []
    for declaration in style.split(";"):
        if ":" not in declaration:
            continue
        prop, value = declaration.split(":", 1)
        prop = prop.strip().lower()
        value = value.strip()
        if prop in SAFE_STYLE_PROPERTIES and "url(" not in value.lower() and "expression" not in value.lower():
            kept.append(f"{prop}: {value}")
    return "; ".join(kept)


def sanitize_html(content: str | None) -> str:
    """Strip everything from ``content`` except simple formatting markup.

    Unknown tags are unwrapped (their text is kept), dangerous tags are
    dropped entirely and all attributes except safe links and a few
    presentational styles are removed.
    """
    if not content:
        return ""

    soup = BeautifulSoup(content, "html.parser")

    for tag in soup.find_all(DROPPED_TAGS):
        tag.decompose()

    for tag in soup.find_all(True):
        if tag.name not in ALLOWED_TAGS:
            tag.unwrap()
            continue

        attrs = {}
        if tag.name == "a":
            href = (tag.get("href") or "").strip()
            if href.lower().startswith(SAFE_URL_SCHEMES):
                attrs["href"] = href
                attrs["rel"] = "noopener noreferrer"
        style = tag.get("style")
        if style and tag.name in {"span", "mark", "p", "h1", "h2", "h3", "h4"}:
            cleaned = _clean_style(style)
            if cleaned:
                attrs["style"] = cleaned
        tag.attrs = attrs

    return str(soup)
