"""
Turn a rendered DOM serialization into a self-contained, script-free snapshot.

The browser hands us outerHTML plus the cssText of every readable stylesheet;
everything below is one pass over the parsed tree:

1. drop <script> elements and on* handler attributes
2. resolve URL-bearing attributes (src, href, srcset, lazy-load data-*) to absolute
3. inline all stylesheet CSS into one <style>, with url() resolved per sheet
4. drop <link rel="stylesheet"> and the <style> tags that block supersedes
5. resolve url() inside inline style="" attributes
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

from bs4 import BeautifulSoup, Doctype

from swipe_ai.utils.urls import resolve_url, rewrite_css_urls, rewrite_srcset

logger = logging.getLogger(__name__)

URL_ATTRIBUTES = (
    "src",
    "href",
    "poster",
    "action",
    "data-src",
    "data-lazy-src",
    "data-original",
    "data-bg",
)
SRCSET_ATTRIBUTES = ("srcset", "data-srcset")


@dataclass
class CapturedStylesheet:
    """CSS text read from one entry of document.styleSheets"""
    css_text: str
    href: Optional[str] = None
    media: str = ""


def _is_stylesheet_link(tag) -> bool:
    rel = tag.get("rel") or []
    if isinstance(rel, str):
        rel = rel.split()
    return "stylesheet" in [r.lower() for r in rel]


def build_inlined_css(stylesheets: List[CapturedStylesheet], base_url: str) -> str:
    """Concatenate readable stylesheets, resolving url() against each sheet's own URL."""
    chunks = []
    for sheet in stylesheets:
        css = rewrite_css_urls(sheet.css_text, sheet.href or base_url)
        if not css.strip():
            continue
        media = (sheet.media or "").strip()
        if media and media.lower() != "all":
            css = f"@media {media} {{\n{css}\n}}"
        chunks.append(css)
    return "\n\n".join(chunks)


def normalize_snapshot(
    html: str,
    base_url: str,
    stylesheets: Optional[List[CapturedStylesheet]] = None,
) -> str:
    """
    Normalize a rendered page into a standalone HTML document.

    Args:
        html: serialized document (outerHTML of <html>)
        base_url: the document's base URI
        stylesheets: CSS captured from the live page, in document order

    Returns:
        HTML string starting with <!DOCTYPE html>
    """
    soup = BeautifulSoup(html, "html.parser")

    for item in list(soup.contents):
        if isinstance(item, Doctype):
            item.extract()

    # 1. Nothing executable survives
    for script in soup.find_all("script"):
        script.decompose()

    for tag in soup.find_all(True):
        for attr in [name for name in tag.attrs if name.lower().startswith("on")]:
            del tag[attr]

    # 2. Absolute URLs for resource references
    for tag in soup.find_all(True):
        for attr in URL_ATTRIBUTES:
            value = tag.get(attr)
            if isinstance(value, str) and value:
                tag[attr] = resolve_url(value, base_url)
        for attr in SRCSET_ATTRIBUTES:
            value = tag.get(attr)
            if isinstance(value, str) and value:
                tag[attr] = rewrite_srcset(value, base_url)

    # 3 + 4. One synthesized <style> replaces links and existing style tags
    inlined_css = build_inlined_css(stylesheets or [], base_url)

    for link in soup.find_all("link"):
        if _is_stylesheet_link(link):
            link.decompose()

    if inlined_css:
        for style in soup.find_all("style"):
            style.decompose()

        head = soup.find("head")
        if head is None:
            head = soup.new_tag("head")
            root = soup.find("html")
            if root is not None:
                root.insert(0, head)
            else:
                soup.insert(0, head)

        style_tag = soup.new_tag("style")
        style_tag.string = inlined_css

        charset_meta = head.find("meta", attrs={"charset": True})
        if charset_meta is not None:
            charset_meta.insert_after(style_tag)
        else:
            head.insert(0, style_tag)

    # 5. url() inside inline styles
    for tag in soup.find_all(style=True):
        style_value = tag.get("style")
        if isinstance(style_value, str) and "url(" in style_value.lower():
            tag["style"] = rewrite_css_urls(style_value, base_url)

    return "<!DOCTYPE html>\n" + str(soup)
