"""
Character budgets for HTML handed to the models.

truncate_html keeps the whole <head> (inlined CSS is what design inference
needs) and cuts the body. extract_design_reference is the lossy fallback when
even that is too large: CSS plus a short body preview.
"""
import re

TRUNCATION_MARKER = "<!-- truncated -->"

# Room left for the doctype/html wrapper and the marker
_WRAPPER_RESERVE = 500

_HEAD_RE = re.compile(r"<head[\s\S]*?</head>", re.IGNORECASE)
_BODY_RE = re.compile(r"<body[\s\S]*?</body>", re.IGNORECASE)
_BODY_INNER_RE = re.compile(r"<body[^>]*>([\s\S]*?)</body>", re.IGNORECASE)
_STYLE_INNER_RE = re.compile(r"<style[^>]*>([\s\S]*?)</style>", re.IGNORECASE)


def truncate_html(html: str, max_chars: int = 60000) -> str:
    """
    Fit an HTML document into max_chars while keeping it closed.

    The <head> block is kept verbatim whatever its size; only the body is cut.
    The result is bounded by max_chars as long as the head itself fits.
    """
    if len(html) <= max_chars:
        return html

    head_match = _HEAD_RE.search(html)
    head = head_match.group(0) if head_match else ""

    body_match = _BODY_RE.search(html)
    if body_match:
        body = body_match.group(0)
    elif head_match:
        body = html[head_match.end():]
    else:
        body = html

    remaining = max(0, max_chars - len(head) - _WRAPPER_RESERVE)
    truncated_body = f"{body[:remaining]}\n{TRUNCATION_MARKER}\n</body>"

    return f"<!DOCTYPE html>\n<html>\n{head}\n{truncated_body}\n</html>"


def extract_design_reference(
    html: str,
    css_limit: int = 15000,
    preview_limit: int = 5000,
) -> str:
    """Return all <style> CSS (capped) plus a raw prefix of the body markup."""
    parts = []

    css = "".join(f"{block}\n" for block in _STYLE_INNER_RE.findall(html))
    if len(css) > css_limit:
        css = css[:css_limit] + "\n/* truncated */"
    if css.strip():
        parts.append(f"<style>\n{css}\n</style>")

    body_match = _BODY_INNER_RE.search(html)
    if body_match:
        preview = body_match.group(1)[:preview_limit]
        parts.append(
            f"<!-- BODY STRUCTURE PREVIEW (first {preview_limit} chars) -->\n"
            f"{preview}\n"
            f"<!-- rest truncated -->"
        )

    return "\n\n".join(parts)
