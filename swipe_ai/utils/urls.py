"""URL resolution for snapshot rewriting (attributes, srcset and CSS url())"""
import logging
import re
from typing import List
from urllib.parse import quote, urljoin, urlsplit, urlunsplit

import tinycss2
from tinycss2.ast import (
    AtKeywordToken,
    CurlyBracketsBlock,
    FunctionBlock,
    ParenthesesBlock,
    ParseError,
    SquareBracketsBlock,
    StringToken,
    URLToken,
)
from tinycss2.serializer import serialize_identifier

logger = logging.getLogger(__name__)

# Never rewritten - left byte-identical
PRESERVED_PREFIXES = ("data:", "blob:", "#", "mailto:", "tel:", "javascript:")

_BRACKETS = {
    ParenthesesBlock: ("(", ")"),
    SquareBracketsBlock: ("[", "]"),
    CurlyBracketsBlock: ("{", "}"),
}

_SPECIAL_SCHEMES = ("http", "https")

# Characters a browser leaves as-is in each part of an http(s) URL
_PATH_SAFE = "/:@!$&'()*+,;=%~[]|^"
_QUERY_SAFE = "/:@!$&()*+,;=%~[]|^?{}`"
_FRAGMENT_SAFE = "/:@!$&'()*+,;=%~[]|^?{}#"

_NEEDS_ENCODING = re.compile(r'[^\x21-\x7e]|["<>]')
_TAB_OR_NEWLINE = re.compile(r"[\t\n\r]")


def _percent_encode(url: str) -> str:
    """Percent-encode spaces, quotes and non-ASCII in path, query and fragment."""
    if not _NEEDS_ENCODING.search(url):
        return url

    parts = urlsplit(url)
    return urlunsplit((
        parts.scheme,
        parts.netloc,
        quote(parts.path, safe=_PATH_SAFE),
        quote(parts.query, safe=_QUERY_SAFE),
        quote(parts.fragment, safe=_FRAGMENT_SAFE),
    ))


def resolve_url(value: str, base_url: str) -> str:
    """Resolve a possibly-relative URL against base_url the way a browser would."""
    if not value:
        return value

    candidate = _TAB_OR_NEWLINE.sub("", value.strip())
    if not candidate or candidate.lower().startswith(PRESERVED_PREFIXES):
        return value

    try:
        scheme = urlsplit(candidate).scheme or urlsplit(base_url).scheme
        if scheme.lower() in _SPECIAL_SCHEMES:
            candidate = candidate.replace("\\", "/")

        resolved = urljoin(base_url, candidate)
        if urlsplit(resolved).scheme.lower() in _SPECIAL_SCHEMES:
            resolved = _percent_encode(resolved)
        return resolved
    except ValueError:
        logger.debug(f"Could not resolve {candidate[:80]!r} against {base_url}")
        return value


def _srcset_candidates(srcset: str):
    """Yield (url, descriptors) pairs; URLs may themselves contain commas (data:)."""
    pos, length = 0, len(srcset)
    while pos < length:
        while pos < length and (srcset[pos].isspace() or srcset[pos] == ","):
            pos += 1
        if pos >= length:
            break

        start = pos
        while pos < length and not srcset[pos].isspace():
            pos += 1
        url = srcset[start:pos]

        descriptors = ""
        if url.endswith(","):
            url = url.rstrip(",")
        else:
            start = pos
            while pos < length and srcset[pos] != ",":
                pos += 1
            descriptors = srcset[start:pos].strip()

        if url:
            yield url, descriptors


def rewrite_srcset(srcset: str, base_url: str) -> str:
    """Resolve the URL part of every srcset candidate, keeping descriptors."""
    entries = []
    for url, descriptors in _srcset_candidates(srcset):
        resolved = resolve_url(url, base_url)
        entries.append(f"{resolved} {descriptors}" if descriptors else resolved)
    return ", ".join(entries)


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\a ")
    return f'"{escaped}"'


def _preprocess(css: str) -> str:
    """Newline and NUL normalization, matching the tinycss2 tokenizer's positions."""
    return css.replace("\r\n", "\n").replace("\r", "\n").replace("\f", "\n").replace("\0", "\ufffd")


class _Source:
    """Preprocessed CSS text with a line index for tinycss2 node positions."""

    def __init__(self, css: str):
        self.text = css
        self.line_starts = [0]
        for match in re.finditer("\n", css):
            self.line_starts.append(match.end())

    def offset(self, node) -> int:
        return self.line_starts[node.source_line - 1] + node.source_column - 1

    def original_text(self, error: ParseError) -> str:
        """The author's text behind a bad-url / bad-string token."""
        start = self.offset(error)
        if error.kind == "bad-url":
            end = self.text.find(")", start)
            return self.text[start:] if end == -1 else self.text[start:end + 1]
        if error.kind == "bad-string":
            end = self.text.find("\n", start)
            return self.text[start:] if end == -1 else self.text[start:end]
        return error.serialize()


def _url_function_target(node: FunctionBlock):
    """The string argument of url("...") / src("..."), ignoring whitespace."""
    args = [arg for arg in node.arguments if arg.type not in ("whitespace", "comment")]
    if len(args) == 1 and isinstance(args[0], StringToken):
        return args[0]
    return None


def _serialize_nodes(nodes: List, base_url: str, source: _Source) -> str:
    out = []
    after_import = False

    for node in nodes:
        if isinstance(node, URLToken):
            out.append(f"url({_quote(resolve_url(node.value, base_url))})")

        elif isinstance(node, FunctionBlock):
            target = _url_function_target(node) if node.lower_name in ("url", "src") else None
            if target is not None:
                resolved = resolve_url(target.value, base_url)
                out.append(f"{serialize_identifier(node.name)}({_quote(resolved)})")
            else:
                inner = _serialize_nodes(node.arguments, base_url, source)
                out.append(f"{serialize_identifier(node.name)}({inner})")

        elif type(node) in _BRACKETS:
            opening, closing = _BRACKETS[type(node)]
            inner = _serialize_nodes(node.content, base_url, source)
            out.append(f"{opening}{inner}{closing}")

        elif isinstance(node, StringToken) and after_import:
            # @import "sheet.css"
            out.append(_quote(resolve_url(node.value, base_url)))

        elif isinstance(node, ParseError):
            out.append(source.original_text(node))

        else:
            out.append(node.serialize())

        if isinstance(node, AtKeywordToken):
            after_import = node.lower_value == "import"
        elif node.type not in ("whitespace", "comment"):
            after_import = False

    return "".join(out)


def rewrite_css_urls(css: str, base_url: str) -> str:
    """
    Rewrite every url(...) in a chunk of CSS to an absolute URL.

    Works on the tinycss2 token stream, so quoting and escapes inside url()
    are handled by the tokenizer rather than by pattern matching. CSS with no
    url() or @import comes back unchanged, and tokens tinycss2 rejects keep
    the author's original text.
    """
    lowered = css.lower()
    if "url(" not in lowered and "@import" not in lowered and "src(" not in lowered:
        return css

    source = _Source(_preprocess(css))
    nodes = tinycss2.parse_component_value_list(source.text, skip_comments=False)
    return _serialize_nodes(nodes, base_url, source)
