from __future__ import annotations

import unittest

from bs4 import BeautifulSoup

from swipe_ai.utils.html_snapshot import (
    CapturedStylesheet,
    build_inlined_css,
    normalize_snapshot,
)

BASE = "https://example.com/offer/"

PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>Offer</title>
  <link rel="stylesheet" href="/css/site.css">
  <link rel="icon" href="favicon.ico">
  <style>.old { color: red; }</style>
  <script src="/js/app.js"></script>
  <script>window.track = true;</script>
</head>
<body onload="init()">
  <a href="#pricing" onclick="go()">Pricing</a>
  <a href="mailto:hi@example.com">Mail</a>
  <a href="buy.html">Buy</a>
  <img src="img/hero.jpg" srcset="img/hero.jpg 1x, img/hero@2x.jpg 2x" data-src="lazy/hero.jpg">
  <img src="data:image/gif;base64,R0lGODlhAQABAAAAACw=" data-lazy-src="/lazy/b.png">
  <video poster="poster.png"></video>
  <form action="/checkout"><button onmouseover="x()">Go</button></form>
  <div style="background-image: url('bg/texture.png')">Texture</div>
  <div data-bg="bg/section.jpg" data-original="/orig.jpg">Lazy bg</div>
</body>
</html>"""

SHEETS = [
    CapturedStylesheet(
        css_text=".hero { background: url(../img/bg.png); }",
        href="https://cdn.example.com/css/site.css",
    ),
    CapturedStylesheet(css_text=".inline { color: blue; }", href=None),
    CapturedStylesheet(
        css_text=".print-only { display: block; }",
        href="https://example.com/css/print.css",
        media="print",
    ),
]


class NormalizeSnapshotTests(unittest.TestCase):
    def setUp(self):
        self.html = normalize_snapshot(PAGE, BASE, SHEETS)
        self.soup = BeautifulSoup(self.html, "html.parser")

    def test_starts_with_single_doctype(self):
        self.assertTrue(self.html.startswith("<!DOCTYPE html>"))
        self.assertEqual(self.html.upper().count("<!DOCTYPE"), 1)

    def test_scripts_and_handlers_removed(self):
        self.assertEqual(self.soup.find_all("script"), [])
        self.assertNotIn("window.track", self.html)
        for tag in self.soup.find_all(True):
            for attr in tag.attrs:
                self.assertFalse(attr.lower().startswith("on"), f"{tag.name} kept {attr}")

    def test_url_attributes_resolved(self):
        self.assertIsNotNone(self.soup.find("a", href="https://example.com/offer/buy.html"))
        self.assertIsNotNone(self.soup.find("img", src="https://example.com/offer/img/hero.jpg"))
        self.assertIsNotNone(self.soup.find(attrs={"data-src": "https://example.com/offer/lazy/hero.jpg"}))
        self.assertIsNotNone(self.soup.find(attrs={"data-lazy-src": "https://example.com/lazy/b.png"}))
        self.assertIsNotNone(self.soup.find("video", poster="https://example.com/offer/poster.png"))
        self.assertIsNotNone(self.soup.find("form", action="https://example.com/checkout"))
        self.assertIsNotNone(self.soup.find(attrs={"data-bg": "https://example.com/offer/bg/section.jpg"}))
        self.assertIsNotNone(self.soup.find(attrs={"data-original": "https://example.com/orig.jpg"}))
        self.assertIsNotNone(self.soup.find("link", href="https://example.com/offer/favicon.ico"))

    def test_srcset_resolved(self):
        img = self.soup.find("img", srcset=True)
        self.assertEqual(
            img["srcset"],
            "https://example.com/offer/img/hero.jpg 1x, https://example.com/offer/img/hero@2x.jpg 2x",
        )

    def test_preserved_values_untouched(self):
        self.assertIsNotNone(self.soup.find("a", href="#pricing"))
        self.assertIsNotNone(self.soup.find("a", href="mailto:hi@example.com"))
        self.assertIn('src="data:image/gif;base64,R0lGODlhAQABAAAAACw="', self.html)

    def test_stylesheets_inlined_into_one_style_after_charset(self):
        styles = self.soup.find_all("style")
        self.assertEqual(len(styles), 1)
        css = styles[0].string

        self.assertIn('url("https://cdn.example.com/img/bg.png")', css)
        self.assertIn(".inline { color: blue; }", css)
        self.assertIn("@media print {", css)
        self.assertNotIn(".old", css)

        meta = self.soup.find("meta", charset=True)
        self.assertIs(meta.find_next_sibling(True), styles[0])

    def test_stylesheet_links_removed(self):
        for link in self.soup.find_all("link"):
            self.assertNotIn("stylesheet", link.get("rel", []))

    def test_inline_style_urls_resolved(self):
        div = self.soup.find("div", string="Texture")
        self.assertIn('url("https://example.com/offer/bg/texture.png")', div["style"])


class NormalizeSnapshotEdgeCaseTests(unittest.TestCase):
    def test_no_readable_stylesheets_keeps_existing_style(self):
        html = normalize_snapshot(
            "<html><head><style>.k{color:red}</style></head><body></body></html>",
            BASE,
            [],
        )
        self.assertIn(".k{color:red}", html)

    def test_missing_head_is_created(self):
        html = normalize_snapshot(
            "<html><body><p>hi</p></body></html>",
            BASE,
            [CapturedStylesheet(css_text="p{margin:0}")],
        )
        soup = BeautifulSoup(html, "html.parser")
        self.assertEqual(soup.find("head").find("style").string, "p{margin:0}")

    def test_style_text_is_not_html_escaped(self):
        html = normalize_snapshot(
            "<html><head></head><body></body></html>",
            BASE,
            [CapturedStylesheet(css_text='ul > li::before { content: "&"; }')],
        )
        self.assertIn('ul > li::before { content: "&"; }', html)


class BuildInlinedCssTests(unittest.TestCase):
    def test_media_all_is_not_wrapped(self):
        css = build_inlined_css([CapturedStylesheet(css_text="a{b:c}", media="all")], BASE)
        self.assertEqual(css, "a{b:c}")

    def test_empty_sheets_skipped(self):
        css = build_inlined_css(
            [CapturedStylesheet(css_text="  "), CapturedStylesheet(css_text="x{y:z}")],
            BASE,
        )
        self.assertEqual(css, "x{y:z}")


if __name__ == "__main__":
    unittest.main()
