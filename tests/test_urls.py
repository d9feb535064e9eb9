from __future__ import annotations

import unittest

from swipe_ai.utils.urls import (
    PRESERVED_PREFIXES,
    resolve_url,
    rewrite_css_urls,
    rewrite_srcset,
)

BASE = "https://example.com/shop/landing/index.html"


class ResolveUrlTests(unittest.TestCase):
    def test_relative_forms(self):
        cases = {
            "img/hero.jpg": "https://example.com/shop/landing/img/hero.jpg",
            "../assets/logo.svg": "https://example.com/shop/assets/logo.svg",
            "/static/app.css": "https://example.com/static/app.css",
            "//cdn.example.net/font.woff2": "https://cdn.example.net/font.woff2",
            "?variant=2": "https://example.com/shop/landing/index.html?variant=2",
            "https://other.org/x.png": "https://other.org/x.png",
        }
        for relative, expected in cases.items():
            with self.subTest(relative=relative):
                self.assertEqual(resolve_url(relative, BASE), expected)

    def test_preserved_prefixes_are_byte_identical(self):
        values = [
            "data:image/png;base64,iVBORw0KGgo=",
            "blob:https://example.com/1234-5678",
            "#pricing",
            "mailto:sales@example.com",
            "tel:+15550100",
            "javascript:void(0)",
            "  #faq",
            "DATA:text/plain,HI",
        ]
        for value in values:
            with self.subTest(value=value):
                self.assertEqual(resolve_url(value, BASE), value)

    def test_prefix_list(self):
        self.assertEqual(
            set(PRESERVED_PREFIXES),
            {"data:", "blob:", "#", "mailto:", "tel:", "javascript:"},
        )

    def test_empty_value(self):
        self.assertEqual(resolve_url("", BASE), "")

    def test_spaces_and_non_ascii_are_percent_encoded(self):
        base = "https://example.com/"
        self.assertEqual(resolve_url("img/my photo.png", base), "https://example.com/img/my%20photo.png")
        self.assertEqual(resolve_url("/café.png", base), "https://example.com/caf%C3%A9.png")
        self.assertEqual(
            resolve_url("search?q=blue shoes#top deals", base),
            "https://example.com/search?q=blue%20shoes#top%20deals",
        )

    def test_existing_escapes_are_not_double_encoded(self):
        self.assertEqual(
            resolve_url("img/my%20photo.png?a=1&b=%2F", "https://example.com/"),
            "https://example.com/img/my%20photo.png?a=1&b=%2F",
        )

    def test_backslashes_act_as_slashes(self):
        self.assertEqual(
            resolve_url("\\img\\a.png", "https://example.com/x/"),
            "https://example.com/img/a.png",
        )
        self.assertEqual(
            resolve_url("sub\\b.png", "https://example.com/x/"),
            "https://example.com/x/sub/b.png",
        )

    def test_tabs_and_newlines_inside_are_dropped(self):
        self.assertEqual(
            resolve_url("img/\nhero.jpg\t", "https://example.com/"),
            "https://example.com/img/hero.jpg",
        )


class RewriteSrcsetTests(unittest.TestCase):
    def test_descriptors_are_kept(self):
        result = rewrite_srcset("a.jpg 1x, /b.jpg 2x", BASE)
        self.assertEqual(
            result,
            "https://example.com/shop/landing/a.jpg 1x, https://example.com/b.jpg 2x",
        )

    def test_width_descriptors_without_spaces_after_comma(self):
        result = rewrite_srcset("s.jpg 480w,l.jpg 1080w", BASE)
        self.assertEqual(
            result,
            "https://example.com/shop/landing/s.jpg 480w, https://example.com/shop/landing/l.jpg 1080w",
        )

    def test_data_url_with_comma_survives(self):
        result = rewrite_srcset("data:image/gif;base64,R0lGOD 1x, big.gif 2x", BASE)
        self.assertEqual(
            result,
            "data:image/gif;base64,R0lGOD 1x, https://example.com/shop/landing/big.gif 2x",
        )


class RewriteCssUrlsTests(unittest.TestCase):
    def test_css_without_urls_is_unchanged(self):
        css = ".btn { color: #fff; background: linear-gradient(#000, #111); }"
        self.assertIs(rewrite_css_urls(css, BASE), css)

    def test_unquoted_url(self):
        css = ".hero{background:url(img/bg.png) no-repeat}"
        self.assertEqual(
            rewrite_css_urls(css, "https://cdn.example.com/css/site.css"),
            '.hero{background:url("https://cdn.example.com/css/img/bg.png") no-repeat}',
        )

    def test_quoted_urls(self):
        css = ".a{background:url('../i/a.png')} .b{background:url(\"/i/b.png\")}"
        result = rewrite_css_urls(css, "https://cdn.example.com/css/site.css")
        self.assertIn('url("https://cdn.example.com/i/a.png")', result)
        self.assertIn('url("https://cdn.example.com/i/b.png")', result)

    def test_url_with_parenthesis_inside_quotes(self):
        css = ".a{background:url(\"img/photo (1).png\")}"
        result = rewrite_css_urls(css, BASE)
        self.assertIn('url("https://example.com/shop/landing/img/photo%20(1).png")', result)

    def test_data_url_untouched(self):
        css = ".i{background-image:url(data:image/svg+xml;base64,PHN2Zz4=)}"
        result = rewrite_css_urls(css, BASE)
        self.assertIn("data:image/svg+xml;base64,PHN2Zz4=", result)
        self.assertNotIn("example.com", result)

    def test_font_face_sources(self):
        css = (
            "@font-face{font-family:X;"
            "src:url(fonts/x.woff2) format(\"woff2\"),url(fonts/x.woff) format(\"woff\")}"
        )
        result = rewrite_css_urls(css, "https://example.com/assets/main.css")
        self.assertIn('url("https://example.com/assets/fonts/x.woff2") format("woff2")', result)
        self.assertIn('url("https://example.com/assets/fonts/x.woff") format("woff")', result)

    def test_import_string(self):
        css = '@import "reset.css";\nbody{margin:0}'
        result = rewrite_css_urls(css, "https://example.com/assets/main.css")
        self.assertTrue(result.startswith('@import "https://example.com/assets/reset.css";'))
        self.assertIn("body{margin:0}", result)

    def test_urls_inside_media_blocks_and_comments_kept(self):
        css = "/* hero */@media (max-width: 600px){.h{background:url(m.png)}}"
        result = rewrite_css_urls(css, BASE)
        self.assertTrue(result.startswith("/* hero */@media (max-width: 600px){"))
        self.assertIn('url("https://example.com/shop/landing/m.png")', result)

    def test_bracket_blocks_keep_their_delimiters(self):
        css = "a[href^='/'] > .x{background:url(x.png)} .g{grid-template-columns:[full-start] 1fr}"
        result = rewrite_css_urls(css, BASE)
        self.assertEqual(
            result,
            "a[href^=\"/\"] > .x{background:url(\"https://example.com/shop/landing/x.png\")} "
            ".g{grid-template-columns:[full-start] 1fr}",
        )

    def test_bad_url_keeps_original_text(self):
        result = rewrite_css_urls("background:url(a b.png); color:red", BASE)
        self.assertEqual(result, "background:url(a b.png); color:red")
        self.assertNotIn("[bad url]", result)

    def test_bad_string_keeps_original_text(self):
        css = '.q::before{content:"open\n}.h{background:url(h.png)}'
        result = rewrite_css_urls(css, BASE)
        self.assertIn('content:"open\n', result)
        self.assertNotIn("[bad string]", result)
        self.assertIn('url("https://example.com/shop/landing/h.png")', result)

    def test_inline_style_value(self):
        result = rewrite_css_urls("background-image: url(/a.jpg); color: red", BASE)
        self.assertEqual(result, 'background-image: url("https://example.com/a.jpg"); color: red')


if __name__ == "__main__":
    unittest.main()
