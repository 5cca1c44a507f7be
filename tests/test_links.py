import unittest

from chat.links import CHAT_STYLES, PDF_ICON_STYLE, clean_url, transform_links

IMAGE = "https://lab.example.edu/resources/PHY161/pendulum_setup.jpg"
PDF = "https://lab.example.edu/resources/PHY161/manual.pdf"
PAGE = "https://lab.example.edu/resources/index.html"


class TestCleanUrl(unittest.TestCase):
    def test_strips_wrapping_and_trailing_punctuation(self):
        self.assertEqual(clean_url(f"({PDF})"), PDF)
        self.assertEqual(clean_url(f"[{PDF}],"), PDF)
        self.assertEqual(clean_url(f"{PDF}."), PDF)

    def test_rejects_non_http(self):
        self.assertEqual(clean_url("ftp://lab.example.edu/a.pdf"), "")
        self.assertEqual(clean_url(None), "")
        self.assertEqual(clean_url(""), "")


class TestChatStyles(unittest.TestCase):
    def test_pdf_icon_has_image(self):
        pdf_rule = PDF_ICON_STYLE.split(".pdf-icon {", 1)[1].split("}", 1)[0]
        self.assertIn("background-image: url('data:image/svg+xml", pdf_rule)
        self.assertIn(PDF_ICON_STYLE, CHAT_STYLES)


class TestTransformLinks(unittest.TestCase):
    def test_markdown_image_becomes_captioned_image(self):
        result = transform_links(f"Here it is: 🖼️ [Pendulum setup]({IMAGE})")

        self.assertIn(f"<img src='{IMAGE}' class='chat-image'", result)
        self.assertIn('<div class="image-caption">Pendulum setup</div>', result)
        self.assertNotIn("🖼️", result)
        # The URL inside the rendered tag is not rendered again
        self.assertEqual(result.count("<img"), 1)
        self.assertNotIn("Link</a>", result)

    def test_bare_image_url(self):
        result = transform_links(f"See {IMAGE}")
        self.assertIn(f"<img src='{IMAGE}' class='chat-image' alt='Image' />", result)

    def test_bare_pdf_url_keeps_sentence_punctuation(self):
        result = transform_links(f"Read {PDF}.")
        self.assertEqual(
            result,
            f"Read <a href='{PDF}' target='_blank'><i class='pdf-icon'></i> PDF Document</a>.",
        )

    def test_other_url_becomes_generic_link(self):
        result = transform_links(f"Start at {PAGE}")
        self.assertIn(f"<a href='{PAGE}' target='_blank'><i class='link-icon'></i> Link</a>", result)

    def test_url_in_parentheses(self):
        result = transform_links(f"(manual: {PDF})")
        self.assertTrue(result.startswith("(manual: <a href="))
        self.assertTrue(result.endswith("PDF Document</a>)"))

    def test_markdown_image_marker_on_non_image_url(self):
        result = transform_links(f"🖼️ [Manual]({PDF})")
        self.assertIn("PDF Document</a>", result)
        self.assertNotIn("<img", result)

    def test_text_without_urls_is_unchanged(self):
        text = "The period of a pendulum depends on its length."
        self.assertEqual(transform_links(text), text)


if __name__ == "__main__":
    unittest.main()
