"""Tests for description generation and its template fallbacks."""

from unittest.mock import MagicMock, patch

import requests

from describer import enhance_text, generate_description, improve_description, template_description


def api_response(text):
    response = MagicMock()
    response.json.return_value = {"content": [{"type": "text", "text": text}]}
    response.raise_for_status.return_value = None
    return response


class TestTemplates:

    def test_turner_template(self):
        text = template_description("Rain, Steam and Speed", "Joseph Mallord William Turner", "1844", "National Gallery, London")
        assert "J.M.W. Turner (1844)" in text
        assert "National Gallery, London" in text

    def test_van_gogh_case_insensitive(self):
        text = template_description("Sunflowers", "Vincent VAN GOGH")
        assert "post-impressionist" in text

    def test_default_template_without_year(self):
        text = template_description("Venus and Mars", "Sandro Botticelli", museum="Uffizi")
        assert text.startswith('"Venus and Mars" by Sandro Botticelli is a significant work housed in Uffizi.')

    def test_default_museum(self):
        assert "National Gallery, London" in template_description("X", "Y")


class TestEnhanceText:

    def test_word_upgrades(self):
        assert enhance_text("this painting shows a made work") == \
            "This masterpiece depicts a created artistic achievement"

    def test_capitalizes_first_letter(self):
        assert enhance_text("a quiet river") == "A quiet river"

    def test_empty(self):
        assert enhance_text("") == ""


class TestGenerateDescription:

    def test_no_key_uses_template(self):
        with patch("describer.describer.requests.post") as post:
            text = generate_description("The Hay Wain", "John Constable", api_key="")
        post.assert_not_called()
        assert "plein air" in text

    def test_api_text_is_returned(self):
        with patch("describer.describer.requests.post", return_value=api_response("  A fine canvas.  ")) as post:
            text = generate_description("The Hay Wain", "John Constable", "1821", api_key="k")
        assert text == "A fine canvas."
        _, kwargs = post.call_args
        assert kwargs["headers"]["x-api-key"] == "k"
        assert "The Hay Wain" in kwargs["json"]["messages"][0]["content"]

    def test_api_error_falls_back(self):
        with patch("describer.describer.requests.post", side_effect=requests.ConnectionError("down")):
            text = generate_description("The Hay Wain", "John Constable", api_key="k")
        assert "plein air" in text

    def test_malformed_response_falls_back(self):
        response = MagicMock()
        response.json.return_value = {"unexpected": True}
        with patch("describer.describer.requests.post", return_value=response):
            text = generate_description("Sunflowers", "Vincent van Gogh", api_key="k")
        assert "post-impressionist" in text


class TestImproveDescription:

    def test_no_key_uses_word_upgrades(self):
        assert improve_description("the painting shows boats", api_key="") == "The masterpiece depicts boats"

    def test_api_text_is_returned(self):
        with patch("describer.describer.requests.post", return_value=api_response("Better.")):
            assert improve_description("old text", "T", "A", api_key="k") == "Better."

    def test_http_error_falls_back(self):
        response = MagicMock()
        response.raise_for_status.side_effect = requests.HTTPError("401")
        with patch("describer.describer.requests.post", return_value=response):
            assert improve_description("it shows a river", api_key="k") == "It depicts a river"
