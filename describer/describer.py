# describer/describer.py
"""
Museum-label style descriptions for catalog entries.

Text comes from the Anthropic Messages API when a key is configured.
Any API failure, or a missing key, falls back to local templates so an
admin always gets a description back.
"""

import requests

import config
from logger_setup import service_logger

log = service_logger('describer')

API_VERSION = "2023-06-01"

ARTIST_TEMPLATES = {
    "turner": (
        '"{title}" by J.M.W. Turner{year} exemplifies the artist\'s mastery of light and '
        "atmospheric effects. This {museum} masterpiece demonstrates Turner's innovative "
        "approach to landscape painting, with its luminous palette and dynamic brushwork "
        "capturing the sublime power of nature."
    ),
    "constable": (
        '"{title}" by John Constable{year} represents the pinnacle of English landscape '
        "painting. Housed in {museum}, this work showcases Constable's revolutionary plein "
        "air technique and his deep emotional connection to the English countryside, "
        "influencing generations of artists."
    ),
    "van gogh": (
        '"{title}" by Vincent van Gogh{year} displays the artist\'s distinctive '
        "post-impressionist style with bold colors and expressive brushstrokes. This "
        "{museum} treasure captures van Gogh's unique vision and emotional intensity that "
        "would influence modern art profoundly."
    ),
    "default": (
        '"{title}" by {artist}{year} is a significant work housed in {museum}. This painting '
        "demonstrates {artist}'s distinctive artistic style and represents an important "
        "contribution to the museum's collection, continuing to inspire and educate "
        "visitors about the evolution of art."
    ),
}

WORD_UPGRADES = [
    ("painting", "masterpiece"),
    ("shows", "depicts"),
    ("made", "created"),
    ("work", "artistic achievement"),
]


class DescriptionError(Exception):
    """The text-generation API call failed."""


def _year_suffix(year):
    return f" ({year})" if year else ""


def _ask_model(prompt, api_key):
    try:
        response = requests.post(
            config.ANTHROPIC_API_URL,
            json={
                "model": config.ANTHROPIC_MODEL,
                "max_tokens": config.ANTHROPIC_MAX_TOKENS,
                "messages": [{"role": "user", "content": prompt}],
            },
            headers={
                "Content-Type": "application/json",
                "x-api-key": api_key,
                "anthropic-version": API_VERSION,
            },
            timeout=config.DESCRIBER_TIMEOUT,
        )
        response.raise_for_status()
        text = response.json()["content"][0]["text"].strip()
    except (requests.RequestException, ValueError, KeyError, IndexError, TypeError) as e:
        raise DescriptionError(f"Description API request failed: {e}") from e
    if not text:
        raise DescriptionError("Description API returned empty text")
    return text


def template_description(title, artist, year=None, museum=None):
    museum = museum or config.DEFAULT_MUSEUM
    artist_lower = artist.lower()
    key = next((k for k in ARTIST_TEMPLATES if k != "default" and k in artist_lower), "default")
    return ARTIST_TEMPLATES[key].format(
        title=title, artist=artist, year=_year_suffix(year), museum=museum
    )


def enhance_text(description):
    improved = description
    for old, new in WORD_UPGRADES:
        improved = improved.replace(old, new)
    return improved[:1].upper() + improved[1:]


def generate_description(title, artist, year=None, museum=None, api_key=None):
    museum = museum or config.DEFAULT_MUSEUM
    api_key = api_key if api_key is not None else config.ANTHROPIC_API_KEY
    if not api_key:
        log.info("No description API key, using templates")
        return template_description(title, artist, year, museum)

    prompt = (
        f'Write a concise, engaging 2-3 sentence description for the painting "{title}" '
        f"by {artist}{_year_suffix(year)} housed in {museum}. Focus on the artistic style, "
        "subject matter, and historical significance. Make it informative but accessible "
        "to museum visitors."
    )
    try:
        return _ask_model(prompt, api_key)
    except DescriptionError as e:
        log.error(f"{e}, falling back to templates")
        return template_description(title, artist, year, museum)


def improve_description(current_description, title=None, artist=None, api_key=None):
    api_key = api_key if api_key is not None else config.ANTHROPIC_API_KEY
    if not api_key:
        return enhance_text(current_description)

    prompt = (
        f'Please improve this art description for "{title}" by {artist}:\n\n'
        f'"{current_description}"\n\n'
        "Make it more engaging, accurate, and informative while keeping it concise "
        "(2-3 sentences). Focus on artistic technique, historical context, or visual elements."
    )
    try:
        return _ask_model(prompt, api_key)
    except DescriptionError as e:
        log.error(f"{e}, falling back to text upgrades")
        return enhance_text(current_description)
