# src/scrapers/price_extractor.py

"""Selector-based price extraction from raw page markup."""

from bs4 import BeautifulSoup

from src.errors import ExtractionError


def extract_price(raw_body: str, selector: str) -> str:
    """Return the text under every element matching *selector*.

    Matches are concatenated in document order and the text is kept
    verbatim. No match yields ``""``.

    Raises:
        ExtractionError: the selector is not valid CSS.
    """
    soup = BeautifulSoup(raw_body, "lxml")
    try:
        matches = soup.select(selector)
    except Exception as exc:
        raise ExtractionError(selector, str(exc)) from exc
    return "".join(el.get_text() for el in matches)
