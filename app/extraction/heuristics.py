"""Rule-based structuring of raw OCR text into contact fields.

Used only when structured extraction is unavailable. The rules are an ordered
list of (pattern, extractor) pairs applied to the same card text; each
extractor returns the fields it sets. Later rules never overwrite earlier ones
because every field belongs to exactly one rule.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass

from app.extraction.models import ContactFields

FieldValues = dict[str, str | None]


@dataclass(frozen=True)
class CardText:
    """Recognized text plus its trimmed, non-blank lines."""

    text: str
    lines: list[str]

    @classmethod
    def parse(cls, text: str) -> "CardText":
        lines = [line.strip() for line in re.split(r"\r?\n", text)]
        return cls(text=text, lines=[line for line in lines if line])


Extractor = Callable[[re.Pattern[str], CardText], FieldValues]

MIN_PHONE_DIGITS = 9

_ANY_LINE_RE = re.compile(r".+")
_EMAIL_RE = re.compile(r"[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}", re.IGNORECASE)
_WEBSITE_RE = re.compile(r"(https?://[^\s]+|www\.[^\s]+)", re.IGNORECASE)
_CONTACT_TOKEN_RE = re.compile(r"(tel|phone|mobile|email|www|http)", re.IGNORECASE)
_PHONE_RE = re.compile(r"\+?\d[\d \t().-]{7,}\d")
_ADDRESS_RE = re.compile(
    r"(street|st\.|road|rd\.|ave|avenue|suite|ste\.|floor|blvd|ln|lane|drive|dr\.|"
    r"parkway|pkwy|city|state|zip|country)",
    re.IGNORECASE,
)
_CITY_STATE_ZIP_RE = re.compile(r"([A-Za-z\s]+),?\s+([A-Za-z]{2})\s+(\d{5}(?:-\d{4})?)")
_COUNTRY_RE = re.compile(
    r"\b(united states|usa|india|canada|australia|uk|united kingdom)\b",
    re.IGNORECASE,
)


def _name_and_title(pattern: re.Pattern[str], card: CardText) -> FieldValues:
    lines = [line for line in card.lines if pattern.fullmatch(line)]
    return {
        "name": lines[0] if lines else None,
        "title": lines[1] if len(lines) > 1 else None,
    }


def _email(pattern: re.Pattern[str], card: CardText) -> FieldValues:
    match = pattern.search(card.text)
    return {"email": match.group(0) if match else None}


def _website(pattern: re.Pattern[str], card: CardText) -> FieldValues:
    match = pattern.search(card.text)
    return {"website": normalize_website(match.group(0) if match else None)}


def _company(pattern: re.Pattern[str], card: CardText) -> FieldValues:
    candidates = (line for line in card.lines[2:] if not pattern.search(line))
    return {"company": next(candidates, None)}


def _phones(pattern: re.Pattern[str], card: CardText) -> FieldValues:
    numbers: list[str] = []
    for raw in pattern.findall(card.text):
        if sum(ch.isdigit() for ch in raw) < MIN_PHONE_DIGITS:
            continue
        number = re.sub(r"\s+", " ", re.sub(r"[()]", "", raw)).strip()
        if number not in numbers:
            numbers.append(number)
    return {
        "phone": numbers[0] if numbers else None,
        "mobile": numbers[1] if len(numbers) > 1 else None,
    }


def _address(pattern: re.Pattern[str], card: CardText) -> FieldValues:
    values: FieldValues = {"address": None, "city": None, "state": None, "zipcode": None}
    address_lines = [line for line in card.lines if pattern.search(line)]
    if not address_lines:
        return values
    address = ", ".join(address_lines)
    values["address"] = address
    # City/state/zip is only looked for inside the detected address lines.
    match = _CITY_STATE_ZIP_RE.search(address)
    if match:
        values["city"] = match.group(1).strip()
        values["state"] = match.group(2).strip()
        values["zipcode"] = match.group(3).strip()
    return values


def _country(pattern: re.Pattern[str], card: CardText) -> FieldValues:
    candidates = (line for line in card.lines if pattern.search(line))
    return {"country": next(candidates, None)}


FIELD_RULES: list[tuple[re.Pattern[str], Extractor]] = [
    (_ANY_LINE_RE, _name_and_title),
    (_EMAIL_RE, _email),
    (_WEBSITE_RE, _website),
    (_CONTACT_TOKEN_RE, _company),
    (_PHONE_RE, _phones),
    (_ADDRESS_RE, _address),
    (_COUNTRY_RE, _country),
]


def structure_card_text(text: str) -> ContactFields:
    """Derive the twelve contact fields from raw OCR text."""
    card = CardText.parse(text)
    values: FieldValues = {}
    for pattern, extractor in FIELD_RULES:
        values.update(extractor(pattern, card))
    return ContactFields.from_mapping(values)


def normalize_website(url: str | None) -> str | None:
    """Prefix scheme-less URLs with https://."""
    if not url:
        return None
    return url if url.lower().startswith("http") else f"https://{url}"
