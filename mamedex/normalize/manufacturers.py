"""Manufacturer name cleanup.

MAME manufacturer strings carry licensing notes, legal suffixes and
regional qualifiers (``Taito America Corporation (Romstar license)``).
The cleaned value is what the manufacturers index and exports use.
"""

import re

# Legal suffixes and regional qualifiers removed as whole words
NOISE_TOKENS = (
    r"Games|Corp|Inc|Ltd|Co|Corporation|Industries|Elc|S\.R\.L|S\.A|inc|"
    r"of America|Japan|UK|USA|Europe|do Brasil|du Canada|Canada|America|Austria|of"
)

RE_COMMON = re.compile(rf"\b({NOISE_TOKENS})\b\.?", re.IGNORECASE)
RE_PUNCTUATION = re.compile(r"[.,?]+$|-$")
NEEDS_CLEANING = re.compile(rf"[(/,?]|({NOISE_TOKENS})")

RE_CUT = re.compile(r"[(/]")


def clean_manufacturer(manufacturer: str) -> str:
    """Normalize a raw manufacturer string.

    Keeps the text before the first ``(`` or ``/``, strips noise tokens and
    trailing punctuation when present, and maps ``<unknown>`` to
    ``Unknown``. Running it on its own output returns the same value.

    Args:
        manufacturer: Raw manufacturer from the MAME XML

    Returns:
        Cleaned manufacturer name

    Example:
        >>> clean_manufacturer("Midway (licensed from Namco)")
        'Midway'
    """
    result = _clean_pass(manufacturer)
    # Every pass leaves the string unchanged or shorter
    while True:
        cleaned = _clean_pass(result)
        if cleaned == result:
            return result
        result = cleaned


def _clean_pass(manufacturer: str) -> str:
    result = RE_CUT.split(manufacturer, maxsplit=1)[0]

    if NEEDS_CLEANING.search(result):
        result = RE_COMMON.sub("", result).strip()
        result = RE_PUNCTUATION.sub("", result)

    result = result.replace("?", "").replace(",", "")
    result = result.replace("<unknown>", "Unknown")
    return result.strip()
