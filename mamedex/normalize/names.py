"""Display name and year cleanup."""

UNKNOWN_YEAR = "Unknown"


def clean_name(description: str) -> str:
    """Build a display name from a machine description.

    Drops ``?``, unescapes ``&amp;``, cuts at the first ``(`` and
    capitalizes the first letter of every word. Other characters are left
    untouched, so ``Ms. Pac-Man`` stays as is.

    Args:
        description: Raw machine description

    Returns:
        Display name

    Example:
        >>> clean_name("galaxian (Namco set 1)")
        'Galaxian'
    """
    text = description.replace("?", "").replace("&amp;", "&")
    text = text.split("(", 1)[0]

    chars = []
    capitalize_next = True
    for c in text:
        if c.isspace():
            capitalize_next = True
            chars.append(c)
        elif capitalize_next:
            chars.append(c.upper())
            capitalize_next = False
        else:
            chars.append(c)

    return "".join(chars).strip()


def normalize_year(year: str) -> str:
    """Map partially known years such as ``198?`` to ``Unknown``."""
    if "?" in year:
        return UNKNOWN_YEAR
    return year
