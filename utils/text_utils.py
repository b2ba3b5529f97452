import unicodedata
from typing import Optional, Tuple


def strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def collation_key(text: Optional[str]) -> Tuple[str, str, str]:
    """Sort key approximating locale collation.

    Primary level ignores accents and case, secondary restores accents,
    tertiary falls back to the raw text so the key is total.
    """
    value = text or ""
    folded = value.casefold()
    return (strip_accents(folded), folded, value)
