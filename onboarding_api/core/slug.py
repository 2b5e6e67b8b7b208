import re
import unicodedata
from typing import Optional

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(name: Optional[str]) -> str:
    """Turn a business name into a URL-safe identifier.

    "Café & Açaí Ltda" -> "cafe-acai-ltda". Empty input gives "".
    """
    if not name:
        return ""
    decomposed = unicodedata.normalize("NFKD", name.lower())
    ascii_only = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _NON_ALNUM.sub("-", ascii_only).strip("-")
