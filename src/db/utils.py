import re
import unicodedata

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9\s_-]")
_SLUG_SEPARATORS = re.compile(r"[\s_-]+")


def generate_slug(text: str | None, max_length: int = 128) -> str:
    """Build a lowercase, hyphen-separated, ASCII-only slug from ``text``."""
    if not text:
        return ""
    normalized = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    slug = _NON_SLUG_CHARS.sub("", normalized.lower())
    slug = _SLUG_SEPARATORS.sub("-", slug).strip("-")
    return slug[:max_length].rstrip("-")
