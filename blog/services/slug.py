import re

_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")


def generate_slug(title: str) -> str:
    """Suggest a URL slug for a title.

    >>> generate_slug("Hello, World! 2024")
    'hello-world-2024'
    """
    slug = _DISALLOWED.sub("", (title or "").lower())
    slug = _WHITESPACE.sub("-", slug)
    return slug.strip("-")
