"""
URL sanitization for rendering stored URIs.
"""
import re
from typing import Optional

_ALLOWED_SCHEME = re.compile(r"^(https|http|mailto|tel|data):", re.IGNORECASE)
_RELATIVE = re.compile(r"^[/#]")


def sanitize_url(url: Optional[str]) -> str:
    """Return `url` trimmed if it is safe to navigate to, otherwise "#".

    Allows http(s), mailto, tel and data URIs plus paths starting with
    "/" or "#". Anything else, such as javascript:, becomes "#".
    """
    if not url:
        return "#"
    trimmed = url.strip()
    if _ALLOWED_SCHEME.match(trimmed) or _RELATIVE.match(trimmed):
        return trimmed
    return "#"
