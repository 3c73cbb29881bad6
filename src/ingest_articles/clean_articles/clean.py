"""Text cleanup for feed fields."""

import logging
import re
from typing import Optional

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]+>")
_WHITESPACE_RE = re.compile(r"\s+")
_IMG_SRC_RE = re.compile(r"""<img[^>]+src=["'](.*?)["']""")


def strip_cdata(text: Optional[str]) -> str:
    """Remove CDATA markers some feeds leave in their text fields."""
    if not text:
        return ""
    return text.replace("<![CDATA[", "").replace("]]>", "").strip()


def clean_text(text: Optional[str]) -> str:
    """Clean text by stripping HTML, fixing escapes, and collapsing whitespace."""
    text = strip_cdata(text)
    if not text:
        return ""
    # Strip HTML tags (keep text content)
    text = _TAG_RE.sub(" ", text)
    # Remove escaped quotes
    text = text.replace('\\"', '"')
    # Collapse whitespace
    return _WHITESPACE_RE.sub(" ", text).strip()


def extract_image_url(html: Optional[str]) -> Optional[str]:
    """Return the `src` of the first `<img>` tag, if any."""
    if not html:
        return None
    match = _IMG_SRC_RE.search(html)
    if match and match.group(1):
        return match.group(1)
    return None
