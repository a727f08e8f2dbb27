# activities/sanitizers.py
"""
Input sanitization for activity content.

Titles, descriptions and free-text notes pass through these functions
before being stored.
"""
import re
from typing import Optional

import bleach


# Allowed HTML tags for rich text descriptions
ALLOWED_TAGS = [
    'p', 'br', 'strong', 'em', 'u', 'a', 'ul', 'ol', 'li',
    'h1', 'h2', 'h3', 'h4', 'blockquote', 'code', 'pre'
]

ALLOWED_ATTRIBUTES = {
    'a': ['href', 'title'],
}

CONTROL_CHARS = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]')


def sanitize_text(text: Optional[str], max_length: Optional[int] = None) -> str:
    """
    Plain text: trimmed, control characters removed, truncated to max_length.
    None becomes an empty string.
    """
    if text is None:
        return ""

    text = CONTROL_CHARS.sub('', text.strip())

    if max_length and len(text) > max_length:
        text = text[:max_length]

    return text


def sanitize_html(html: Optional[str], max_length: Optional[int] = None) -> str:
    if html is None:
        return ""

    clean = bleach.clean(
        html.strip(),
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        strip=True
    )

    if max_length and len(clean) > max_length:
        clean = clean[:max_length]

    return clean


def sanitize_title(title: Optional[str]) -> str:
    """
    Activity titles: max 255 characters, no HTML, single line.
    """
    text = re.sub(r'<[^>]+>', '', sanitize_text(title))
    text = re.sub(r'\s+', ' ', text).strip()
    return text[:255]


def sanitize_description(description: Optional[str]) -> str:
    return sanitize_html(description, max_length=10000)


def sanitize_notes(notes: Optional[str], max_length: int) -> Optional[str]:
    """Confirmation notes; empty input is stored as None."""
    text = sanitize_text(notes, max_length=max_length)
    return text or None
