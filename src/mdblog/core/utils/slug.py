"""Slug generation for post filenames and URLs"""

import re
import unicodedata


def slugify(text: str) -> str:
    """Convert a title to the lowercase, hyphen-separated slug used in post filenames."""
    text = unicodedata.normalize('NFKD', text).encode('ascii', 'ignore').decode('ascii')
    text = text.lower()
    text = re.sub(r'[^\w\s-]', '', text)
    text = re.sub(r'[\s_]+', '-', text)
    return re.sub(r'-+', '-', text).strip('-')
