"""Unit tests for core/utils/slug.py"""

import pytest

from mdblog.core.utils.slug import slugify


@pytest.mark.parametrize("text,expected", [
    ("A tiny IoC container", "a-tiny-ioc-container"),
    ("Functional options in Go", "functional-options-in-go"),
    ("Loading config from env_vars", "loading-config-from-env-vars"),
    ("  leading and trailing  ", "leading-and-trailing"),
    ("Mutex---guarded maps", "mutex-guarded-maps"),
    ("What's new? (2021)", "whats-new-2021"),
    ("Café résumé", "cafe-resume"),
    ("", ""),
])
def test_slugify(text, expected):
    """slugify converts a title to a lowercase hyphenated filename slug."""
    assert slugify(text) == expected


def test_slugify_strips_leading_trailing_hyphens():
    assert slugify("!leading!") == "leading"
