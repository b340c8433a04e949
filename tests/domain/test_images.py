import pytest

from alteran.domain.images import normalize_image_url

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("/uploads/1700000000000.png", "/api/uploads/1700000000000.png"),
        ("https://alteran.tech/uploads/a.webp", "/api/uploads/a.webp"),
        ("/api/uploads/a.webp", "/api/uploads/a.webp"),
        ("https://opengraph.githubassets.com/1/owner/repo", "https://opengraph.githubassets.com/1/owner/repo"),
        ("https://cdn.example.com/static/uploads-banner.png", "https://cdn.example.com/static/uploads-banner.png"),
    ],
)
def test_normalize_image_url(url, expected):
    assert normalize_image_url(url) == expected


@pytest.mark.parametrize("url", [None, ""])
def test_missing_url_is_none(url):
    assert normalize_image_url(url) is None
