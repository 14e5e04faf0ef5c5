"""
Tests for image URL resolution and the deep transform.
"""
import copy

from chanomhub_sdk.transforms import resolve_image_url, transform_image_urls_deep

CDN = "https://cdn.test"


def test_resolve_bare_filename():
    assert resolve_image_url("cover.jpg", CDN) == "https://cdn.test/cover.jpg"


def test_resolve_keeps_absolute_urls():
    assert resolve_image_url("https://other.test/a.png", CDN) == "https://other.test/a.png"
    assert resolve_image_url("http://other.test/a.png", CDN) == "http://other.test/a.png"


def test_resolve_none():
    assert resolve_image_url(None, CDN) is None


def test_resolve_is_idempotent():
    once = resolve_image_url("a.png", CDN)
    assert resolve_image_url(once, CDN) == once


def test_resolve_empty_string_yields_bare_cdn_slash():
    # Probably unintended: an empty filename becomes "<cdn>/" instead of
    # staying empty. Kept as-is; this test pins the current behavior.
    assert resolve_image_url("", CDN) == "https://cdn.test/"


def _fixture():
    return {
        "article": {
            "id": "1",
            "mainImage": "main.jpg",
            "coverImage": "https://elsewhere.test/cover.jpg",
            "backgroundImage": None,
            "url": "not-an-image.jpg",
            "author": {"name": "A", "image": "avatar.png"},
            "images": [{"id": "i1", "url": "shot1.png"}, {"id": "i2", "url": "https://x.test/2.png"}],
            "mods": [{"images": [{"url": "mod.png"}], "categories": [{"name": "c"}]}],
            "tags": [{"id": "t", "name": "RPG"}],
        },
        "count": 3,
    }


def test_transform_resolves_recognised_keys_at_any_depth():
    result = transform_image_urls_deep(_fixture(), CDN)
    article = result["article"]
    assert article["mainImage"] == "https://cdn.test/main.jpg"
    assert article["coverImage"] == "https://elsewhere.test/cover.jpg"
    assert article["backgroundImage"] is None
    assert article["author"]["image"] == "https://cdn.test/avatar.png"
    assert article["images"][0]["url"] == "https://cdn.test/shot1.png"
    assert article["images"][1]["url"] == "https://x.test/2.png"
    assert article["mods"][0]["images"][0]["url"] == "https://cdn.test/mod.png"


def test_transform_leaves_unrecognised_keys_alone():
    result = transform_image_urls_deep(_fixture(), CDN)
    assert result["article"]["url"] == "not-an-image.jpg"
    assert result["article"]["tags"] == [{"id": "t", "name": "RPG"}]
    assert result["count"] == 3


def test_transform_is_idempotent():
    once = transform_image_urls_deep(_fixture(), CDN)
    assert transform_image_urls_deep(once, CDN) == once


def test_transform_does_not_mutate_input():
    data = _fixture()
    snapshot = copy.deepcopy(data)
    transform_image_urls_deep(data, CDN)
    assert data == snapshot


def test_transform_scalars_and_lists():
    assert transform_image_urls_deep(None, CDN) is None
    assert transform_image_urls_deep(5, CDN) == 5
    assert transform_image_urls_deep([{"image": "a.png"}], CDN) == [{"image": "https://cdn.test/a.png"}]
