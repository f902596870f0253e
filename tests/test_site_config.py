"""Tests for site configuration merging."""

import pytest

from errors import ValidationError
from seed import DEFAULT_SITE
from site_config import merge_site_config

CURRENT = {
    "brand": "Apex",
    "hero": {"title": "Old", "subtitle": "Keep me", "backgroundImage": "/a.svg"},
    "highlights": [{"title": "One", "description": "First"}],
    "consult": {"title": "Ask", "description": "Us"},
    "footer": {"email": "a@b.c", "phone": "1", "address": "Here"},
}


def test_nested_sections_merge_deeply():
    merged = merge_site_config(CURRENT, {"hero": {"title": "New"}, "footer": {"phone": "2"}})

    assert merged["hero"] == {"title": "New", "subtitle": "Keep me", "backgroundImage": "/a.svg"}
    assert merged["footer"] == {"email": "a@b.c", "phone": "2", "address": "Here"}
    assert merged["consult"] == CURRENT["consult"]
    assert merged["brand"] == "Apex"


def test_top_level_keys_are_replaced():
    merged = merge_site_config(CURRENT, {"brand": "Apex Athletics", "tagline": "Go"})
    assert merged["brand"] == "Apex Athletics"
    assert merged["tagline"] == "Go"


def test_highlights_replaced_only_by_list():
    replaced = merge_site_config(CURRENT, {"highlights": []})
    kept = merge_site_config(CURRENT, {"highlights": {"title": "x"}})

    assert replaced["highlights"] == []
    assert kept["highlights"] == CURRENT["highlights"]


def test_null_section_is_ignored():
    assert merge_site_config(CURRENT, {"hero": None})["hero"] == CURRENT["hero"]


def test_non_object_section_is_rejected():
    with pytest.raises(ValidationError):
        merge_site_config(CURRENT, {"consult": "text"})


def test_merge_does_not_mutate_current():
    merge_site_config(CURRENT, {"hero": {"title": "New"}})
    assert CURRENT["hero"]["title"] == "Old"


@pytest.mark.anyio
async def test_update_persists_merged_config(site):
    updated = await site.update({"hero": {"title": "New"}})

    assert updated["hero"]["title"] == "New"
    assert updated["hero"]["subtitle"] == DEFAULT_SITE["hero"]["subtitle"]
    assert updated["hero"]["primaryAction"] == DEFAULT_SITE["hero"]["primaryAction"]
    assert await site.get() == updated


@pytest.mark.anyio
async def test_update_rejects_invalid_highlights(site):
    with pytest.raises(ValidationError):
        await site.update({"highlights": ["not an object"]})
    assert await site.get() == DEFAULT_SITE


@pytest.mark.anyio
async def test_update_requires_object(site):
    with pytest.raises(ValidationError):
        await site.update(["brand"])
