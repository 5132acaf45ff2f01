from xml.etree import ElementTree as ET

from pymongo.errors import ServerSelectionTimeoutError

from travelkitchen.features.seo.api import routes as seo
from travelkitchen.shared.config.settings import settings
from travelkitchen.shared.persistence import mongo

NS = {"sm": "http://www.sitemaps.org/schemas/sitemap/0.9"}


def _locs(xml_bytes):
    root = ET.fromstring(xml_bytes)
    return [el.text for el in root.findall("sm:url/sm:loc", NS)]


def test_sitemap_lists_static_pages_and_published_recipes(client, db, monkeypatch):
    monkeypatch.setattr(settings, "SITE_URL", "https://example.test/")
    db[mongo.RECIPES].insert_many([
        {"_id": "pub1", "userId": "u", "isPublished": True, "createdAt": 1_700_000_000_000},
        {"_id": "draft", "userId": "u", "isPublished": False, "createdAt": 1_700_000_000_000},
    ])

    r = client.get("/sitemap.xml")

    assert r.status_code == 200
    assert r.headers["content-type"].startswith("application/xml")
    locs = _locs(r.content)
    assert locs[0] == "https://example.test"
    assert "https://example.test/generate" in locs
    assert "https://example.test/recipe/pub1" in locs
    assert "https://example.test/recipe/draft" not in locs


def test_sitemap_falls_back_to_static_pages(monkeypatch):
    def unavailable():
        raise ServerSelectionTimeoutError("no servers")

    monkeypatch.setattr(seo.repository, "list_published_recipes", unavailable)
    entries = seo.sitemap_entries()
    assert len(entries) == len(seo.STATIC_PAGES)


def test_recipe_lastmod_is_iso_utc(db):
    db[mongo.RECIPES].insert_one({"_id": "r", "isPublished": True, "createdAt": 0})
    entry = seo.sitemap_entries()[-1]
    assert entry["lastmod"] == "1970-01-01T00:00:00Z"
    assert entry["priority"] == "0.7"


def test_robots(client, monkeypatch):
    monkeypatch.setattr(settings, "SITE_URL", "https://example.test")
    r = client.get("/robots.txt")
    assert r.status_code == 200
    assert "Disallow: /my-recipes" in r.text
    assert "Sitemap: https://example.test/sitemap.xml" in r.text
