from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Dict, List
from xml.etree import ElementTree as ET

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse, Response
from pymongo.errors import PyMongoError

from travelkitchen.features.recipes.infra import repository
from travelkitchen.shared.config.settings import settings

log = logging.getLogger("seo")

router = APIRouter(tags=["seo"])

_SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"

# (path, changefreq, priority)
STATIC_PAGES = (
    ("", "daily", "1.0"),
    ("/generate", "weekly", "0.9"),
    ("/marketplace", "daily", "0.8"),
    ("/sign-in", "monthly", "0.5"),
    ("/sign-up", "monthly", "0.5"),
)

ROBOTS_DISALLOW = ("/api/", "/v1/", "/my-recipes", "/sign-in", "/sign-up")


def _iso(ts_ms: float) -> str:
    return datetime.fromtimestamp(ts_ms / 1000, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def sitemap_entries() -> List[Dict[str, str]]:
    """Static pages plus one entry per published recipe."""
    site = settings.SITE_URL.rstrip("/")
    today = _iso(datetime.now(tz=timezone.utc).timestamp() * 1000)
    entries = [
        {"loc": f"{site}{path}", "lastmod": today, "changefreq": freq, "priority": prio}
        for path, freq, prio in STATIC_PAGES
    ]
    try:
        published = repository.list_published_recipes()
    except PyMongoError as e:
        log.error(f"Error fetching recipes for sitemap: {e}")
        return entries
    for doc in published:
        entries.append({
            "loc": f"{site}/recipe/{doc['_id']}",
            "lastmod": _iso(doc.get("createdAt") or 0),
            "changefreq": "weekly",
            "priority": "0.7",
        })
    return entries


def render_sitemap(entries: List[Dict[str, str]]) -> bytes:
    urlset = ET.Element("urlset", xmlns=_SITEMAP_NS)
    for entry in entries:
        url = ET.SubElement(urlset, "url")
        for key in ("loc", "lastmod", "changefreq", "priority"):
            ET.SubElement(url, key).text = entry[key]
    return ET.tostring(urlset, encoding="utf-8", xml_declaration=True)


@router.get("/sitemap.xml")
def sitemap():
    return Response(content=render_sitemap(sitemap_entries()), media_type="application/xml")


@router.get("/robots.txt", response_class=PlainTextResponse)
def robots():
    site = settings.SITE_URL.rstrip("/")
    lines = ["User-agent: *", "Allow: /"]
    lines += [f"Disallow: {path}" for path in ROBOTS_DISALLOW]
    lines += ["", f"Sitemap: {site}/sitemap.xml", f"Host: {site}"]
    return "\n".join(lines) + "\n"
