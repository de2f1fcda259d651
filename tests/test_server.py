from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from redis_db.store import MemoryStore
from server import create_app, resolve_source


def make_client(settings, store=None) -> tuple[TestClient, MemoryStore]:
    store = store or MemoryStore("stats")
    return TestClient(create_app(settings, store)), store


def test_stats_endpoint_after_startup(settings) -> None:
    client, store = make_client(settings)
    with client:
        r = client.get("/stats")

    assert r.status_code == 200
    assert r.json() == {
        "status": "success",
        "data": {
            "totalDownloads": 0,
            "downloadsToday": 0,
            "downloadsThisWeek": 0,
            "downloadsThisMonth": 0,
            "socialMediaStats": {},
        },
    }


def test_stats_endpoint_requires_api_key(auth_settings) -> None:
    client, _ = make_client(auth_settings)
    with client:
        missing = client.get("/stats")
        ok = client.get("/stats", headers={"Authorization": "API-Key secret"})

    assert missing.status_code == 401
    assert missing.json()["error"]["code"] == "error.api.auth.key.missing"
    assert ok.status_code == 200


def test_video_download_is_recorded(settings) -> None:
    Path(settings.download_dir, "clip.mp4").write_bytes(b"\x00\x00\x00\x18ftypmp42")
    client, store = make_client(settings)

    with client:
        r1 = client.get("/video/clip.mp4", params={"source": "tiktok"})
        r2 = client.get("/video/clip.mp4", params={"url": "https://www.instagram.com/reel/abc/"})
        r3 = client.get("/video/clip.mp4")
        stats = client.get("/stats").json()["data"]

    assert r1.status_code == r2.status_code == r3.status_code == 200
    assert r1.headers["content-type"] == "video/mp4"
    assert stats["totalDownloads"] == 3
    assert stats["downloadsToday"] == 3
    assert stats["socialMediaStats"] == {"tiktok": 1, "instagram": 1}


def test_missing_video_is_not_recorded(settings) -> None:
    client, store = make_client(settings)

    with client:
        r = client.get("/video/absent.mp4", params={"source": "tiktok"})
        stats = client.get("/stats").json()["data"]

    assert r.status_code == 404
    assert "text/html" in r.headers["content-type"]
    assert stats["totalDownloads"] == 0


def test_unknown_path_returns_html_404(settings) -> None:
    client, _ = make_client(settings)
    with client:
        r = client.get("/nope")

    assert r.status_code == 404
    assert "404" in r.text


def test_explicit_source_label_is_kept_as_given(settings) -> None:
    Path(settings.download_dir, "clip.mp4").write_bytes(b"\x00\x00\x00\x18ftypmp42")
    client, _ = make_client(settings)

    with client:
        client.get("/video/clip.mp4", params={"source": " TikTok Ads "})
        client.get("/video/clip.mp4", params={"source": "tiktok"})
        stats = client.get("/stats").json()["data"]

    assert stats["socialMediaStats"] == {"TikTok Ads": 1, "tiktok": 1}


@pytest.mark.parametrize(
    "source, url, expected",
    [
        ("TikTok", None, "TikTok"),
        ("  ", "https://youtu.be/abc", "youtube"),
        (None, "https://www.instagram.com/reel/abc/", "instagram"),
        (None, "https://example.com/a.mp4", None),
        (None, None, None),
    ],
)
def test_resolve_source(source, url, expected) -> None:
    assert resolve_source(source, url) == expected
