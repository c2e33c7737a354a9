import argparse
from datetime import datetime

import pytest

from pharmtalk.core.config import ConfigError, Settings
from pharmtalk.jobs import pharmacy_search as job
from pharmtalk.vendors import nominatim


def _settings(**overrides):
    values = dict(naver_client_id="id", naver_client_secret="secret", public_data_api_key="key")
    values.update(overrides)
    return Settings(**values)


def test_run_pharmacy_search_requires_credentials():
    with pytest.raises(ConfigError):
        job.run_pharmacy_search(lat=37.5, lng=127.0, settings=_settings(naver_client_id=""))


def test_run_pharmacy_search_wires_vendors(monkeypatch):
    searched = []
    registry_calls = []

    def fake_search_local(query, client_id, client_secret, display=5, sort="comment"):
        searched.append((query, client_id, client_secret, display, sort))
        return [
            {
                "title": "서울약국",
                "category": "의료,건강>약국",
                "roadAddress": "세종대로 110",
                "mapx": "1269790000",
                "mapy": "375670000",
            }
        ]

    def fake_fetch_nearby(lat, lng, service_key, radius=3000, rows=30):
        registry_calls.append((lat, lng, service_key, radius, rows))
        return [{"dutyName": "서울약국", "dutyTime1s": "0900", "dutyTime1c": "1800"}]

    monkeypatch.setattr(job.naver_local, "search_local", fake_search_local)
    monkeypatch.setattr(job.pharmacy_registry, "fetch_nearby", fake_fetch_nearby)
    monkeypatch.setattr(nominatim, "reverse", lambda lat, lng, zoom, user_agent: {"county": "중구"})

    response = job.run_pharmacy_search(
        lat=37.5665, lng=126.978, settings=_settings(), now=datetime(2024, 1, 1, 10, 30)
    )

    assert searched == [("중구 약국", "id", "secret", 5, "comment")]
    assert registry_calls == [(37.5665, 126.978, "key", 3000, 30)]
    assert response.has_real_hours is True
    assert response.pharmacies[0].open_label == "영업중 ~18:00"


def test_run_pharmacy_search_skips_registry_without_key(monkeypatch):
    monkeypatch.setattr(job.naver_local, "search_local", lambda query, **kwargs: [])
    monkeypatch.setattr(nominatim, "reverse", lambda lat, lng, zoom, user_agent: {})

    def unexpected(*args, **kwargs):
        raise AssertionError("registry must not be called without a key")

    monkeypatch.setattr(job.pharmacy_registry, "fetch_nearby", unexpected)

    response = job.run_pharmacy_search(lat=37.5, lng=127.0, settings=_settings(public_data_api_key=""))

    assert response.pharmacies == []
    assert response.has_real_hours is False


def test_build_parser():
    parser = job.build_parser()
    args = parser.parse_args(["--lat", "37.5", "--lng", "127.0"])

    assert isinstance(parser, argparse.ArgumentParser)
    assert args.lat == 37.5
    assert args.lng == 127.0
