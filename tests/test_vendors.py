import json

import pytest
import requests

from pharmtalk.vendors import naver_local, nominatim, openrouter, pharmacy_registry


class DummyResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else ""

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class DummySession:
    def __init__(self):
        self.calls = []
        self.response = DummyResponse()
        self.error = None

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append(("GET", url, params, headers, timeout))
        if self.error:
            raise self.error
        return self.response

    def post(self, url, json=None, headers=None, timeout=None):
        self.calls.append(("POST", url, json, headers, timeout))
        if self.error:
            raise self.error
        return self.response


@pytest.fixture
def session(monkeypatch):
    dummy = DummySession()
    for module in (naver_local, nominatim, openrouter, pharmacy_registry):
        monkeypatch.setattr(module, "_SESSION", dummy)
    return dummy


# ---------- local search ----------


def test_search_local_success(session):
    session.response = DummyResponse(payload={"items": [{"title": "서울약국"}, "junk"]})

    items = naver_local.search_local("명동 약국", "id", "secret")

    assert items == [{"title": "서울약국"}]
    _, url, params, headers, timeout = session.calls[0]
    assert url.endswith("/v1/search/local.json")
    assert params == {"query": "명동 약국", "display": 5, "sort": "comment"}
    assert headers["X-Naver-Client-Id"] == "id"
    assert headers["X-Naver-Client-Secret"] == "secret"
    assert timeout == 10


def test_search_local_non_success_is_empty(session):
    session.response = DummyResponse(status_code=429, payload={"errorMessage": "limit"})

    assert naver_local.search_local("명동 약국", "id", "secret") == []


def test_search_local_transport_error_raises(session):
    session.error = requests.ConnectionError("boom")

    with pytest.raises(naver_local.NaverSearchError):
        naver_local.search_local("명동 약국", "id", "secret")


# ---------- reverse geocoding ----------


def test_reverse_returns_address(session):
    session.response = DummyResponse(payload={"address": {"suburb": "명동"}})

    assert nominatim.reverse(37.5, 127.0, zoom=18, user_agent="PharmTalk/1.0") == {"suburb": "명동"}
    _, _, params, headers, _ = session.calls[0]
    assert params["zoom"] == 18
    assert params["accept-language"] == "ko"
    assert headers == {"User-Agent": "PharmTalk/1.0"}


def test_reverse_non_success_raises(session):
    session.response = DummyResponse(status_code=503)

    with pytest.raises(nominatim.GeocodeError):
        nominatim.reverse(37.5, 127.0, zoom=18, user_agent="PharmTalk/1.0")


# ---------- registry ----------


def _registry_body(code="00", item=None):
    return {
        "response": {
            "header": {"resultCode": code, "resultMsg": "NORMAL SERVICE."},
            "body": {"items": {"item": item} if item is not None else ""},
        }
    }


def test_fetch_nearby_builds_raw_query(session):
    session.response = DummyResponse(text='{"response": {"header": {"resultCode": "00"}, "body": {"items": ""}}}')

    assert pharmacy_registry.fetch_nearby(37.5, 127.0, "a%2Bb") == []
    _, url, params, _, _ = session.calls[0]
    assert params is None
    assert "serviceKey=a%2Bb" in url
    assert "xPos=127.0" in url and "yPos=37.5" in url
    assert "radius=3000" in url and "numOfRows=30" in url


def test_parse_registry_payload_single_item_becomes_list():
    text = json.dumps(_registry_body(item={"dutyName": "서울약국"}))

    assert pharmacy_registry.parse_registry_payload(text) == [{"dutyName": "서울약국"}]


def test_parse_registry_payload_list():
    text = json.dumps(_registry_body(item=[{"dutyName": "A"}, {"dutyName": "B"}]))

    assert [item["dutyName"] for item in pharmacy_registry.parse_registry_payload(text)] == ["A", "B"]


@pytest.mark.parametrize(
    "text",
    [
        "<OpenAPI_ServiceResponse><cmmMsgHeader/></OpenAPI_ServiceResponse>",
        "Unauthorized",
        "{not json",
        '{"response": {"header": {"resultCode": "30"}}}',
        "[]",
    ],
)
def test_parse_registry_payload_rejects_unusable_bodies(text):
    with pytest.raises(pharmacy_registry.RegistryError):
        pharmacy_registry.parse_registry_payload(text)


# ---------- completions ----------


def test_chat_completion_success(session):
    session.response = DummyResponse(payload={"choices": [{"message": {"content": "안녕하세요"}}]})

    content = openrouter.chat_completion(
        [{"role": "user", "content": "hi"}],
        api_key="sk",
        model="m",
        base_url="https://llm.example/v1",
        max_tokens=512,
        temperature=0.7,
    )

    assert content == "안녕하세요"
    _, url, body, headers, _ = session.calls[0]
    assert url == "https://llm.example/v1/chat/completions"
    assert body["max_tokens"] == 512
    assert body["temperature"] == 0.7
    assert headers["Authorization"] == "Bearer sk"


def test_chat_completion_omits_temperature_when_unset(session):
    session.response = DummyResponse(payload={"choices": []})

    content = openrouter.chat_completion([], api_key="sk", model="m", base_url="https://x", max_tokens=10)

    assert content == ""
    assert "temperature" not in session.calls[0][2]


def test_chat_completion_error_status(session):
    session.response = DummyResponse(status_code=500, text="upstream down")

    with pytest.raises(openrouter.OpenRouterError):
        openrouter.chat_completion([], api_key="sk", model="m", base_url="https://x", max_tokens=10)
