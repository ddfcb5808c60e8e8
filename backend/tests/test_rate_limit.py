import pytest
from starlette.requests import Request

from formcraft.config import get_settings
from formcraft.services.rate_limit import client_ip, public_limit, rate_limit_key


def _request(peer="198.51.100.7", forwarded=None):
    headers = []
    if forwarded is not None:
        headers.append((b"x-forwarded-for", forwarded.encode()))
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers, "client": (peer, 5000)})


@pytest.fixture
def behind_proxy(monkeypatch):
    monkeypatch.setattr(get_settings(), "trusted_proxies", "10.0.0.1, 10.0.0.2")


def test_forwarded_header_ignored_without_trusted_proxy():
    assert client_ip(_request(forwarded="203.0.113.9")) == "198.51.100.7"


def test_forwarded_header_used_behind_trusted_proxy(behind_proxy):
    request = _request(peer="10.0.0.1", forwarded="203.0.113.9, 10.0.0.2")
    assert client_ip(request) == "203.0.113.9"


def test_spoofed_prefix_does_not_replace_real_client(behind_proxy):
    # The proxy appends the address it saw; anything before it came from the client
    request = _request(peer="10.0.0.1", forwarded="1.2.3.4, 203.0.113.9")
    assert client_ip(request) == "203.0.113.9"


def test_untrusted_peer_cannot_forward(behind_proxy):
    request = _request(peer="198.51.100.7", forwarded="203.0.113.9")
    assert client_ip(request) == "198.51.100.7"


def test_missing_client_has_a_key():
    request = Request({"type": "http", "method": "GET", "path": "/", "headers": [], "client": None})
    assert client_ip(request) is None
    assert rate_limit_key(request) == "unknown"


def test_limit_follows_settings(monkeypatch):
    monkeypatch.setattr(get_settings(), "rate_limit_requests", 5)
    monkeypatch.setattr(get_settings(), "rate_limit_window_seconds", 30)
    assert public_limit() == "5/30 seconds"


def test_rotating_forwarded_header_does_not_bypass_limit(anon_client, make_form, monkeypatch):
    form = make_form()
    monkeypatch.setattr(get_settings(), "rate_limit_requests", 2)
    for i in range(2):
        response = anon_client.get(f"/api/public/forms/{form.id}", headers={"X-Forwarded-For": f"203.0.113.{i}"})
        assert response.status_code == 200
    response = anon_client.get(f"/api/public/forms/{form.id}", headers={"X-Forwarded-For": "203.0.113.99"})
    assert response.status_code == 429


def test_limit_is_shared_across_public_routes(anon_client, make_form, monkeypatch):
    form = make_form()
    monkeypatch.setattr(get_settings(), "rate_limit_requests", 2)
    assert anon_client.get(f"/api/public/forms/{form.id}").status_code == 200
    assert anon_client.post(f"/api/public/forms/{form.id}/submit", json={}).status_code == 201
    response = anon_client.get("/api/files/missing.pdf")
    assert response.status_code == 429
    assert response.json() == {"detail": "Too many requests, please try again later"}


def test_each_client_has_its_own_budget(anon_client, make_form, monkeypatch):
    form = make_form()
    monkeypatch.setattr(get_settings(), "rate_limit_requests", 1)
    monkeypatch.setattr(get_settings(), "trusted_proxies", "testclient")
    url = f"/api/public/forms/{form.id}"
    assert anon_client.get(url, headers={"X-Forwarded-For": "203.0.113.1"}).status_code == 200
    assert anon_client.get(url, headers={"X-Forwarded-For": "203.0.113.1"}).status_code == 429
    assert anon_client.get(url, headers={"X-Forwarded-For": "203.0.113.2"}).status_code == 200
