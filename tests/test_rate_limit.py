from fastapi.testclient import TestClient

from marketplace.core.config import RateLimitSettings
from marketplace.core.rate_limit import RateLimiter, RateLimitRule
from marketplace.main import create_app
from tests.conftest import build_settings


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_limiter_blocks_after_limit_until_window_resets():
    clock = FakeClock()
    limiter = RateLimiter(clock=clock)
    rule = RateLimitRule("auth", limit=2, window_seconds=60)

    assert limiter.hit(rule, "1.2.3.4").remaining == 1
    assert limiter.hit(rule, "1.2.3.4").allowed
    clock.now += 15
    blocked = limiter.hit(rule, "1.2.3.4")
    assert not blocked.allowed
    assert blocked.remaining == 0
    assert blocked.retry_after == 45

    clock.now += 45
    assert limiter.hit(rule, "1.2.3.4").allowed


def test_limiter_counts_clients_and_rules_separately():
    limiter = RateLimiter(clock=FakeClock())
    auth = RateLimitRule("auth", limit=1, window_seconds=60)
    api = RateLimitRule("api", limit=1, window_seconds=60)

    assert limiter.hit(auth, "a").allowed
    assert limiter.hit(auth, "b").allowed
    assert limiter.hit(api, "a").allowed
    assert not limiter.hit(auth, "a").allowed

    limiter.reset()
    assert limiter.hit(auth, "a").allowed


def test_auth_endpoints_are_throttled(tmp_path):
    settings = build_settings(tmp_path, rate_limit=RateLimitSettings(auth_limit=2, api_limit=10_000))
    credentials = {"email": "nobody@example.com", "password": "Wrong123!"}

    with TestClient(create_app(settings)) as client:
        first = client.post("/user/login", json=credentials)
        second = client.post("/user/login", json=credentials)
        third = client.post("/user/login", json=credentials)
        other = client.get("/store")

    assert first.status_code == 401
    assert second.status_code == 401
    assert third.status_code == 429
    assert third.json()["success"] is False
    assert int(third.headers["Retry-After"]) > 0
    assert other.status_code == 200


def test_disabled_rate_limiting_sets_no_headers(tmp_path):
    settings = build_settings(tmp_path, rate_limit=RateLimitSettings(enabled=False))

    with TestClient(create_app(settings)) as client:
        response = client.get("/health")

    assert response.status_code == 200
    assert "X-RateLimit-Limit" not in response.headers
