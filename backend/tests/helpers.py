"""Shared test doubles for the clock and the HTTP transport."""

from typing import Iterable, List, Union

import httpx

TEST_STORAGE_KEY = "ROpdebee_dimensions_cache"
IMAGE_URL = "https://example.com/images/cover.png"


class FakeClock:
    """Millisecond clock that advances by one on every read."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        self.now += 1
        return self.now


class ScriptedTransport:
    """
    Request handler for httpx.MockTransport replaying scripted outcomes.

    Each outcome is a status code, an ``httpx.Response`` or an exception
    instance. The last outcome repeats once the script runs out.
    """

    def __init__(self, outcomes: Iterable[Union[int, httpx.Response, Exception]]):
        self.outcomes = list(outcomes)
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        index = min(len(self.requests), len(self.outcomes) - 1)
        self.requests.append(request)
        outcome = self.outcomes[index]

        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, httpx.Response):
            return outcome
        return httpx.Response(outcome)

    @property
    def call_count(self) -> int:
        return len(self.requests)


def image_response(
    size: str = "12345", content_type: str = "image/png", status_code: int = 200
) -> httpx.Response:
    return httpx.Response(
        status_code,
        headers={"content-length": size, "content-type": content_type},
    )


def connect_error(url: str = IMAGE_URL) -> httpx.ConnectError:
    return httpx.ConnectError(
        "Connection refused", request=httpx.Request("HEAD", url)
    )
