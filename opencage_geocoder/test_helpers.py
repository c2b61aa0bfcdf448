"""
Helpers shared by the geocoder tests: fake clock and response builders.
"""

import json
from typing import Any, Callable, Dict, List, Optional

import httpx

from .pacing import Clock

START_TIME = 1_700_000_000.0


class FakeClock(Clock):
    """Clock that only moves when told to, recording every sleep."""

    def __init__(self, start: float = START_TIME):
        self.current = start
        self.sleeps: List[float] = []

    def now(self) -> float:
        return self.current

    async def sleepUntil(self, timestamp: float) -> None:
        if timestamp > self.current:
            self.sleeps.append(timestamp - self.current)
            self.current = timestamp

    def advance(self, seconds: float) -> None:
        self.current += seconds


def makeResultItem(
    formatted: str = "Fonteinstraat, 3000 Leuven, Belgium",
    lat: float = 50.8789,
    lng: float = 4.7009,
    confidence: int = 9,
) -> Dict[str, Any]:
    return {
        "confidence": confidence,
        "formatted": formatted,
        "geometry": {"lat": lat, "lng": lng},
        "bounds": {
            "northeast": {"lat": lat + 0.001, "lng": lng + 0.001},
            "southwest": {"lat": lat - 0.001, "lng": lng - 0.001},
        },
    }


def makeBody(
    code: int = 200,
    message: str = "OK",
    remaining: Optional[int] = 2499,
    reset: Optional[float] = None,
    limit: int = 2500,
    results: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    """Build response envelope; remaining=None leaves the rate block out."""
    body: Dict[str, Any] = {
        "status": {"code": code, "message": message},
        "results": results if results is not None else [makeResultItem()],
        "total_results": len(results) if results is not None else 1,
    }
    if remaining is not None:
        body["rate"] = {
            "limit": limit,
            "remaining": remaining,
            "reset": int(reset if reset is not None else START_TIME + 86400),
        }
    return body


def makeTransport(
    body: Dict[str, Any],
    httpStatus: int = 200,
    requests: Optional[List[httpx.Request]] = None,
) -> httpx.MockTransport:
    """Transport answering every request with the same JSON body."""

    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        return httpx.Response(httpStatus, content=json.dumps(body).encode("utf-8"))

    return httpx.MockTransport(handler)


def makeRaisingTransport(errorFactory: Callable[[httpx.Request], Exception]) -> httpx.MockTransport:
    """Transport failing every request with given exception."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise errorFactory(request)

    return httpx.MockTransport(handler)
