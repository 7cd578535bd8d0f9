"""
In-memory stand-in for the availability and booking endpoints, served
through ``httpx.MockTransport``.

    api = FakeBookingApi()
    client = BookingApiClient(base_url="http://test", transport=api.transport())
"""

from __future__ import annotations

import asyncio
import json
from datetime import datetime, timezone
from uuid import uuid4

import httpx

from tests.mocks.models import MOCK_USER


class FakeBookingApi:
    def __init__(self) -> None:
        self.booked: dict[str, list[tuple[datetime, datetime]]] = {}
        self.requests: list[httpx.Request] = []
        # court_id -> event the availability handler waits on before answering
        self.gates: dict[str, asyncio.Event] = {}
        self.fail_availability = False
        # POST /api/bookings fails at the transport level
        self.bookings_unreachable = False
        # (status, message) returned by the next POST /api/bookings
        self.reject_next: tuple[int, str] | None = None

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    def availability_calls(self) -> list[dict]:
        return [
            json.loads(r.content) for r in self.requests
            if r.url.path == "/api/availability"
        ]

    async def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        body = json.loads(request.content)
        if request.url.path == "/api/availability":
            return await self._availability(body)
        if request.url.path == "/api/bookings":
            if self.bookings_unreachable:
                raise httpx.ConnectError("connection refused", request=request)
            return self._create_booking(body)
        return httpx.Response(404, json={"error": {"code": "NOT_FOUND", "message": "Not Found"}})

    async def _availability(self, body: dict) -> httpx.Response:
        court_id = body["court_id"]
        gate = self.gates.get(court_id)
        if gate is not None:
            await gate.wait()
        if self.fail_availability:
            return httpx.Response(500, json={"error": {"code": "INTERNAL_ERROR", "message": "boom"}})
        window_start = datetime.fromisoformat(body["start_time"])
        window_end = datetime.fromisoformat(body["end_time"])
        bookings = [
            {"start_time": s.isoformat(), "end_time": e.isoformat()}
            for s, e in self.booked.get(court_id, [])
            if s < window_end and window_start < e
        ]
        return httpx.Response(200, json={"court_id": court_id, "bookings": bookings})

    def _create_booking(self, body: dict) -> httpx.Response:
        if self.reject_next is not None:
            status, message = self.reject_next
            self.reject_next = None
            return httpx.Response(status, json={"error": {"code": "REJECTED", "message": message}})
        start = datetime.fromisoformat(body["start_time"])
        end = datetime.fromisoformat(body["end_time"])
        self.booked.setdefault(body["court_id"], []).append((start, end))
        return httpx.Response(201, json={
            "id": str(uuid4()),
            "court_id": body["court_id"],
            "court_name": "Court 1",
            "owner_id": str(MOCK_USER.id),
            "customer_name": body["customer_name"],
            "start_time": body["start_time"],
            "end_time": body["end_time"],
            "amount": body["amount"],
            "status": "Pending",
            "created_at": datetime.now(timezone.utc).isoformat(),
        })


def court_id() -> str:
    return str(uuid4())
