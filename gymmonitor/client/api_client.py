from __future__ import annotations

from datetime import date, datetime
from typing import Any, TypedDict

import httpx

from .config import get_settings


class ApiError(Exception):
    """A non-2xx response; ``message`` is the backend's ``error`` field."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class AuthCheck(TypedDict):
    id: int
    name: str
    role: str


class BookingSummary(TypedDict):
    className: str
    locationName: str
    startTime: str
    durationMinutes: int


class Dashboard(TypedDict):
    dashboardTitle: str
    totalBookings: int
    upcomingBookings: list[BookingSummary]
    totalVisits: int
    amountOwed: str


class MembershipDetails(TypedDict):
    clubName: str
    dateJoined: str
    totalVisits: int
    membershipPlanName: str | None
    nextBillingDate: str | None
    amountDue: str


class TimetableEntry(TypedDict):
    classId: int
    className: str
    instructorName: str
    locationName: str
    startTime: str
    durationMinutes: int
    currentBookings: int
    maxCapacity: int


class GymClassDetails(TypedDict, total=False):
    id: int
    name: str
    instructorName: str
    startTime: str
    endTime: str
    clubName: str
    locationName: str
    description: str
    bookingStatus: str | None


class MemberOverview(TypedDict):
    id: int
    name: str
    membershipPlanName: str | None
    owesUs: str


class StaffScheduleEntry(TypedDict):
    classId: int
    className: str
    locationName: str
    startTime: str
    durationMinutes: int
    currentBookings: int
    maxCapacity: int


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return response.reason_phrase


class GymMonitorClient:
    """Async client for the GymMonitor REST API.

    Usage::

        async with GymMonitorClient() as client:
            await client.login("member@demo.gym", "memberpass123")
            await client.book_class(1)
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        self.token = token
        self._client = httpx.AsyncClient(
            base_url=(base_url or settings.api_base_url).rstrip("/") + "/",
            timeout=settings.timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "GymMonitorClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        response = await self._client.request(
            method, path.lstrip("/"), headers=self._headers(), **kwargs
        )
        if response.is_error:
            raise ApiError(response.status_code, _error_message(response))
        return response.json()

    async def signup(
        self,
        *,
        name: str,
        email: str,
        password: str,
        club_code: str,
        membership_plan_id: int,
    ) -> str:
        data = await self._request(
            "POST",
            "/auth/signup",
            json={
                "name": name,
                "email": email,
                "password": password,
                "clubCode": club_code,
                "membershipPlanId": membership_plan_id,
            },
        )
        return data["message"]

    async def login(self, email: str, password: str) -> str:
        data = await self._request("POST", "/auth/login", json={"email": email, "password": password})
        self.token = data["token"]
        return self.token

    async def check_auth(self) -> AuthCheck:
        return await self._request("GET", "/auth/check")

    async def get_dashboard(self) -> Dashboard:
        return await self._request("GET", "/member/dashboard")

    async def get_membership_details(self) -> MembershipDetails:
        return await self._request("GET", "/member/membership")

    async def record_visit(self) -> str:
        data = await self._request("POST", "/member/visits")
        return data["message"]

    async def get_timetable(self, day: date | None = None) -> list[TimetableEntry]:
        params = {"date": day.isoformat()} if day else None
        return await self._request("GET", "/classes/timetable", params=params)

    async def get_class_details(self, class_id: int) -> GymClassDetails:
        return await self._request("GET", f"/classes/{class_id}")

    async def book_class(self, class_id: int) -> str:
        data = await self._request("POST", f"/classes/{class_id}/book")
        return data["message"]

    async def get_club_members(self) -> list[MemberOverview]:
        data = await self._request("GET", "/staff/members")
        return data["members"]

    async def get_staff_schedule(self, day: date | None = None) -> list[StaffScheduleEntry]:
        params = {"date": day.isoformat()} if day else None
        return await self._request("GET", "/staff/schedule", params=params)

    async def create_class(
        self,
        *,
        location_id: int,
        name: str,
        start_time: datetime,
        end_time: datetime,
        max_capacity: int,
        description: str = "",
    ) -> GymClassDetails:
        return await self._request(
            "POST",
            "/staff/classes",
            json={
                "locationId": location_id,
                "name": name,
                "description": description,
                "startTime": start_time.isoformat(),
                "endTime": end_time.isoformat(),
                "maxCapacity": max_capacity,
            },
        )


__all__ = [
    "ApiError",
    "AuthCheck",
    "BookingSummary",
    "Dashboard",
    "GymClassDetails",
    "GymMonitorClient",
    "MemberOverview",
    "MembershipDetails",
    "StaffScheduleEntry",
    "TimetableEntry",
]
