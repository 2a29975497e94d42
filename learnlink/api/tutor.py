"""Endpoints under /api/tutor"""

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from learnlink.api.client import multipart
from learnlink.api.subjects import parse_subjects
from learnlink.models import (
    AvailabilitySlot,
    Booking,
    Message,
    Review,
    Student,
    Subject,
    User,
    WaitlistEntry,
)
from learnlink.uploads import ImageUpload

if TYPE_CHECKING:
    from learnlink.api.client import ApiClient


@dataclass
class TutorDashboard:
    profile: User
    statistics: Dict[str, Any] = field(default_factory=dict)
    recent_bookings: List[Booking] = field(default_factory=list)
    recent_reviews: List[Review] = field(default_factory=list)


class TutorAPI:

    def __init__(self, client: "ApiClient"):
        self.client = client

    # ==================== Profile ====================

    async def profile(self) -> User:
        response = await self.client.get("/api/tutor/profile", fallback="Failed to fetch profile")
        return User.model_validate(response.data or {})

    async def dashboard(self) -> TutorDashboard:
        """Profile and dashboard stats, fetched together"""
        profile_res, dashboard_res = await asyncio.gather(
            self.client.get("/api/tutor/profile", fallback="Failed to fetch data"),
            self.client.get("/api/tutor/dashboard", fallback="Failed to fetch data"),
        )
        data = dashboard_res.data or {}
        return TutorDashboard(
            profile=User.model_validate(profile_res.data or {}),
            statistics=data.get("statistics") or {},
            recent_bookings=[Booking.model_validate(b) for b in data.get("recentBookings") or []],
            recent_reviews=[Review.model_validate(r) for r in data.get("recentReviews") or []],
        )

    async def update_profile(self, fields: Dict[str, Any], image: Optional[ImageUpload] = None) -> User:
        response = await self.client.put(
            "/api/tutor/profile",
            files=multipart(fields, {"profileImage": image}),
            fallback="Failed to update profile",
        )
        return User.model_validate(response.data or {})

    # ==================== Subjects ====================

    async def subjects(self) -> List[Subject]:
        response = await self.client.get("/api/tutor/subjects", fallback="Failed to fetch subjects")
        return parse_subjects(response.data)

    async def add_subject(self, name: str, image_url: str = "") -> Subject:
        response = await self.client.post(
            "/api/tutor/subjects",
            json={"name": name, "imageUrl": image_url},
            fallback="Failed to add subject",
        )
        data = response.data or {}
        return Subject.model_validate(data.get("subject") or data or {"name": name})

    async def delete_subject(self, subject_id: str) -> None:
        await self.client.delete(f"/api/tutor/subjects/{subject_id}", fallback="Failed to delete subject")

    # ==================== Bookings ====================

    async def bookings(self, status: Optional[str] = None) -> List[Booking]:
        response = await self.client.get(
            "/api/tutor/bookings", params={"status": status}, fallback="Failed to fetch bookings"
        )
        return [Booking.model_validate(b) for b in (response.data or {}).get("bookings") or []]

    async def complete_booking(self, booking_id: str) -> str:
        response = await self.client.put(
            f"/api/tutor/bookings/{booking_id}/complete", fallback="Failed to mark as completed"
        )
        return response.message or "Session marked as completed"

    async def respond_to_booking(self, booking_id: str, action: str) -> str:
        response = await self.client.post(
            "/api/tutor/booking/respond",
            json={"bookingId": booking_id, "action": action},
            fallback=f"Failed to {action} booking",
        )
        return response.message or ("Booking accepted" if action == "accept" else "Booking declined")

    async def students(self) -> List[Student]:
        response = await self.client.get("/api/tutor/students", fallback="Failed to fetch students")
        return [Student.model_validate(s) for s in response.data or []]

    # ==================== Messages ====================

    async def messages(self, parent_id: Optional[str] = None) -> List[Message]:
        response = await self.client.get(
            "/api/tutor/messages", params={"parentId": parent_id}, fallback="Failed to fetch conversations"
        )
        return [Message.model_validate(m) for m in (response.data or {}).get("messages") or []]

    async def mark_messages_read(self, message_ids: List[str]) -> None:
        await self.client.post(
            "/api/tutor/messages/read",
            json={"messageIds": message_ids},
            fallback="Failed to mark messages as read",
        )

    async def send_message(self, receiver_id: str, content: str) -> None:
        await self.client.post(
            "/api/tutor/message",
            json={"receiverId": receiver_id, "content": content},
            fallback="Failed to send message",
        )

    # ==================== Schedule ====================

    async def save_availability(self, slots: List[AvailabilitySlot]) -> str:
        response = await self.client.post(
            "/api/tutor/availability",
            json={"availability": [slot.to_api() for slot in slots]},
            fallback="Failed to save availability",
        )
        return response.message or "Availability updated successfully!"

    async def sync_calendar(self, calendar_type: str, access_token: str) -> str:
        response = await self.client.post(
            "/api/tutor/calendar/sync",
            json={"calendarType": calendar_type, "accessToken": access_token},
            fallback="Calendar sync failed",
        )
        return (response.data or {}).get("message") or "Calendar sync initiated!"

    # ==================== Waitlist ====================

    async def waitlist(self) -> List[WaitlistEntry]:
        response = await self.client.get("/api/tutor/waitlist", fallback="Failed to fetch waitlist")
        data = response.data or {}
        return [WaitlistEntry.model_validate(w) for w in data.get("waitlistEntries") or []]

    async def accept_waitlist(self, waitlist_id: str, session_time: str) -> str:
        response = await self.client.post(
            "/api/tutor/waitlist/accept",
            json={"waitlistId": waitlist_id, "sessionTime": session_time},
            fallback="Failed to accept waitlist entry",
        )
        return response.message or "Waitlist entry accepted and booking created"

    async def remove_waitlist(self, waitlist_id: str) -> str:
        response = await self.client.post(
            "/api/tutor/waitlist/remove",
            json={"waitlistId": waitlist_id},
            fallback="Failed to remove waitlist entry",
        )
        return response.message or "Waitlist entry removed"
