"""Endpoints under /api/parent"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from learnlink.models import (
    Booking,
    Bookmark,
    Dispute,
    Message,
    RecentVisit,
    Review,
    User,
    WaitlistEntry,
)

if TYPE_CHECKING:
    from learnlink.api.client import ApiClient


@dataclass
class ParentDashboard:
    recommended_tutors: List[User] = field(default_factory=list)
    recently_visited: List[RecentVisit] = field(default_factory=list)


@dataclass
class TutorReviews:
    tutor: Optional[User]
    reviews: List[Review]
    average_rating: float = 0.0


class ParentAPI:

    def __init__(self, client: "ApiClient"):
        self.client = client

    # ==================== Discovery ====================

    async def dashboard(self) -> ParentDashboard:
        response = await self.client.get("/api/parent/dashboard", fallback="Failed to fetch dashboard.")
        data = response.data or {}
        return ParentDashboard(
            recommended_tutors=[User.model_validate(t) for t in data.get("recommendedTutors") or []],
            recently_visited=[RecentVisit.model_validate(v) for v in data.get("recentlyVisited") or []],
        )

    async def search_tutors(
        self,
        name: Optional[str] = None,
        subject: Optional[str] = None,
        location: Optional[str] = None,
        rating: Optional[str] = None,
        min_rate: Optional[str] = None,
        max_rate: Optional[str] = None,
        sort_by: Optional[str] = None,
        filter_type: Optional[str] = None,
        limit: int = 50,
    ) -> List[User]:
        params = {
            "name": name,
            "subject": subject,
            "location": location,
            "rating": rating,
            "minRate": min_rate,
            "maxRate": max_rate,
            "sortBy": sort_by,
            "filterType": filter_type,
            "limit": limit,
        }
        response = await self.client.get(
            "/api/parent/search-tutors", params=params, fallback="Failed to fetch tutors"
        )
        return [User.model_validate(t) for t in (response.data or {}).get("tutors") or []]

    async def tutor(self, tutor_id: str) -> User:
        response = await self.client.get(
            f"/api/parent/tutor/{tutor_id}", fallback="Failed to fetch tutor profile"
        )
        return User.model_validate(response.data or {})

    async def similar_tutors(self, subject_id: str, exclude_tutor_id: str) -> List[User]:
        response = await self.client.get(
            "/api/parent/similar-tutors",
            params={"subjectId": subject_id, "excludeTutorId": exclude_tutor_id},
            fallback="Failed to fetch similar tutors",
        )
        return [User.model_validate(t) for t in response.data or []]

    async def tutor_reviews(self, tutor_id: str) -> TutorReviews:
        response = await self.client.get(
            f"/api/parent/tutor/{tutor_id}/reviews", fallback="Failed to fetch reviews"
        )
        data = response.data or {}
        tutor = data.get("tutor")
        return TutorReviews(
            tutor=User.model_validate(tutor) if tutor else None,
            reviews=[Review.model_validate(r) for r in data.get("reviews") or []],
            average_rating=float(data.get("averageRating") or 0),
        )

    async def record_visit(self, tutor_id: str, subject_id: str) -> None:
        await self.client.post(
            "/api/parent/recently-visited",
            json={"tutorId": tutor_id, "subjectId": subject_id},
            fallback="Failed to record visit",
        )

    async def busy_times(self) -> Dict[str, Any]:
        response = await self.client.get(
            "/api/parent/all-tutors/busy-times", fallback="Failed to fetch tutor busy times"
        )
        return (response.data or {}).get("busyTimesByTutor") or {}

    # ==================== Bookmarks ====================

    async def bookmarks(self) -> List[Bookmark]:
        response = await self.client.get("/api/parent/bookmarks", fallback="Failed to fetch bookmarks")
        return [Bookmark.model_validate(b) for b in response.data or []]

    async def toggle_bookmark(self, tutor_id: str, subject_id: str) -> List[Bookmark]:
        """The API toggles membership; the fresh list is returned"""
        await self.client.post(
            "/api/parent/bookmark",
            json={"tutorId": tutor_id, "subjectId": subject_id},
            fallback="Failed to update bookmark",
        )
        return await self.bookmarks()

    # ==================== Bookings ====================

    async def book_session(self, tutor_id: str, session_time: str, subject: str,
                           notes: str = "") -> str:
        response = await self.client.post(
            "/api/parent/book-session",
            json={"tutorId": tutor_id, "sessionTime": session_time, "subject": subject, "notes": notes},
            fallback="Failed to book session",
        )
        return response.message or "Session booked successfully!"

    async def bookings(self, status: Optional[str] = None, limit: Optional[int] = None) -> List[Booking]:
        response = await self.client.get(
            "/api/parent/bookings",
            params={"status": status, "limit": limit},
            fallback="Failed to fetch bookings",
        )
        return [Booking.model_validate(b) for b in (response.data or {}).get("bookings") or []]

    async def cancel_booking(self, booking_id: str) -> str:
        response = await self.client.post(
            "/api/parent/bookings/cancel",
            json={"bookingId": booking_id},
            fallback="Failed to cancel booking",
        )
        return response.message or "Booking cancelled"

    async def submit_review(self, booking_id: str, rating: int, comment: str,
                            subject: Optional[str] = None) -> Review:
        payload: Dict[str, Any] = {"bookingId": booking_id, "rating": rating, "comment": comment}
        if subject:
            payload["subject"] = subject
        response = await self.client.post(
            "/api/parent/review", json=payload, fallback="Failed to submit review"
        )
        return Review.model_validate(response.data or payload)

    # ==================== Messages ====================

    async def messages(self, tutor_id: str) -> List[Message]:
        response = await self.client.get(
            f"/api/parent/messages/{tutor_id}", fallback="Failed to fetch messages"
        )
        return [Message.model_validate(m) for m in (response.data or {}).get("messages") or []]

    async def send_message(self, receiver_id: str, content: str) -> None:
        await self.client.post(
            "/api/parent/message",
            json={"receiverId": receiver_id, "content": content},
            fallback="Failed to send message",
        )

    # ==================== Waitlist ====================

    async def waitlist(self) -> List[WaitlistEntry]:
        response = await self.client.get("/api/parent/waitlist", fallback="Failed to fetch waitlist")
        data = response.data or {}
        return [WaitlistEntry.model_validate(w) for w in data.get("waitlistEntries") or []]

    async def cancel_waitlist(self, waitlist_id: str) -> str:
        response = await self.client.post(
            "/api/parent/waitlist/cancel",
            json={"waitlistId": waitlist_id},
            fallback="Failed to cancel waitlist entry",
        )
        return response.message or "Waitlist entry cancelled"

    # ==================== Disputes ====================

    async def disputes(self) -> List[Dispute]:
        response = await self.client.get("/api/parent/disputes", fallback="Failed to fetch disputes")
        return [Dispute.model_validate(d) for d in (response.data or {}).get("disputes") or []]

    async def bookings_for_dispute(self) -> List[Booking]:
        response = await self.client.get(
            "/api/parent/bookings-for-dispute", fallback="Failed to fetch bookings"
        )
        return [Booking.model_validate(b) for b in response.data or []]

    async def create_dispute(self, booking_id: str, dispute_type: str, title: str,
                             description: str) -> str:
        response = await self.client.post(
            "/api/parent/disputes",
            json={
                "bookingId": booking_id,
                "disputeType": dispute_type,
                "title": title,
                "description": description,
            },
            fallback="Failed to create dispute",
        )
        return response.message or "Dispute submitted"

    async def add_dispute_message(self, dispute_id: str, message: str) -> None:
        await self.client.post(
            f"/api/parent/disputes/{dispute_id}/message",
            json={"message": message},
            fallback="Failed to send message",
        )
