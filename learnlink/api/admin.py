"""Endpoints under /api/admin"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from learnlink.api.client import multipart
from learnlink.api.subjects import parse_subjects
from learnlink.models import Dispute, Review, Subject, User
from learnlink.uploads import ImageUpload

if TYPE_CHECKING:
    from learnlink.api.client import ApiClient


USERS_PAGE_SIZE = 10


@dataclass
class UserPage:
    users: List[User]
    page: int = 1
    total_pages: int = 1
    total_users: int = 0


@dataclass
class UserDetails:
    user: User
    additional_data: Dict[str, Any] = field(default_factory=dict)


class AdminAPI:

    def __init__(self, client: "ApiClient"):
        self.client = client

    # ==================== Overview ====================

    async def dashboard(self) -> Dict[str, Any]:
        response = await self.client.get("/api/admin/dashboard", fallback="Failed to fetch dashboard data")
        return response.data or {}

    async def activity(self, period: str = "7d") -> Dict[str, Any]:
        response = await self.client.get(
            "/api/admin/activity", params={"period": period}, fallback="Failed to fetch activity data"
        )
        return response.data or {}

    # ==================== Users ====================

    async def users(
        self,
        page: int = 1,
        role: Optional[str] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = USERS_PAGE_SIZE,
    ) -> UserPage:
        response = await self.client.get(
            "/api/admin/users",
            params={"page": page, "limit": limit, "role": role, "status": status, "search": search},
            fallback="Failed to fetch users",
        )
        data = response.data or {}
        pagination = data.get("pagination") or {}
        return UserPage(
            users=[User.model_validate(u) for u in data.get("users") or []],
            page=page,
            total_pages=int(pagination.get("totalPages") or 1),
            total_users=int(pagination.get("totalUsers") or 0),
        )

    async def user(self, user_id: str) -> UserDetails:
        response = await self.client.get(f"/api/admin/users/{user_id}", fallback="Failed to fetch user details")
        data = response.data or {}
        return UserDetails(
            user=User.model_validate(data.get("user") or {}),
            additional_data=data.get("additionalData") or {},
        )

    async def set_user_status(self, user_id: str, action: str) -> str:
        """action is "activate" or "deactivate" """
        response = await self.client.put(
            f"/api/admin/users/{user_id}/status",
            json={"action": action},
            fallback=f"Failed to {action} user",
        )
        return response.message or f"User {action}d successfully"

    # ==================== Tutor verification ====================

    async def pending_tutors(self) -> List[User]:
        page = await self.users(role="tutor", status="unverified", limit=100)
        return page.users

    async def verify_tutor(self, tutor_id: str, action: str) -> str:
        """action is "approve" or "reject" """
        response = await self.client.post(
            f"/api/admin/verify-tutor/{tutor_id}",
            json={"action": action},
            fallback=f"Failed to {action} tutor",
        )
        return response.message or f"Tutor {action}d successfully"

    async def verify_tutors(self, tutor_ids: List[str], action: str) -> str:
        response = await self.client.post(
            "/api/admin/verify-tutors",
            json={"tutorIds": tutor_ids, "action": action},
            fallback=f"Failed to {action} tutors",
        )
        return response.message or f"{len(tutor_ids)} tutor(s) {action}d successfully"

    # ==================== Disputes ====================

    async def disputes(
        self,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        dispute_type: Optional[str] = None,
    ) -> List[Dispute]:
        response = await self.client.get(
            "/api/admin/disputes",
            params={"status": status, "priority": priority, "disputeType": dispute_type},
            fallback="Failed to fetch disputes",
        )
        return [Dispute.model_validate(d) for d in (response.data or {}).get("disputes") or []]

    async def resolve_dispute(self, dispute_id: str, resolution_type: str, admin_notes: str = "") -> str:
        response = await self.client.post(
            f"/api/admin/disputes/{dispute_id}/resolve",
            json={"resolution": admin_notes, "resolutionType": resolution_type},
            fallback="Failed to resolve dispute",
        )
        return response.message or "Dispute resolved successfully"

    async def set_dispute_priority(self, dispute_id: str, priority: str) -> str:
        response = await self.client.put(
            f"/api/admin/disputes/{dispute_id}/priority",
            json={"priority": priority},
            fallback="Failed to update priority",
        )
        return response.message or "Priority updated successfully"

    async def dismiss_dispute(self, dispute_id: str, admin_notes: str = "") -> str:
        response = await self.client.post(
            f"/api/admin/disputes/{dispute_id}/dismiss",
            json={"adminNotes": admin_notes},
            fallback="Failed to dismiss dispute",
        )
        return response.message or "Dispute dismissed successfully"

    # ==================== Reviews ====================

    async def reviews(
        self,
        status: Optional[str] = None,
        rating: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[Review]:
        response = await self.client.get(
            "/api/admin/reviews",
            params={"status": status, "rating": rating, "search": search},
            fallback="Failed to fetch reviews",
        )
        return [Review.model_validate(r) for r in (response.data or {}).get("reviews") or []]

    async def moderate_review(self, review_id: str, action: str) -> str:
        """action is "flag", "remove" or "approve" """
        response = await self.client.post(
            "/api/admin/feedback",
            json={"reviewId": review_id, "action": action},
            fallback=f"Failed to {action} review",
        )
        return response.message or f"Review {action} successful"

    # ==================== Subjects ====================

    async def subjects(self) -> List[Subject]:
        response = await self.client.get("/api/admin/subjects", fallback="Failed to fetch subjects")
        return parse_subjects(response.data)

    async def create_subject(self, name: str, image: Optional[ImageUpload] = None) -> str:
        response = await self.client.post(
            "/api/admin/subjects",
            files=multipart({"name": name}, {"image": image}),
            fallback="Failed to create subject",
        )
        return response.message or "Subject created successfully"

    async def update_subject(self, subject_id: str, name: str, image: Optional[ImageUpload] = None) -> str:
        response = await self.client.put(
            f"/api/admin/subjects/{subject_id}",
            files=multipart({"name": name}, {"image": image}),
            fallback="Failed to update subject",
        )
        return response.message or "Subject updated successfully"

    async def delete_subject(self, subject_id: str) -> str:
        response = await self.client.delete(
            f"/api/admin/subjects/{subject_id}", fallback="Failed to delete subject"
        )
        return response.message or "Subject deleted successfully"
