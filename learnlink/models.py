"""
Entity models mirroring the LearnLink API payloads.

The API speaks camelCase and keys documents by ``_id``. Models accept both
that and snake_case names, and keep unknown keys so nothing the API sends
is lost when a record is written back to the session file.
"""

from typing import Annotated, Any, Dict, List, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, AliasChoices
from pydantic.alias_generators import to_camel


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


OptionalNumber = Annotated[Optional[float], BeforeValidator(_blank_to_none)]


class LearnLinkModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_api(self) -> Dict[str, Any]:
        """Dump with the API's key names"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Document(LearnLinkModel):
    id: str = Field("", validation_alias=AliasChoices("_id", "id"), serialization_alias="_id")


def ref_id(value: Any) -> str:
    """Resolve a reference that may be an id string or a populated document"""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, Document):
        return value.id
    if isinstance(value, dict):
        return str(value.get("_id") or value.get("id") or "")
    return str(value)


def ref_name(value: Any, default: str = "") -> str:
    """Display name of a populated reference, or the raw value"""
    if value is None:
        return default
    if isinstance(value, str):
        return value or default
    if isinstance(value, dict):
        return value.get("name") or default
    return getattr(value, "name", None) or default


# ==================== Catalog ====================

class Subject(Document):
    """Global catalog subject"""
    name: Optional[str] = ""
    image_url: Optional[str] = None


class TutorSubject(LearnLinkModel):
    """A subject a tutor teaches, with their rate for it"""
    subject: Union[Subject, str, None] = None
    hourly_rate: OptionalNumber = None
    hours: OptionalNumber = None
    title: Optional[str] = None
    name: Optional[str] = None

    @property
    def subject_id(self) -> str:
        return ref_id(self.subject)

    @property
    def subject_name(self) -> str:
        if isinstance(self.subject, Subject) and self.subject.name:
            return self.subject.name
        if self.name:
            return self.name
        return self.subject if isinstance(self.subject, str) else ""


class AvailabilitySlot(LearnLinkModel):
    day: str
    start_time: Optional[str] = None
    end_time: Optional[str] = None


# ==================== Users ====================

class User(Document):
    name: Optional[str] = ""
    email: Optional[str] = ""
    role: Optional[str] = ""
    status: Optional[str] = None
    profile_image: Optional[str] = None
    location: Optional[str] = None
    date: Optional[str] = None
    is_active: Optional[bool] = None

    # Parent
    child_name: Optional[str] = None
    child_age: Union[int, str, None] = None
    child_grade: Optional[str] = None
    child_learning_goals: Optional[str] = None
    child_special_needs: Optional[str] = None
    preferred_subjects: List[Union[Subject, str]] = Field(default_factory=list)
    child_preferred_subjects: List[Union[Subject, str]] = Field(default_factory=list)

    # Tutor
    subjects: List[TutorSubject] = Field(default_factory=list)
    expertise: List[str] = Field(default_factory=list)
    education: Optional[str] = None
    bio: Optional[str] = None
    experience: Union[str, int, None] = None
    is_verified: Optional[bool] = None
    rating: OptionalNumber = None
    availability: List[AvailabilitySlot] = Field(default_factory=list)

    @property
    def display_name(self) -> str:
        return self.name or self.email or ""


# ==================== Bookings ====================

class Booking(Document):
    parent_id: Union[User, str, None] = None
    tutor_id: Union[User, str, None] = None
    subject: Union[Subject, str, None] = None
    session_time: Optional[str] = None
    status: str = ""
    notes: Optional[str] = None
    created_at: Optional[str] = None

    @property
    def subject_name(self) -> str:
        return ref_name(self.subject, "Unknown subject")


class WaitlistEntry(Document):
    tutor_id: Union[User, str, None] = None
    parent_id: Union[User, str, None] = None
    subject: Union[Subject, str, None] = None
    preferred_time: Optional[str] = None
    status: Optional[str] = None
    created_at: Optional[str] = None


# ==================== Feedback ====================

class Review(Document):
    parent_id: Union[User, str, None] = None
    tutor_id: Union[User, str, None] = None
    booking_id: Union[Booking, str, None] = None
    subject: Union[Subject, str, None] = None
    rating: int = 0
    comment: Optional[str] = ""
    is_flagged: bool = False
    is_removed: bool = False
    created_at: Optional[str] = None


class DisputeMessage(LearnLinkModel):
    sender: Union[User, str, None] = None
    message: Optional[str] = ""
    created_at: Optional[str] = None


class Dispute(Document):
    parent_id: Union[User, str, None] = None
    tutor_id: Union[User, str, None] = None
    booking_id: Union[Booking, str, None] = None
    subject_id: Union[Subject, str, None] = None
    dispute_type: str = "other"
    title: Optional[str] = ""
    description: Optional[str] = ""
    status: str = "pending"
    priority: str = "medium"
    resolution: Optional[str] = None
    resolution_type: Optional[str] = None
    resolved_by: Union[User, str, None] = None
    admin_notes: Optional[str] = None
    messages: List[DisputeMessage] = Field(default_factory=list)
    created_at: Optional[str] = None


# ==================== Communication ====================

class Notification(Document):
    message: Optional[str] = ""
    type: str = ""
    data: Optional[Dict[str, Any]] = None
    is_read: bool = False
    created_at: Optional[str] = None


class Message(Document):
    sender_id: Union[User, str, None] = None
    receiver_id: Union[User, str, None] = None
    content: Optional[str] = ""
    is_read: bool = False
    created_at: Optional[str] = None


class TutorSubjectPair(LearnLinkModel):
    """A (tutor, subject) reference, populated or not"""
    tutor_id: Union[User, str, None] = None
    subject_id: Union[Subject, str, None] = None

    @property
    def key(self) -> tuple:
        return (ref_id(self.tutor_id), ref_id(self.subject_id))


class Bookmark(TutorSubjectPair):
    pass


class RecentVisit(TutorSubjectPair):
    pass


class LatestBooking(LearnLinkModel):
    status: Optional[str] = None
    session_time: Optional[str] = None


class Student(LearnLinkModel):
    """A parent/child pair a tutor has had bookings with"""
    parent_id: Union[User, str, None] = None
    parent_name: Optional[str] = ""
    child_name: Optional[str] = ""
    child_age: Union[int, str, None] = None
    child_grade: Optional[str] = None
    child_learning_goals: Optional[str] = None
    subject: Optional[str] = ""
    total_sessions: int = 0
    latest_booking: Optional[LatestBooking] = None
