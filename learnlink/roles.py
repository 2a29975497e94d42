"""
Roles and the per-role behaviour of the shell around screens.

Each role gets a strategy object; callers ask the strategy instead of
comparing role strings. ``strategy_for(user)`` returns GUEST when nobody is
logged in and None for a role the client does not know.
"""

from enum import Enum
from typing import List, NamedTuple, Optional

from learnlink.models import Notification, User


class Role(str, Enum):
    """Account roles"""
    PARENT = "parent"
    TUTOR = "tutor"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["Role"]:
        try:
            return cls(value)
        except ValueError:
            return None


class NavLink(NamedTuple):
    label: str
    path: str


class RoleStrategy:
    """What the navigation shell does for one kind of visitor"""

    role: Optional[Role] = None
    dashboard_path = "/"
    fetches_busy_times = False

    def nav_links(self, user: Optional[User]) -> List[NavLink]:
        raise NotImplementedError

    def display_name(self, user: User) -> str:
        return user.display_name

    def message_link(self, notification: Notification) -> Optional[str]:
        """Where a "View Message" link on a notification goes, if anywhere"""
        return None


class GuestStrategy(RoleStrategy):

    def nav_links(self, user: Optional[User]) -> List[NavLink]:
        return [
            NavLink("Home", "/"),
            NavLink("Tutor Login", "/tutor-login"),
            NavLink("Student Login", "/parent-login"),
            NavLink("Tutor Register", "/register/tutor"),
            NavLink("Student Register", "/register/parent"),
        ]


class ParentStrategy(RoleStrategy):
    role = Role.PARENT
    dashboard_path = "/parent-dashboard"
    fetches_busy_times = True

    def nav_links(self, user: Optional[User]) -> List[NavLink]:
        return [
            NavLink("Home", "/"),
            NavLink("Dashboard", "/dashboard"),
            NavLink("Bookings", "/parent/bookings"),
            NavLink("Profile", "/parent/profile"),
        ]

    def display_name(self, user: User) -> str:
        return user.child_name or user.display_name

    def message_link(self, notification: Notification) -> Optional[str]:
        if notification.type != "message" or not notification.data:
            return None
        other = notification.data.get("tutorId") or notification.data.get("senderId")
        return f"/parent/messages/{other}" if other else None


class TutorStrategy(RoleStrategy):
    role = Role.TUTOR
    dashboard_path = "/tutor-dashboard"

    def nav_links(self, user: Optional[User]) -> List[NavLink]:
        user_id = user.id if user else ""
        return [
            NavLink("Home", "/"),
            NavLink("Dashboard", "/dashboard"),
            NavLink("Bookings", "/tutor/bookings"),
            NavLink("Profile", f"/tutor-profile/{user_id}"),
        ]

    def message_link(self, notification: Notification) -> Optional[str]:
        if notification.type != "message" or not notification.data:
            return None
        return "/tutor/messages"


class AdminStrategy(RoleStrategy):
    role = Role.ADMIN
    dashboard_path = "/admin"

    def nav_links(self, user: Optional[User]) -> List[NavLink]:
        return [
            NavLink("Home", "/"),
            NavLink("Admin Panel", "/dashboard"),
        ]


GUEST = GuestStrategy()

STRATEGIES = {
    Role.PARENT: ParentStrategy(),
    Role.TUTOR: TutorStrategy(),
    Role.ADMIN: AdminStrategy(),
}


def strategy_for(user: Optional[User]) -> Optional[RoleStrategy]:
    if user is None:
        return GUEST
    role = Role.parse(user.role)
    if role is None:
        return None
    return STRATEGIES[role]
