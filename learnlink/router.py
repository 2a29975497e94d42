"""
Route table.

Paths look like the web app's: ``/parent/tutor/:tutorId/subject/:subjectId``.
``resolve()`` turns a path (with an optional query string) into a screen
instance carrying the matched params and query.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern, Tuple, Type
from urllib.parse import parse_qsl, unquote, urlsplit

from learnlink.exceptions import RouteNotFoundError
from learnlink.screens.admin.activity import AdminActivityScreen
from learnlink.screens.admin.dashboard import AdminDashboardScreen
from learnlink.screens.admin.disputes import AdminDisputesScreen
from learnlink.screens.admin.reviews import AdminReviewsScreen
from learnlink.screens.admin.subjects import AdminSubjectsScreen
from learnlink.screens.admin.tutors_verification import AdminTutorsVerificationScreen
from learnlink.screens.admin.user_details import AdminUserDetailsScreen
from learnlink.screens.admin.users import AdminUsersScreen
from learnlink.screens.auth import (
    ForgotPasswordScreen,
    ParentLoginScreen,
    RegisterScreen,
    ResetPasswordScreen,
    TutorLoginScreen,
)
from learnlink.screens.base import MessageScreen, Screen, ScreenContext
from learnlink.screens.dashboard import DashboardScreen
from learnlink.screens.home import HomeScreen
from learnlink.screens.notifications import NotificationsScreen
from learnlink.screens.parent.add_review import ParentAddReviewScreen
from learnlink.screens.parent.book_session import ParentBookSessionScreen
from learnlink.screens.parent.bookings import ParentBookingsScreen
from learnlink.screens.parent.bookmarks import ParentBookmarksScreen
from learnlink.screens.parent.dashboard import ParentDashboardScreen
from learnlink.screens.parent.disputes import ParentDisputesScreen
from learnlink.screens.parent.messages import ParentMessagesScreen
from learnlink.screens.parent.profile import ParentProfileScreen
from learnlink.screens.parent.search import ParentSearchTutorsScreen
from learnlink.screens.parent.subject_tutors import ParentSubjectTutorsScreen
from learnlink.screens.parent.tutor_profile import ParentTutorProfileScreen
from learnlink.screens.parent.tutor_reviews import ParentTutorReviewsScreen
from learnlink.screens.parent.waitlist import ParentWaitlistScreen
from learnlink.screens.registration import ParentRegisterScreen, TutorRegisterScreen
from learnlink.screens.tutor.availability import TutorAvailabilityScreen
from learnlink.screens.tutor.bookings import TutorBookingRequestsScreen, TutorBookingsScreen
from learnlink.screens.tutor.calendar_sync import TutorCalendarSyncScreen
from learnlink.screens.tutor.dashboard import TutorDashboardScreen
from learnlink.screens.tutor.messages import TutorMessagesScreen
from learnlink.screens.tutor.profile import TutorProfileScreen
from learnlink.screens.tutor.students import TutorStudentsScreen
from learnlink.screens.tutor.subjects import TutorSubjectsScreen
from learnlink.screens.tutor.waitlist import TutorWaitlistScreen

PARAM = re.compile(r":([A-Za-z_][A-Za-z0-9_]*)")

ROUTES: List[Tuple[str, Type[Screen]]] = [
    ("/", HomeScreen),
    ("/parent-login", ParentLoginScreen),
    ("/tutor-login", TutorLoginScreen),
    ("/register", RegisterScreen),
    ("/register/parent", ParentRegisterScreen),
    ("/register/tutor", TutorRegisterScreen),
    ("/forgot-password", ForgotPasswordScreen),
    ("/reset-password", ResetPasswordScreen),
    ("/dashboard", DashboardScreen),
    ("/notifications", NotificationsScreen),
    # Admin
    ("/admin", AdminDashboardScreen),
    ("/admin/users", AdminUsersScreen),
    ("/admin/users/:userId", AdminUserDetailsScreen),
    ("/admin/tutors-verification", AdminTutorsVerificationScreen),
    ("/admin/activity", AdminActivityScreen),
    ("/admin/disputes", AdminDisputesScreen),
    ("/admin/reviews", AdminReviewsScreen),
    ("/admin/subjects", AdminSubjectsScreen),
    # Parent
    ("/parent-dashboard", ParentDashboardScreen),
    ("/parent/search-tutors", ParentSearchTutorsScreen),
    ("/parent/book-session", ParentBookSessionScreen),
    ("/parent/book-session/:tutorId/:subjectId", ParentBookSessionScreen),
    ("/parent/bookings", ParentBookingsScreen),
    ("/parent/tutor/:tutorId", ParentTutorProfileScreen),
    ("/parent/tutor/:tutorId/subject/:subjectId", ParentTutorProfileScreen),
    ("/parent/tutor/:tutorId/reviews", ParentTutorReviewsScreen),
    ("/parent/add-review/:bookingId", ParentAddReviewScreen),
    ("/parent/messages/:tutorId", ParentMessagesScreen),
    ("/parent/waitlist", ParentWaitlistScreen),
    ("/parent/disputes", ParentDisputesScreen),
    ("/parent/bookmarks", ParentBookmarksScreen),
    ("/parent/profile", ParentProfileScreen),
    ("/subjects/:subjectId", ParentSubjectTutorsScreen),
    # Tutor
    ("/tutor-dashboard", TutorDashboardScreen),
    ("/tutor-profile/:id", TutorProfileScreen),
    ("/tutor/bookings", TutorBookingsScreen),
    ("/tutor/booking-requests", TutorBookingRequestsScreen),
    ("/tutor/availability", TutorAvailabilityScreen),
    ("/tutor/calendar-sync", TutorCalendarSyncScreen),
    ("/tutor/messages", TutorMessagesScreen),
    ("/tutor/waitlist", TutorWaitlistScreen),
    ("/tutor/subjects", TutorSubjectsScreen),
    ("/tutor/students", TutorStudentsScreen),
]


def compile_pattern(pattern: str) -> Pattern:
    """``/a/:id`` -> ``^/a/(?P<id>[^/]+)$``"""
    parts = PARAM.split(pattern)
    regex = ""
    for i, part in enumerate(parts):
        # split() alternates literal text and captured param names
        regex += re.escape(part) if i % 2 == 0 else f"(?P<{part}>[^/]+)"
    return re.compile(f"^{regex}$")


@dataclass
class Match:
    screen: Type[Screen]
    pattern: str
    params: Dict[str, str]
    query: Dict[str, str]
    path: str


class Router:

    def __init__(self, routes: Optional[List[Tuple[str, Type[Screen]]]] = None):
        self.routes = [(pattern, compile_pattern(pattern), screen) for pattern, screen in (routes or ROUTES)]

    def match(self, target: str) -> Match:
        parts = urlsplit(target.strip() or "/")
        path = parts.path or "/"
        if len(path) > 1:
            path = path.rstrip("/")
        query = dict(parse_qsl(parts.query))

        for pattern, regex, screen in self.routes:
            found = regex.match(path)
            if found:
                params = {k: unquote(v) for k, v in found.groupdict().items()}
                return Match(screen, pattern, params, query, path)
        raise RouteNotFoundError(path)

    def resolve(self, ctx: ScreenContext, target: str) -> Screen:
        """A screen for ``target``; unknown paths get a not-found screen"""
        try:
            m = self.match(target)
        except RouteNotFoundError as e:
            return MessageScreen(ctx, e.message, title="Not Found", path=e.details["path"])
        return m.screen(ctx, params=m.params, query=m.query, path=m.path)

    def patterns(self) -> List[str]:
        return [pattern for pattern, _, _ in self.routes]
