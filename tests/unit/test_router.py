"""
Unit Tests for the route table
Tests for: pattern compilation, params and query, not-found handling
"""
import pytest

from learnlink.exceptions import RouteNotFoundError
from learnlink.router import ROUTES, Router, compile_pattern
from learnlink.screens.admin.user_details import AdminUserDetailsScreen
from learnlink.screens.base import MessageScreen
from learnlink.screens.parent.search import ParentSearchTutorsScreen
from learnlink.screens.parent.tutor_profile import ParentTutorProfileScreen


@pytest.fixture
def router() -> Router:
    return Router()


class TestPatterns:
    """Test route pattern compilation"""

    def test_params_become_named_groups(self):
        regex = compile_pattern("/parent/tutor/:tutorId/subject/:subjectId")
        found = regex.match("/parent/tutor/t1/subject/s2")
        assert found.groupdict() == {"tutorId": "t1", "subjectId": "s2"}
        assert regex.match("/parent/tutor/t1") is None

    def test_every_pattern_is_unique(self):
        patterns = [pattern for pattern, _ in ROUTES]
        assert len(patterns) == len(set(patterns))


class TestMatch:
    """Test matching paths to screens"""

    def test_params_and_query_are_extracted(self, router):
        m = router.match("/parent/tutor/t1/subject/s2?from=search")
        assert m.screen is ParentTutorProfileScreen
        assert m.params == {"tutorId": "t1", "subjectId": "s2"}
        assert m.query == {"from": "search"}

    def test_longer_route_is_not_shadowed(self, router):
        """Test /parent/tutor/:id/reviews is not taken for /parent/tutor/:id"""
        assert router.match("/parent/tutor/t1/reviews").pattern == "/parent/tutor/:tutorId/reviews"
        assert router.match("/admin/users/u1").screen is AdminUserDetailsScreen

    def test_trailing_slash_and_encoded_values(self, router):
        m = router.match("/parent/search-tutors/?subject=Computer%20Science")
        assert m.screen is ParentSearchTutorsScreen
        assert m.query == {"subject": "Computer Science"}

    def test_unknown_path_raises(self, router):
        with pytest.raises(RouteNotFoundError) as exc_info:
            router.match("/nowhere")
        assert exc_info.value.details["path"] == "/nowhere"

    def test_tutor_disputes_has_no_page(self, router):
        with pytest.raises(RouteNotFoundError):
            router.match("/tutor/disputes")


class TestResolve:
    """Test building screens for a path"""

    @pytest.mark.asyncio
    async def test_unknown_path_gives_not_found_screen(self, router, ctx):
        screen = router.resolve(ctx, "/nowhere")
        assert isinstance(screen, MessageScreen)
        assert screen.title == "Not Found"
        assert screen.message == "Page not found: /nowhere"

    @pytest.mark.asyncio
    async def test_params_carried_into_screen(self, router, ctx):
        screen = router.resolve(ctx, "/parent/tutor/t1?x=1")
        assert screen.params == {"tutorId": "t1"}
        assert screen.query == {"x": "1"}
        assert screen.path == "/parent/tutor/t1"
