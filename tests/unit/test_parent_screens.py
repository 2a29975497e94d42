"""
Unit tests for the parent screens
"""
import pytest

from learnlink.components.format import stars
from learnlink.screens.parent.add_review import ParentAddReviewScreen
from learnlink.screens.parent.book_session import SLOT_TAKEN, ParentBookSessionScreen, busy_slots
from learnlink.screens.parent.bookings import ParentBookingsScreen
from learnlink.screens.parent.bookmarks import ParentBookmarksScreen
from learnlink.screens.parent.tutor_profile import NO_COMPLETED_SESSION, ParentTutorProfileScreen


def tutor_doc(tutor_id="t1", subject_id="s1", **fields):
    data = {
        "_id": tutor_id,
        "name": "Ravi Kumar",
        "role": "tutor",
        "subjects": [{"subject": {"_id": subject_id, "name": "Mathematics"}, "hourlyRate": 25}],
    }
    data.update(fields)
    return data


def booking_doc(booking_id, status, tutor_id="t1", subject_id="s1"):
    return {
        "_id": booking_id,
        "status": status,
        "tutorId": {"_id": tutor_id, "name": "Ravi Kumar"},
        "subject": {"_id": subject_id, "name": "Mathematics"},
        "sessionTime": "2025-01-31T16:00:00.000Z",
    }


class BookmarkServer:
    """Toggle membership the way the API does"""

    def __init__(self, fake_api):
        self.saved = []
        fake_api.on("GET", "/api/parent/bookmarks", body=lambda r: fake_api.envelope(list(self.saved)))
        fake_api.on("POST", "/api/parent/bookmark", body=self.toggle)
        self.fake_api = fake_api

    def toggle(self, request):
        pair = self.fake_api.json(request)
        entry = {"tutorId": pair["tutorId"], "subjectId": pair["subjectId"]}
        if entry in self.saved:
            self.saved.remove(entry)
        else:
            self.saved.append(entry)
        return {"success": True}


@pytest.mark.asyncio
async def test_bookmark_toggled_twice_restores_list(ctx, fake_api, login_as):
    login_as("parent")
    server = BookmarkServer(fake_api)
    screen = ParentBookmarksScreen(ctx, path="/parent/bookmarks")
    await screen.open()
    assert screen.bookmarks == []

    await screen.dispatch("bookmark t1 s1")
    assert screen.success == "Bookmark saved"
    assert [b.key for b in screen.bookmarks] == [("t1", "s1")]

    await screen.dispatch("bookmark t1 s1")
    assert screen.success == "Bookmark removed"
    assert screen.bookmarks == []
    assert server.saved == []


@pytest.mark.asyncio
async def test_parent_pages_refuse_tutors(ctx, fake_api, login_as):
    login_as("tutor")
    screen = ParentBookingsScreen(ctx, path="/parent/bookings")

    await screen.open()

    assert screen.denied == "Access denied. This page is only available to parent accounts."
    assert fake_api.requests == []
    assert await screen.dispatch("cancel b1") is False


@pytest.mark.asyncio
async def test_parent_pages_ask_guests_to_log_in(ctx, fake_api):
    screen = ParentBookingsScreen(ctx, path="/parent/bookings")
    await screen.open()
    assert screen.denied == "Please log in to access this page."


@pytest.mark.asyncio
async def test_cancel_booking_after_confirmation(ctx, fake_api, login_as, prompts):
    login_as("parent")
    fake_api.on("GET", "/api/parent/bookings",
                data={"bookings": [booking_doc("b1", "requested"), booking_doc("b2", "accepted")]})
    fake_api.on("POST", "/api/parent/bookings/cancel", message="Booking cancelled")
    screen = ParentBookingsScreen(ctx, path="/parent/bookings")
    await screen.open()

    await screen.dispatch("cancel b1")

    assert prompts.asked == ["Are you sure you want to cancel this booking? This action cannot be undone."]
    assert screen.success == "Your booking has been cancelled successfully."
    assert [b.id for b in screen.bookings] == ["b2"]
    sent = fake_api.json(fake_api.calls("POST", "/api/parent/bookings/cancel")[0])
    assert sent == {"bookingId": "b1"}


@pytest.mark.asyncio
async def test_declined_confirmation_sends_nothing(ctx, fake_api, login_as, prompts):
    login_as("parent")
    fake_api.on("GET", "/api/parent/bookings", data={"bookings": [booking_doc("b1", "requested")]})
    prompts.confirm_answer = False
    screen = ParentBookingsScreen(ctx, path="/parent/bookings")
    await screen.open()

    await screen.dispatch("cancel b1")

    assert fake_api.calls("POST", "/api/parent/bookings/cancel") == []
    assert len(screen.bookings) == 1


@pytest.mark.asyncio
async def test_confirmed_booking_cannot_be_cancelled(ctx, fake_api, login_as):
    login_as("parent")
    fake_api.on("GET", "/api/parent/bookings", data={"bookings": [booking_doc("b1", "confirmed")]})
    screen = ParentBookingsScreen(ctx, path="/parent/bookings")
    await screen.open()

    await screen.dispatch("cancel b1")

    assert screen.error == "A confirmed booking cannot be cancelled"


@pytest.mark.asyncio
async def test_review_action_needs_completed_booking(ctx, fake_api, login_as):
    login_as("parent")
    fake_api.on("GET", "/api/parent/bookings",
                data={"bookings": [booking_doc("b1", "completed"), booking_doc("b2", "requested")]})
    screen = ParentBookingsScreen(ctx, path="/parent/bookings")
    await screen.open()

    await screen.dispatch("review b2")
    assert screen.error == "Only completed sessions can be reviewed"

    await screen.dispatch("review b1")
    assert screen.redirect == "/parent/add-review/b1"


def test_busy_entries_accept_strings_and_objects():
    slots = busy_slots(["2025-01-31T16:00:00.000Z", {"sessionTime": "2025-02-01T10:00:00Z"}, {"x": 1}])
    assert [s.day for s in slots] == [31, 1]


@pytest.mark.asyncio
async def test_busy_slot_is_rejected_before_sending(ctx, fake_api, login_as, navbar):
    login_as("parent")
    fake_api.on("GET", "/api/parent/tutor/t1", data=tutor_doc())
    navbar.busy_times = {"t1": ["2025-01-31T16:00:00.000Z"]}
    screen = ParentBookSessionScreen(
        ctx, params={"tutorId": "t1", "subjectId": "s1"},
        query={"datetime": "2025-01-31T16:00"}, path="/parent/book-session/t1/s1",
    )
    await screen.open()

    await screen.dispatch("submit")

    assert screen.error == SLOT_TAKEN
    assert fake_api.calls("POST", "/api/parent/book-session") == []


@pytest.mark.asyncio
async def test_free_slot_is_booked(ctx, fake_api, login_as, navbar):
    login_as("parent")
    fake_api.on("GET", "/api/parent/tutor/t1", data=tutor_doc())
    fake_api.on("POST", "/api/parent/book-session", message="Session booked successfully!")
    navbar.busy_times = {"t1": ["2025-01-31T16:00:00.000Z"]}
    screen = ParentBookSessionScreen(ctx, params={"tutorId": "t1", "subjectId": "s1"},
                                     path="/parent/book-session/t1/s1")
    await screen.open()

    await screen.dispatch("set sessionTime 2025-01-31T17:00")
    await screen.dispatch("set notes Chapter 4 please")
    await screen.dispatch("submit")

    assert screen.error is None
    assert screen.redirect == "/parent/bookings"
    sent = fake_api.json(fake_api.calls("POST", "/api/parent/book-session")[0])
    assert sent["tutorId"] == "t1"
    assert sent["subject"] == "s1"
    assert sent["notes"] == "Chapter 4 please"
    assert sent["sessionTime"].startswith("2025-01-31T17:00")


@pytest.mark.asyncio
async def test_book_session_without_tutor(ctx, fake_api, login_as):
    login_as("parent")
    screen = ParentBookSessionScreen(ctx, path="/parent/book-session")
    await screen.open()
    assert screen.error == "No Tutor ID provided."


@pytest.mark.asyncio
async def test_five_star_review_from_tutor_profile(ctx, fake_api, login_as):
    login_as("parent")
    fake_api.on("GET", "/api/parent/tutor/t1", data=tutor_doc())
    fake_api.on("GET", "/api/parent/bookmarks", data=[])
    fake_api.on("GET", "/api/parent/similar-tutors", data=[])
    fake_api.on("POST", "/api/parent/recently-visited", data=None)
    fake_api.on("GET", "/api/parent/bookings", data={"bookings": [booking_doc("b9", "completed")]})
    fake_api.on("POST", "/api/parent/review", data={"_id": "r1", "rating": 5, "comment": "Great"})
    screen = ParentTutorProfileScreen(ctx, params={"tutorId": "t1", "subjectId": "s1"},
                                      path="/parent/tutor/t1/subject/s1")
    await screen.open()

    await screen.dispatch("review 5 Great teacher")

    assert screen.success == "Review submitted!"
    sent = fake_api.json(fake_api.calls("POST", "/api/parent/review")[0])
    assert sent == {"bookingId": "b9", "rating": 5, "comment": "Great teacher", "subject": "s1"}
    assert stars(5) == "★★★★★"
    assert stars(3.4) == "★★★☆☆"


@pytest.mark.asyncio
async def test_review_without_completed_session(ctx, fake_api, login_as):
    login_as("parent")
    fake_api.on("GET", "/api/parent/tutor/t1", data=tutor_doc())
    fake_api.on("GET", "/api/parent/bookmarks", data=[])
    fake_api.on("GET", "/api/parent/similar-tutors", data=[])
    fake_api.on("GET", "/api/parent/bookings", data={"bookings": []})
    screen = ParentTutorProfileScreen(ctx, params={"tutorId": "t1"}, path="/parent/tutor/t1")
    await screen.open()

    await screen.dispatch("review 4")

    assert screen.error == NO_COMPLETED_SESSION
    assert fake_api.calls("POST", "/api/parent/review") == []


@pytest.mark.asyncio
async def test_rating_out_of_range(ctx, fake_api, login_as):
    login_as("parent")
    fake_api.on("GET", "/api/parent/bookings", data={"bookings": [booking_doc("b1", "completed")]})
    screen = ParentAddReviewScreen(ctx, params={"bookingId": "b1"}, path="/parent/add-review/b1")
    await screen.open()

    await screen.dispatch("set rating 7")
    await screen.dispatch("submit")

    assert screen.error == "Please select a rating between 1 and 5"


@pytest.mark.asyncio
async def test_add_review_goes_to_tutor_reviews(ctx, fake_api, login_as):
    login_as("parent")
    fake_api.on("GET", "/api/parent/bookings", data={"bookings": [booking_doc("b1", "completed")]})
    fake_api.on("POST", "/api/parent/review", data={"_id": "r1", "rating": 4})
    screen = ParentAddReviewScreen(ctx, params={"bookingId": "b1"}, path="/parent/add-review/b1")
    await screen.open()

    await screen.dispatch("set rating 4")
    await screen.dispatch("submit")

    assert screen.redirect == "/parent/tutor/t1/reviews"
    sent = fake_api.json(fake_api.calls("POST", "/api/parent/review")[0])
    assert sent["subject"] == "s1"
