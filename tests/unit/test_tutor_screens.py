"""
Unit tests for the tutor screens and their list helpers
"""
import pytest

from learnlink.models import Message, Student
from learnlink.screens.tutor.availability import DaySlot, TutorAvailabilityScreen, slots_to_send, DAYS
from learnlink.screens.tutor.bookings import TutorBookingRequestsScreen, TutorBookingsScreen
from learnlink.screens.tutor.calendar_sync import GOOGLE_CONNECT_URL, TutorCalendarSyncScreen
from learnlink.screens.tutor.messages import TutorMessagesScreen, group_conversations
from learnlink.screens.tutor.profile import TutorProfileScreen, dedupe_subjects, parse_tags
from learnlink.screens.tutor.students import filter_students


def student(parent, child, subject, status):
    return Student.model_validate({
        "parentName": parent,
        "childName": child,
        "subject": subject,
        "latestBooking": {"status": status},
    })


def test_students_filter_by_status_and_search():
    students = [
        student("Priya Sharma", "Asha", "Mathematics", "completed"),
        student("John Doe", "Sam", "Science", "requested"),
        student("Anil Rao", "Meera", "Math Olympiad", "completed"),
    ]

    assert len(filter_students(students)) == 3
    assert [s.child_name for s in filter_students(students, "completed")] == ["Asha", "Meera"]
    assert [s.child_name for s in filter_students(students, "all", "MATH")] == ["Asha", "Meera"]
    assert [s.child_name for s in filter_students(students, "completed", "anil")] == ["Meera"]
    assert filter_students(students, "confirmed") == []


def message(mid, sender, receiver, created, read=True):
    return Message.model_validate({
        "_id": mid,
        "senderId": sender,
        "receiverId": receiver,
        "content": f"message {mid}",
        "isRead": read,
        "createdAt": created,
    })


def test_conversations_grouped_per_parent_newest_first():
    me = "tutor1"
    messages = [
        message("m1", {"_id": "p1", "name": "Priya"}, me, "2025-01-01T10:00:00Z", read=False),
        message("m2", me, {"_id": "p1", "name": "Priya"}, "2025-01-01T11:00:00Z"),
        message("m3", {"_id": "p2", "name": "John"}, me, "2025-01-02T09:00:00Z", read=False),
        message("m4", {"_id": "p2", "name": "John"}, me, "2025-01-02T09:30:00Z", read=False),
    ]

    conversations = group_conversations(messages, me)

    assert [c.other_id for c in conversations] == ["p2", "p1"]
    assert [c.unread for c in conversations] == [2, 1]
    assert conversations[1].name == "Priya"
    assert conversations[0].last.id == "m4"


def test_only_complete_days_are_sent():
    days = {day: DaySlot(day) for day in DAYS}
    days["monday"] = DaySlot("monday", "09:00", "17:00", available=True)
    days["tuesday"] = DaySlot("tuesday", "09:00", "", available=True)
    days["friday"] = DaySlot("friday", "10:00", "12:00", available=False)

    slots = slots_to_send(days)

    assert [s.to_api() for s in slots] == [{"day": "monday", "startTime": "09:00", "endTime": "17:00"}]


def test_tags_and_subject_entries_deduplicated():
    assert parse_tags("algebra, geometry,, algebra , calculus") == ["algebra", "geometry", "calculus"]

    entries = [
        {"subject": "s1", "hourlyRate": "25", "hours": None, "title": ""},
        {"subject": "s1", "hourlyRate": "25", "hours": None, "title": ""},
        {"subject": "s1", "hourlyRate": "30", "hours": None, "title": ""},
    ]
    assert dedupe_subjects(entries) == [entries[0], entries[2]]


@pytest.mark.asyncio
async def test_availability_rejects_bad_times(ctx, fake_api, login_as):
    login_as("tutor")
    fake_api.on("GET", "/api/tutor/profile", data={"_id": "me", "role": "tutor", "availability": []})
    fake_api.on("POST", "/api/tutor/availability", message="Availability updated successfully!")
    screen = TutorAvailabilityScreen(ctx, path="/tutor/availability")
    await screen.open()

    await screen.dispatch("set someday 09:00 17:00")
    assert screen.error.startswith("Day must be one of")

    await screen.dispatch("set monday 9am 17:00")
    assert screen.error == "Invalid time '9am', use HH:MM"

    await screen.dispatch("set Monday 09:00 17:00")
    await screen.dispatch("save")

    sent = fake_api.json(fake_api.calls("POST", "/api/tutor/availability")[0])
    assert sent == {"availability": [{"day": "monday", "startTime": "09:00", "endTime": "17:00"}]}
    assert screen.success == "Availability updated successfully!"


@pytest.mark.asyncio
async def test_completing_a_booking_removes_it(ctx, fake_api, login_as):
    login_as("tutor")
    fake_api.on("GET", "/api/tutor/bookings", data={"bookings": [
        {"_id": "b1", "status": "confirmed"}, {"_id": "b2", "status": "confirmed"},
    ]})
    fake_api.on("PUT", "/api/tutor/bookings/b1/complete", message="Session marked as completed")
    screen = TutorBookingsScreen(ctx, path="/tutor/bookings")
    await screen.open()

    await screen.dispatch("complete b1")

    assert [b.id for b in screen.bookings] == ["b2"]
    assert fake_api.calls("GET", "/api/tutor/bookings")[0].url.params["status"] == "confirmed"


@pytest.mark.asyncio
async def test_reschedule_messages_the_parent(ctx, fake_api, login_as):
    login_as("tutor")
    fake_api.on("GET", "/api/tutor/bookings", data={"bookings": [{
        "_id": "b1", "status": "requested",
        "parentId": {"_id": "p1", "name": "Priya"},
        "subject": {"_id": "s1", "name": "Physics"},
    }]})
    fake_api.on("POST", "/api/tutor/message", data=None)
    screen = TutorBookingRequestsScreen(ctx, path="/tutor/booking-requests")
    await screen.open()

    await screen.dispatch("reschedule b1")

    assert screen.success == "Reschedule message sent to parent successfully!"
    sent = fake_api.json(fake_api.calls("POST", "/api/tutor/message")[0])
    assert sent["receiverId"] == "p1"
    assert "our Physics session?" in sent["content"]


@pytest.mark.asyncio
async def test_accepting_a_request_refetches(ctx, fake_api, login_as):
    login_as("tutor")
    pending = [{"_id": "b1", "status": "requested"}]
    fake_api.on("GET", "/api/tutor/bookings", body=lambda r: fake_api.envelope({"bookings": list(pending)}))

    def respond(request):
        pending.clear()
        return {"success": True, "message": "Booking accepted"}

    fake_api.on("POST", "/api/tutor/booking/respond", body=respond)
    screen = TutorBookingRequestsScreen(ctx, path="/tutor/booking-requests")
    await screen.open()

    await screen.dispatch("accept b1")

    assert screen.success == "Booking accepted"
    assert screen.requests == []
    sent = fake_api.json(fake_api.calls("POST", "/api/tutor/booking/respond")[0])
    assert sent == {"bookingId": "b1", "action": "accept"}


@pytest.mark.asyncio
async def test_opening_inbox_marks_first_thread_read(ctx, fake_api, login_as):
    me = login_as("tutor")
    inbox = [
        {"_id": "m1", "senderId": {"_id": "p1", "name": "Priya"}, "receiverId": me.id,
         "content": "Hello", "isRead": False, "createdAt": "2025-01-02T09:00:00Z"},
    ]

    def messages(request):
        return fake_api.envelope({"messages": inbox})

    fake_api.on("GET", "/api/tutor/messages", body=messages)
    fake_api.on("POST", "/api/tutor/messages/read", data=None)
    screen = TutorMessagesScreen(ctx, path="/tutor/messages")
    await screen.open()

    assert screen.selected == "p1"
    thread_call = fake_api.calls("GET", "/api/tutor/messages")[1]
    assert thread_call.url.params["parentId"] == "p1"
    sent = fake_api.json(fake_api.calls("POST", "/api/tutor/messages/read")[0])
    assert sent == {"messageIds": ["m1"]}
    assert all(m.is_read for m in screen.thread)


@pytest.mark.asyncio
async def test_reply_needs_text(ctx, fake_api, login_as):
    login_as("tutor")
    fake_api.on("GET", "/api/tutor/messages", data={"messages": []})
    screen = TutorMessagesScreen(ctx, query={"parentId": "p1"}, path="/tutor/messages")
    await screen.open()

    await screen.dispatch("reply    ")

    assert screen.error == "Message cannot be empty"
    assert fake_api.calls("POST", "/api/tutor/message") == []


@pytest.mark.asyncio
async def test_google_sync_without_token_only_shows_link(ctx, fake_api, login_as):
    login_as("tutor")
    screen = TutorCalendarSyncScreen(ctx, path="/tutor/calendar-sync")
    await screen.open()

    await screen.dispatch("sync google")

    assert screen.connect_url == GOOGLE_CONNECT_URL
    assert fake_api.requests == []


@pytest.mark.asyncio
async def test_outlook_sync_asks_for_token(ctx, fake_api, login_as, prompts):
    login_as("tutor")
    prompts.answers = ["outlook-token"]
    fake_api.on("POST", "/api/tutor/calendar/sync", data={"message": "Calendar sync initiated!"})
    screen = TutorCalendarSyncScreen(ctx, path="/tutor/calendar-sync")
    await screen.open()

    await screen.dispatch("sync outlook")

    sent = fake_api.json(fake_api.calls("POST", "/api/tutor/calendar/sync")[0])
    assert sent == {"calendarType": "outlook", "accessToken": "outlook-token"}
    assert screen.success == "Calendar sync initiated!"


@pytest.mark.asyncio
async def test_profile_rejects_duplicate_subject(ctx, fake_api, login_as):
    login_as("tutor")
    fake_api.on("GET", "/api/tutor/profile", data={
        "_id": "me", "role": "tutor", "name": "Ravi", "expertise": ["algebra"],
        "subjects": [{"subject": "s1", "hourlyRate": 25}],
    })
    fake_api.on("GET", "/api/tutor/subjects/all", data=[{"_id": "s1", "name": "Mathematics"},
                                                       {"_id": "s2", "name": "Physics"}])
    screen = TutorProfileScreen(ctx, params={"id": "me"}, path="/tutor-profile/me")
    await screen.open()

    await screen.dispatch("add-subject Mathematics 30")
    assert screen.error == "Mathematics is already on your profile"

    await screen.dispatch("add-subject Physics 40 10 Board exam prep")
    await screen.dispatch("expertise mechanics, algebra, mechanics")

    submission = screen.submission()
    assert submission["name"] == "Ravi"
    assert submission["expertise"] == ["mechanics", "algebra"]
    assert submission["subjects"][1] == {
        "subject": "s2", "hourlyRate": "40", "hours": "10", "title": "Board exam prep",
    }
