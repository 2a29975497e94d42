"""
Unit tests for the multi-step forms and the registration wizards
"""
import json

import pytest

from learnlink.exceptions import ValidationError
from learnlink.screens.registration import ParentRegisterScreen, TutorRegisterScreen
from learnlink.wizard import REQUIRED_FIELDS_MESSAGE, Wizard, WizardStep


def two_step_wizard() -> Wizard:
    return Wizard([
        WizardStep("About you", fields=("name", "email"), required=("name", "email")),
        WizardStep("Subjects", fields=("subjects",), required=("subjects",),
                   message="Please select at least one subject"),
    ])


def test_next_refused_until_required_fields_filled():
    wizard = two_step_wizard()
    wizard.set("name", "Asha")

    with pytest.raises(ValidationError) as exc_info:
        wizard.next()

    assert exc_info.value.message == REQUIRED_FIELDS_MESSAGE
    assert exc_info.value.field == "email"
    assert wizard.index == 0

    wizard.set("email", "asha@example.com")
    wizard.next()
    assert wizard.number == 2


def test_blank_strings_and_empty_lists_count_as_missing():
    wizard = two_step_wizard()
    wizard.set("name", "   ")
    wizard.set("email", "a@b.c")
    assert wizard.missing() == ["name"]

    wizard.set("name", "Asha")
    wizard.next()
    wizard.set("subjects", [])
    with pytest.raises(ValidationError, match="at least one subject"):
        wizard.validate()


def test_back_keeps_entered_values():
    wizard = two_step_wizard()
    wizard.set("name", "Asha")
    wizard.set("email", "a@b.c")
    wizard.next()
    wizard.back()
    wizard.back()

    assert wizard.index == 0
    assert wizard.get("name") == "Asha"


def test_step_check_runs_after_required_fields():
    wizard = Wizard([
        WizardStep("Age", fields=("age",), required=("age",),
                   check=lambda v: None if v["age"].isdigit() else "Age must be a number"),
        WizardStep("Done"),
    ])
    wizard.set("age", "ten")
    with pytest.raises(ValidationError, match="Age must be a number"):
        wizard.next()


@pytest.fixture
def catalog(fake_api):
    fake_api.on("GET", "/api/subjects", data=[
        {"_id": "s-math", "name": "Mathematics"},
        {"_id": "s-sci", "name": "Science"},
    ])


@pytest.mark.asyncio
async def test_parent_wizard_gates_each_step(ctx, fake_api, catalog):
    screen = ParentRegisterScreen(ctx, path="/register/parent")
    await screen.open()

    await screen.dispatch("next")
    assert screen.error == REQUIRED_FIELDS_MESSAGE
    assert screen.wizard.index == 0

    for line in ("set childName Asha", "set childAge 9", "set childGrade 4",
                 "set email parent@example.com"):
        await screen.dispatch(line)
    await screen.dispatch("next")
    assert screen.error is None
    assert screen.wizard.index == 1

    await screen.dispatch("next")
    assert screen.error == "Please select at least one subject"

    await screen.dispatch("add-subject science")
    await screen.dispatch("next")
    assert screen.wizard.index == 2


@pytest.mark.asyncio
async def test_parent_wizard_submits_every_field(ctx, fake_api, catalog):
    fake_api.on("POST", "/api/auth/register", body={"success": True, "msg": "Registered"})
    screen = ParentRegisterScreen(ctx, path="/register/parent")
    await screen.open()

    for line in ("set childName Asha", "set childAge 9", "set childGrade 4",
                 "set childLearningGoals Fractions", "set email parent@example.com", "next",
                 "add-subject s-math", "add-subject Science", "next",
                 "set name Priya Sharma", "set location Pune, MH", "set password secret123"):
        await screen.dispatch(line)

    submission = screen.submission()
    assert submission["role"] == "parent"
    assert submission["preferredSubjects"] == ["s-math", "s-sci"]
    assert submission["childPreferredSubjects"] == ["s-math", "s-sci"]
    assert submission["childSpecialNeeds"] == ""
    assert submission["location"] == "Pune, MH"

    await screen.dispatch("submit")

    assert screen.error is None
    assert screen.redirect == "/parent-login"
    body = fake_api.calls("POST", "/api/auth/register")[0].content
    assert b'name="childName"' in body
    assert b'["s-math", "s-sci"]' in body


@pytest.mark.asyncio
async def test_unknown_subject_is_rejected(ctx, fake_api, catalog):
    screen = ParentRegisterScreen(ctx, path="/register/parent")
    await screen.open()

    await screen.dispatch("add-subject Astrology")

    assert screen.error == "No subject named 'Astrology'"
    assert screen.selected == []


@pytest.mark.asyncio
async def test_subject_step_has_no_settable_fields(ctx, fake_api, catalog):
    """The subject list can only change through add-subject and remove-subject"""
    screen = ParentRegisterScreen(ctx, path="/register/parent")
    await screen.open()
    for line in ("set childName Asha", "set childAge 9", "set childGrade 4",
                 "set email parent@example.com", "next"):
        await screen.dispatch(line)

    await screen.dispatch("set subjects Math")
    assert screen.error == "Nothing to set on this step"
    assert screen.selected == []

    await screen.dispatch("add-subject Mathematics")
    assert screen.error is None
    assert screen.selected == ["s-math"]


@pytest.mark.asyncio
async def test_set_refuses_fields_from_other_steps(ctx, fake_api, catalog):
    screen = ParentRegisterScreen(ctx, path="/register/parent")
    await screen.open()

    await screen.dispatch("set password hunter22")

    assert screen.error.startswith("Unknown field 'password'")
    assert "password" not in screen.values


TUTOR_ACCOUNT = ("set name Ravi Kumar", "set email ravi@example.com", "set password secret123", "next",
                 "set education MSc Physics", "set bio Ten years of teaching", "set location Delhi",
                 "set experience 10 years", "next")


@pytest.mark.asyncio
async def test_tutor_wizard_needs_a_rate_for_each_subject(ctx, fake_api, catalog):
    screen = TutorRegisterScreen(ctx, path="/register/tutor")
    await screen.open()
    for line in TUTOR_ACCOUNT:
        await screen.dispatch(line)
    assert screen.wizard.index == 2

    await screen.dispatch("next")
    assert screen.error == "Please select at least one subject"

    await screen.dispatch("add-subject Mathematics")
    await screen.dispatch("next")
    assert screen.error == "Please enter an hourly rate and hours for Mathematics"
    assert screen.wizard.index == 2

    await screen.dispatch("add-subject Mathematics 25 4")
    await screen.dispatch("next")
    assert screen.error is None
    assert screen.wizard.is_last


@pytest.mark.asyncio
async def test_tutor_wizard_submits_every_field(ctx, fake_api, catalog, tmp_path):
    """The last step sends exactly what the earlier steps collected, plus the photo"""
    fake_api.on("POST", "/api/auth/register", body={"success": True, "msg": "Registered"})
    photo = tmp_path / "ravi.png"
    photo.write_bytes(b"\x89PNG\r\n\x1a\n" + b"0" * 64)
    screen = TutorRegisterScreen(ctx, path="/register/tutor")
    await screen.open()
    for line in TUTOR_ACCOUNT + ('add-subject s-math 25 4 "Algebra and Calculus"',
                                 "add-subject Science 30 2", "next", f"image {photo}"):
        await screen.dispatch(line)

    submission = screen.submission()
    assert set(submission) == {"name", "email", "password", "role", "education", "bio",
                               "location", "experience", "subjects"}
    assert submission["role"] == "tutor"
    assert submission["subjects"] == [
        {"subject": "s-math", "hourlyRate": 25.0, "hours": 4.0, "title": "Algebra and Calculus"},
        {"subject": "s-sci", "hourlyRate": 30.0, "hours": 2.0, "title": ""},
    ]

    await screen.dispatch("submit")

    assert screen.error is None
    assert screen.redirect == "/tutor-login"
    body = fake_api.calls("POST", "/api/auth/register")[0].content
    assert json.dumps(submission["subjects"]).encode() in body
    assert b'name="experience"' in body
    assert b'name="profileImage"; filename="ravi.png"' in body
