"""Parent (3 step) and tutor (4 step) registration wizards"""

from typing import Any, Dict, List, Optional, Sequence

from rich.console import Group
from rich.table import Table
from rich.text import Text

from learnlink.components.format import money
from learnlink.exceptions import ValidationError
from learnlink.listings import find_subject
from learnlink.models import Subject
from learnlink.roles import Role
from learnlink.screens.base import FormField, FormScreen, action, require_args
from learnlink.wizard import Wizard, WizardStep


class WizardScreen(FormScreen):
    """A FormScreen whose fields come from the current wizard step"""

    accepts_image = True
    step_fields: Sequence[Sequence[FormField]] = ()

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.wizard = Wizard(self.build_steps())
        # The form and the wizard share one dict of values
        self.values = self.wizard.values
        self.catalog: List[Subject] = []

    def build_steps(self) -> List[WizardStep]:
        raise NotImplementedError

    @property
    def fields(self) -> Sequence[FormField]:  # type: ignore[override]
        if self.wizard.index < len(self.step_fields):
            return self.step_fields[self.wizard.index]
        return ()

    async def load(self) -> None:
        self.catalog = await self.api.subjects.list()

    def subject(self, ref: str) -> Subject:
        subject = find_subject(self.catalog, ref)
        if subject is None:
            raise ValidationError(f"No subject named '{ref}'", field="subjects")
        return subject

    @action("next")
    async def next_step(self, args: str) -> None:
        """Continue to the next step"""
        self.wizard.next()

    @action("back")
    async def previous_step(self, args: str) -> None:
        """Go back one step"""
        self.wizard.back()

    def submission(self) -> Dict[str, Any]:
        raise NotImplementedError

    def step_header(self) -> Text:
        return Text(
            f"Step {self.wizard.number}/{len(self.wizard.steps)}: {self.wizard.step.title}",
            style="bold",
        )

    def catalog_table(self) -> Table:
        table = Table(title="Available subjects", show_header=False, box=None)
        table.add_column(style="dim")
        table.add_column()
        for subject in self.catalog:
            table.add_row(subject.id, subject.name or "")
        return table


class ParentRegisterScreen(WizardScreen):
    title = "Student Registration"

    step_fields = (
        (
            FormField("childName", "Student name"),
            FormField("childAge", "Age (3-18)"),
            FormField("childGrade", "Grade"),
            FormField("childLearningGoals", "Learning goals"),
            FormField("childSpecialNeeds", "Special needs"),
            FormField("email", "Email"),
        ),
        (),
        (
            FormField("name", "Parent full name"),
            FormField("location", "Location (City, State)"),
            FormField("password", "Password", secret=True),
        ),
    )

    def build_steps(self) -> List[WizardStep]:
        return [
            WizardStep(
                "Student details",
                fields=("childName", "childAge", "childGrade", "childLearningGoals",
                        "childSpecialNeeds", "email"),
                required=("childName", "childAge", "childGrade", "email"),
            ),
            WizardStep(
                "Subjects",
                fields=("subjects",),
                required=("subjects",),
                message="Please select at least one subject",
            ),
            WizardStep(
                "Parent account",
                fields=("name", "location", "password"),
                required=("name", "password"),
            ),
        ]

    @property
    def selected(self) -> List[str]:
        return self.wizard.values.setdefault("subjects", [])

    @action("add-subject", usage="add-subject <subject id or name>")
    async def add_subject(self, args: str) -> None:
        """Add a subject of interest"""
        subject = self.subject(args)
        if subject.id not in self.selected:
            self.selected.append(subject.id)

    @action("remove-subject", usage="remove-subject <subject id or name>")
    async def remove_subject(self, args: str) -> None:
        """Remove a selected subject"""
        subject = self.subject(args)
        if subject.id in self.selected:
            self.selected.remove(subject.id)

    def submission(self) -> Dict[str, Any]:
        values = self.wizard.collected()
        subject_ids = list(values.get("subjects") or [])
        return {
            "name": values["name"],
            "email": values["email"],
            "password": values["password"],
            "role": Role.PARENT.value,
            "location": values["location"],
            "preferredSubjects": subject_ids,
            "childName": values["childName"],
            "childAge": values["childAge"],
            "childGrade": values["childGrade"],
            "childPreferredSubjects": subject_ids,
            "childLearningGoals": values["childLearningGoals"],
            "childSpecialNeeds": values["childSpecialNeeds"],
        }

    @action("submit")
    async def submit(self, args: str) -> None:
        """Create the account"""
        self.wizard.validate_all()
        await self.api.auth.register_multipart(self.submission(), self.image)
        self.success = "Registration successful! Please log in."
        self.go("/parent-login")

    def body(self):
        parts: List[Any] = [self.step_header()]
        if self.wizard.index == 1:
            names = [s.name for s in self.catalog if s.id in self.selected]
            parts.append(Text(f"Selected: {', '.join(names) or 'none'}"))
            parts.append(self.catalog_table())
            parts.append(Text("add-subject <name>, remove-subject <name>, then next", style="dim"))
        else:
            parts.append(self.form_table())
            hint = "submit" if self.wizard.is_last else "next"
            parts.append(Text(f"set <field> <value>, then {hint}", style="dim"))
        return Group(*parts)


def _subjects_priced(values: Dict[str, Any]) -> Optional[str]:
    for entry in values.get("subjects") or []:
        if entry.get("hourlyRate") in (None, "") or entry.get("hours") in (None, ""):
            return f"Please enter an hourly rate and hours for {entry.get('name') or 'each subject'}"
    return None


def _number(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0


class TutorRegisterScreen(WizardScreen):
    title = "Tutor Registration"

    step_fields = (
        (
            FormField("name", "Full name"),
            FormField("email", "Email address"),
            FormField("password", "Password", secret=True),
        ),
        (
            FormField("education", "Education"),
            FormField("location", "Location"),
            FormField("experience", "Experience"),
            FormField("bio", "Bio"),
        ),
        (),
        (),
    )

    def build_steps(self) -> List[WizardStep]:
        return [
            WizardStep("Account", fields=("name", "email", "password"),
                       required=("name", "email", "password")),
            WizardStep("Background", fields=("education", "bio", "location", "experience"),
                       required=("education", "bio", "location", "experience")),
            WizardStep("Subjects", fields=("subjects",), required=("subjects",),
                       message="Please select at least one subject", check=_subjects_priced),
            WizardStep("Review"),
        ]

    @property
    def selected(self) -> List[Dict[str, Any]]:
        return self.wizard.values.setdefault("subjects", [])

    @action("add-subject", usage="add-subject <subject> <rate> <hours> [title]")
    async def add_subject(self, args: str) -> None:
        """Add a subject you teach with your hourly rate"""
        parts = require_args(args, 1, "add-subject <subject> <rate> <hours> [title]")
        subject = self.subject(parts[0])
        entry = {
            "subject": subject.id,
            "name": subject.name,
            "hourlyRate": parts[1] if len(parts) > 1 else "",
            "hours": parts[2] if len(parts) > 2 else "0",
            "title": " ".join(parts[3:]),
        }
        existing = next((e for e in self.selected if e["subject"] == subject.id), None)
        if existing is None:
            self.selected.append(entry)
        elif len(parts) > 1:
            existing.update({k: v for k, v in entry.items() if v != ""})

    @action("remove-subject", usage="remove-subject <subject>")
    async def remove_subject(self, args: str) -> None:
        """Remove a subject"""
        subject = self.subject(args)
        self.selected[:] = [e for e in self.selected if e["subject"] != subject.id]

    def submission(self) -> Dict[str, Any]:
        values = self.wizard.collected()
        return {
            "name": values["name"],
            "email": values["email"],
            "password": values["password"],
            "role": Role.TUTOR.value,
            "education": values["education"],
            "bio": values["bio"],
            "location": values["location"],
            "experience": values["experience"],
            "subjects": [
                {
                    "subject": e["subject"],
                    "hourlyRate": _number(e.get("hourlyRate")),
                    "hours": _number(e.get("hours")),
                    "title": e.get("title") or "",
                }
                for e in values.get("subjects") or []
            ],
        }

    @action("submit")
    async def submit(self, args: str) -> None:
        """Create the account"""
        self.wizard.validate_all()
        await self.api.auth.register_multipart(self.submission(), self.image)
        self.success = "Registration successful! Please log in."
        self.go("/tutor-login")

    def subjects_table(self) -> Table:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Subject")
        table.add_column("Rate")
        table.add_column("Hours")
        table.add_column("Title")
        for e in self.selected:
            table.add_row(e.get("name") or e["subject"], money(e.get("hourlyRate")),
                          str(e.get("hours") or 0), e.get("title") or "N/A")
        return table

    def body(self):
        parts: List[Any] = [self.step_header()]
        if self.wizard.index == 2:
            parts.extend([self.subjects_table(), self.catalog_table()])
        elif self.wizard.is_last:
            review = Table(show_header=False, box=None)
            review.add_column(style="dim")
            review.add_column()
            for name in ("name", "email", "education", "location", "experience", "bio"):
                review.add_row(name, str(self.wizard.get(name)))
            parts.extend([review, self.subjects_table()])
            parts.append(Text("image <path> to add a photo, then submit", style="dim"))
        else:
            parts.append(self.form_table())
        return Group(*parts)
