"""
Tutor profile editor.

Loads the tutor's own profile and the subject catalog; edits stay local until
``save`` sends the whole profile back as multipart form data.
"""

import asyncio
import json
from typing import Any, Dict, List, Optional

from rich.console import Group
from rich.table import Table
from rich.text import Text

from learnlink.components.format import money
from learnlink.exceptions import ValidationError
from learnlink.listings import find_subject
from learnlink.models import Subject, User
from learnlink.roles import Role
from learnlink.screens.base import FormField, FormScreen, action, require_args


def parse_tags(text: str) -> List[str]:
    """Comma-separated tag input, blanks and repeats dropped"""
    tags: List[str] = []
    for tag in text.split(","):
        tag = tag.strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def dedupe_subjects(entries: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Drop entries identical in every key, keeping first-seen order"""
    seen = set()
    unique = []
    for entry in entries:
        key = json.dumps(entry, sort_keys=True)
        if key not in seen:
            seen.add(key)
            unique.append(entry)
    return unique


class TutorProfileScreen(FormScreen):
    title = "Tutor Profile"
    allowed_roles = (Role.TUTOR,)
    accepts_image = True
    fields = (
        FormField("name", "Name"),
        FormField("location", "Location"),
        FormField("education", "Education"),
        FormField("experience", "Experience"),
        FormField("bio", "Bio"),
    )

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.profile: Optional[User] = None
        self.catalog: List[Subject] = []
        self.expertise: List[str] = []
        self.subjects: List[Dict[str, Any]] = []

    async def load(self) -> None:
        self.profile, self.catalog = await asyncio.gather(
            self.api.tutor.profile(), self.api.subjects.list_all()
        )
        for name in self.field_names():
            value = getattr(self.profile, name, None)
            self.values[name] = "" if value is None else value
        self.expertise = list(self.profile.expertise)
        self.subjects = [
            {
                "subject": s.subject_id,
                "hourlyRate": s.hourly_rate,
                "hours": s.hours,
                "title": s.title or "",
            }
            for s in self.profile.subjects
        ]

    def subject_name(self, subject_id: str) -> str:
        return next((s.name for s in self.catalog if s.id == subject_id), None) or subject_id

    @action("expertise", usage="expertise <tag, tag, ...>")
    async def set_expertise(self, args: str) -> None:
        """Replace the expertise tags"""
        self.expertise = parse_tags(args)

    @action("add-subject", usage="add-subject <subject> <rate> [hours] [title]")
    async def add_subject(self, args: str) -> None:
        """Teach another subject"""
        parts = require_args(args, 2, "add-subject <subject> <rate> [hours] [title]")
        subject = find_subject(self.catalog, parts[0])
        if subject is None:
            raise ValidationError(f"No subject named '{parts[0]}'")
        if any(e["subject"] == subject.id for e in self.subjects):
            raise ValidationError(f"{subject.name} is already on your profile")
        self.subjects.append({
            "subject": subject.id,
            "hourlyRate": parts[1],
            "hours": parts[2] if len(parts) > 2 else None,
            "title": " ".join(parts[3:]),
        })

    @action("remove-subject", usage="remove-subject <subject>")
    async def remove_subject(self, args: str) -> None:
        """Stop teaching a subject"""
        subject = find_subject(self.catalog, args)
        target = subject.id if subject else args.strip()
        self.subjects = [e for e in self.subjects if e["subject"] != target]

    @action("rate", usage="rate <subject> <hourly rate> [hours]")
    async def set_rate(self, args: str) -> None:
        """Change a subject's rate or hours"""
        parts = require_args(args, 2, "rate <subject> <hourly rate> [hours]")
        subject = find_subject(self.catalog, parts[0])
        target = subject.id if subject else parts[0]
        entry = next((e for e in self.subjects if e["subject"] == target), None)
        if entry is None:
            raise ValidationError(f"'{parts[0]}' is not on your profile")
        entry["hourlyRate"] = parts[1]
        if len(parts) > 2:
            entry["hours"] = parts[2]

    def submission(self) -> Dict[str, Any]:
        fields = {name: self.values.get(name) or "" for name in self.field_names()}
        fields["subjects"] = dedupe_subjects(self.subjects)
        fields["expertise"] = list(self.expertise)
        return fields

    @action("save")
    async def save(self, args: str) -> None:
        """Save the profile"""
        self.profile = await self.api.tutor.update_profile(self.submission(), self.image)
        self.image = None
        self.success = "Profile updated successfully!"

    def body(self):
        subjects = Table(title="Subjects", show_header=True, header_style="bold", title_justify="left")
        subjects.add_column("Subject")
        subjects.add_column("Rate")
        subjects.add_column("Hours")
        subjects.add_column("Title")
        for e in self.subjects:
            subjects.add_row(self.subject_name(e["subject"]), money(e.get("hourlyRate")),
                             str(e.get("hours") or ""), e.get("title") or "")

        photo = self.api.image_url(self.profile.profile_image) if self.profile else None
        return Group(
            Text(f"Photo: {photo or '(none)'}", style="dim"),
            self.form_table(),
            Text(f"Expertise: {', '.join(self.expertise) or 'none'}"),
            subjects,
            Text("set <field> <value>, expertise <tags>, add-subject, rate, remove-subject, image <path>, "
                 "then save", style="dim"),
        )
