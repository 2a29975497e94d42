"""Edit the parent/student profile"""

import asyncio
from typing import List

from rich.console import Group
from rich.text import Text

from learnlink.exceptions import ValidationError
from learnlink.listings import find_subject
from learnlink.models import Subject, ref_id
from learnlink.roles import Role
from learnlink.screens.base import FormField, FormScreen, action


class ParentProfileScreen(FormScreen):
    title = "My Profile"
    allowed_roles = (Role.PARENT,)
    accepts_image = True
    fields = (
        FormField("name", "Parent name"),
        FormField("location", "Location"),
        FormField("childName", "Student name"),
        FormField("childAge", "Age"),
        FormField("childGrade", "Grade"),
        FormField("childLearningGoals", "Learning goals"),
        FormField("childSpecialNeeds", "Special needs"),
    )

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.catalog: List[Subject] = []
        self.subject_ids: List[str] = []
        self.email = ""
        self.photo = None

    async def load(self) -> None:
        me, self.catalog = await asyncio.gather(self.api.auth.me(), self.api.subjects.list())
        self.email = me.email or ""
        self.photo = self.api.image_url(me.profile_image)
        for name in self.field_names():
            value = getattr(me, _attr(name), None)
            self.values[name] = "" if value is None else value
        self.subject_ids = [ref_id(s) for s in me.child_preferred_subjects]

    @action("add-subject", usage="add-subject <subject>")
    async def add_subject(self, args: str) -> None:
        """Add a preferred subject"""
        subject = find_subject(self.catalog, args)
        if subject is None:
            raise ValidationError(f"No subject named '{args.strip()}'")
        if subject.id not in self.subject_ids:
            self.subject_ids.append(subject.id)

    @action("remove-subject", usage="remove-subject <subject>")
    async def remove_subject(self, args: str) -> None:
        """Remove a preferred subject"""
        subject = find_subject(self.catalog, args)
        target = subject.id if subject else args.strip()
        self.subject_ids = [s for s in self.subject_ids if s != target]

    @action("save")
    async def save(self, args: str) -> None:
        """Save the profile"""
        fields = {name: self.values.get(name, "") for name in self.field_names()}
        fields["childPreferredSubjects"] = list(self.subject_ids)
        user = await self.api.auth.update_me(fields, self.image)
        if user.id:
            self.ctx.session.update_user(user)
        self.image = None
        self.success = "Profile updated successfully!"

    def body(self):
        names = {s.id: s.name for s in self.catalog}
        chosen = ", ".join(names.get(i, i) for i in self.subject_ids) or "none"
        return Group(
            Text(f"{self.email}   Photo: {self.photo or '(none)'}", style="dim"),
            self.form_table(),
            Text(f"Preferred subjects: {chosen}"),
            Text("set <field> <value>, add-subject/remove-subject <name>, image <path>, then save", style="dim"),
        )


def _attr(field_name: str) -> str:
    """childLearningGoals -> child_learning_goals"""
    return "".join("_" + c.lower() if c.isupper() else c for c in field_name)
