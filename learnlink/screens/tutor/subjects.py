"""Subjects the tutor manages"""

from typing import List

from rich.table import Table
from rich.text import Text

from learnlink.exceptions import ValidationError
from learnlink.models import Subject
from learnlink.roles import Role
from learnlink.screens.base import Screen, action, split_args


class TutorSubjectsScreen(Screen):
    title = "My Subjects"
    allowed_roles = (Role.TUTOR,)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.subjects: List[Subject] = []

    async def load(self) -> None:
        self.subjects = await self.api.tutor.subjects()

    @action("add", usage='add "<name>" [image url]')
    async def add(self, args: str) -> None:
        """Add a subject"""
        parts = split_args(args)
        if not parts or not parts[0].strip():
            raise ValidationError("Subject name is required", field="name")
        subject = await self.api.tutor.add_subject(parts[0], parts[1] if len(parts) > 1 else "")
        self.subjects.append(subject)
        self.success = f"Added {subject.name}"

    @action("delete", usage="delete <id>")
    async def delete(self, args: str) -> None:
        """Delete a subject"""
        subject_id = args.strip()
        if not subject_id:
            raise ValidationError("Usage: delete <id>")
        await self.api.tutor.delete_subject(subject_id)
        self.subjects = [s for s in self.subjects if s.id != subject_id]

    def body(self):
        if not self.subjects:
            return Text('No subjects yet. add "<name>" to create one.', style="dim")
        table = Table(show_header=True, header_style="bold")
        table.add_column("ID", style="dim")
        table.add_column("Name")
        table.add_column("Image")
        for s in self.subjects:
            table.add_row(s.id, s.name or "", self.api.image_url(s.image_url) or "")
        return table
