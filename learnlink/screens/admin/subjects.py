"""Global subject catalog management"""

from typing import List

from rich.console import Group
from rich.table import Table
from rich.text import Text

from learnlink.exceptions import ValidationError
from learnlink.models import Subject
from learnlink.roles import Role
from learnlink.screens.base import Screen, action, split_args
from learnlink.uploads import load_image

MAX_IMAGE_MB = 5


class AdminSubjectsScreen(Screen):
    title = "Manage Subjects"
    allowed_roles = (Role.ADMIN,)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.subjects: List[Subject] = []

    async def load(self) -> None:
        self.subjects = await self.api.admin.subjects()

    @action("create", usage='create "<name>" [image path]')
    async def create(self, args: str) -> None:
        """Add a subject, optionally with an image"""
        parts = split_args(args)
        if not parts:
            raise ValidationError("Subject name is required", field="name")
        image = await load_image(parts[1], MAX_IMAGE_MB) if len(parts) > 1 else None
        await self.api.admin.create_subject(parts[0], image)
        await self.load()
        self.success = "The subject has been created successfully."

    @action("update", usage='update <id> "<name>" [image path]')
    async def update(self, args: str) -> None:
        """Rename a subject or replace its image"""
        parts = split_args(args)
        if len(parts) < 2:
            raise ValidationError('Usage: update <id> "<name>" [image path]')
        image = await load_image(parts[2], MAX_IMAGE_MB) if len(parts) > 2 else None
        await self.api.admin.update_subject(parts[0], parts[1], image)
        await self.load()
        self.success = "The subject has been updated successfully."

    @action("delete", usage="delete <id>")
    async def delete(self, args: str) -> None:
        """Delete a subject after confirmation"""
        subject_id = args.strip()
        if not subject_id:
            raise ValidationError("Usage: delete <id>")
        if not self.ctx.confirm(
            "Are you sure you want to delete this subject? This action cannot be undone."
        ):
            return
        await self.api.admin.delete_subject(subject_id)
        await self.load()
        self.success = "Subject has been deleted successfully."

    def body(self):
        if not self.subjects:
            return Text("No subjects yet. create \"<name>\" [image path]", style="dim")
        table = Table(show_header=True, header_style="bold", expand=True)
        table.add_column("ID", style="dim", no_wrap=True)
        table.add_column("Name")
        table.add_column("Image")
        for subject in self.subjects:
            table.add_row(subject.id, subject.name or "",
                          self.api.image_url(subject.image_url) or "(none)")
        return Group(table)
