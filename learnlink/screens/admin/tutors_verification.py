"""Pending tutor verifications, single and bulk"""

from typing import List, Set

from rich.console import Group
from rich.table import Table
from rich.text import Text

from learnlink.components.format import format_date, truncate
from learnlink.exceptions import ValidationError
from learnlink.listings import subject_names
from learnlink.models import User
from learnlink.roles import Role
from learnlink.screens.base import Screen, action, require_args

ACTIONS = ("approve", "reject")
PAST = {"approve": "approved", "reject": "rejected"}


class AdminTutorsVerificationScreen(Screen):
    title = "Tutor Verification"
    allowed_roles = (Role.ADMIN,)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.tutors: List[User] = []
        self.selected: Set[str] = set()

    async def load(self) -> None:
        self.tutors = await self.api.admin.pending_tutors()
        # Keep only selections that are still pending
        self.selected &= {t.id for t in self.tutors}

    def _check_action(self, verb: str) -> str:
        if verb not in ACTIONS:
            raise ValidationError(f"Action must be one of: {', '.join(ACTIONS)}")
        return verb

    @action("approve", usage="approve <tutor id>")
    async def approve(self, args: str) -> None:
        """Approve one tutor"""
        await self._verify(args, "approve")

    @action("reject", usage="reject <tutor id>")
    async def reject(self, args: str) -> None:
        """Reject one tutor"""
        await self._verify(args, "reject")

    async def _verify(self, args: str, verb: str) -> None:
        tutor_id = require_args(args, 1, f"{verb} <tutor id>")[0]
        await self.api.admin.verify_tutor(tutor_id, verb)
        await self.load()
        self.success = f"Tutor has been {PAST[verb]} successfully."

    @action("select", usage="select <tutor id>")
    async def toggle_select(self, args: str) -> None:
        """Select or unselect a tutor for a bulk action"""
        tutor_id = require_args(args, 1, "select <tutor id>")[0]
        if tutor_id in self.selected:
            self.selected.discard(tutor_id)
        elif any(t.id == tutor_id for t in self.tutors):
            self.selected.add(tutor_id)
        else:
            raise ValidationError(f"No pending tutor with id {tutor_id}")

    @action("select-all")
    async def toggle_select_all(self, args: str) -> None:
        """Select every tutor, or clear the selection when all are selected"""
        all_ids = {t.id for t in self.tutors}
        self.selected = set() if self.selected == all_ids else all_ids

    @action("bulk", usage="bulk <approve|reject>")
    async def bulk(self, args: str) -> None:
        """Approve or reject every selected tutor in one request"""
        verb = self._check_action(args.strip())
        if not self.selected:
            raise ValidationError("Select at least one tutor first")

        ids = [t.id for t in self.tutors if t.id in self.selected]
        if not self.ctx.confirm(f"Are you sure you want to {verb} {len(ids)} selected tutor(s)?"):
            return

        await self.api.admin.verify_tutors(ids, verb)
        self.selected.clear()
        await self.load()
        self.success = f"{len(ids)} tutor(s) have been {PAST[verb]} successfully."

    def body(self):
        if not self.tutors:
            return Text("No tutors are waiting for verification.", style="dim")

        table = Table(show_header=True, header_style="bold", expand=True)
        table.add_column("", width=3)
        table.add_column("ID", style="dim", no_wrap=True)
        table.add_column("Name")
        table.add_column("Email")
        table.add_column("Subjects")
        table.add_column("Education")
        table.add_column("Joined")
        for tutor in self.tutors:
            table.add_row(
                "[x]" if tutor.id in self.selected else "[ ]",
                tutor.id,
                tutor.name or "",
                tutor.email or "",
                ", ".join(subject_names(tutor)),
                truncate(tutor.education, 40),
                format_date(tutor.date),
            )
        hint = Text(f"{len(self.selected)} selected.  approve/reject <id>, select <id>, select-all, bulk <approve|reject>",
                    style="dim")
        return Group(table, hint)
