"""Conversation with one tutor"""

import asyncio
from typing import List, Optional

from rich.table import Table
from rich.console import Group
from rich.text import Text

from learnlink.components.format import format_datetime
from learnlink.exceptions import ValidationError
from learnlink.models import Message, User, ref_id
from learnlink.roles import Role
from learnlink.screens.base import Screen, action


class ParentMessagesScreen(Screen):
    title = "Messages"
    allowed_roles = (Role.PARENT,)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.messages: List[Message] = []
        self.tutor: Optional[User] = None

    @property
    def tutor_id(self) -> str:
        return self.params["tutorId"]

    async def load(self) -> None:
        self.messages, self.tutor = await asyncio.gather(
            self.api.parent.messages(self.tutor_id),
            self.api.parent.tutor(self.tutor_id),
        )

    @action("send", usage="send <message>")
    async def send(self, args: str) -> None:
        """Send the tutor a message"""
        content = args.strip()
        if not content:
            raise ValidationError("Message cannot be empty")
        await self.api.parent.send_message(self.tutor_id, content)
        self.messages = await self.api.parent.messages(self.tutor_id)

    def body(self):
        name = self.tutor.display_name if self.tutor else "Tutor"
        me = self.user.id if self.user else ""

        table = Table(show_header=False, box=None, expand=True)
        table.add_column(no_wrap=True, style="dim")
        table.add_column(no_wrap=True)
        table.add_column()
        for m in self.messages:
            mine = ref_id(m.sender_id) == me
            table.add_row(format_datetime(m.created_at),
                          Text("You" if mine else name, style="bold cyan" if mine else "bold"),
                          m.content or "")
        if not self.messages:
            table.add_row("", "", Text("No messages yet. Say hello!", style="dim"))
        return Group(Text(f"Chat with {name}", style="bold"), table, Text("send <message>", style="dim"))
