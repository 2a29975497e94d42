"""Tutor inbox, grouped into conversations"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from rich.console import Group
from rich.table import Table
from rich.text import Text

from learnlink.components.format import format_datetime, truncate
from learnlink.exceptions import ValidationError
from learnlink.models import Message, ref_id, ref_name
from learnlink.roles import Role
from learnlink.screens.base import Screen, action


@dataclass
class Conversation:
    other_id: str
    name: str
    messages: List[Message] = field(default_factory=list)
    unread: int = 0

    @property
    def last(self) -> Optional[Message]:
        return self.messages[-1] if self.messages else None


def group_conversations(messages: List[Message], me: str) -> List[Conversation]:
    """One conversation per other party, newest activity first"""
    conversations: Dict[str, Conversation] = {}
    for m in messages:
        sender, receiver = ref_id(m.sender_id), ref_id(m.receiver_id)
        if sender != me:
            other: Any = m.sender_id
        elif receiver != me:
            other = m.receiver_id
        else:
            continue
        other_id = ref_id(other)
        conv = conversations.setdefault(other_id, Conversation(other_id, ref_name(other, "Parent")))
        conv.messages.append(m)
        if not m.is_read and receiver == me:
            conv.unread += 1
    return sorted(conversations.values(), key=lambda c: (c.last.created_at or "") if c.last else "",
                  reverse=True)


class TutorMessagesScreen(Screen):
    title = "Messages"
    allowed_roles = (Role.TUTOR,)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.messages: List[Message] = []
        self.thread: List[Message] = []
        self.selected: Optional[str] = self.query.get("parentId")

    @property
    def me(self) -> str:
        return self.user.id if self.user else ""

    @property
    def conversations(self) -> List[Conversation]:
        return group_conversations(self.messages, self.me)

    async def load(self) -> None:
        self.messages = await self.api.tutor.messages()
        if self.selected is None:
            first = next(iter(self.conversations), None)
            self.selected = first.other_id if first else None
        if self.selected:
            await self.load_thread()

    async def load_thread(self) -> None:
        me = self.require_user().id
        self.thread = await self.api.tutor.messages(parent_id=self.selected)
        unread = [m.id for m in self.thread if not m.is_read and ref_id(m.receiver_id) == me]
        if unread:
            await self.api.tutor.mark_messages_read(unread)
            for m in self.messages + self.thread:
                if m.id in unread:
                    m.is_read = True

    @action("open", usage="open <parent id>")
    async def open_conversation(self, args: str) -> None:
        """Show one conversation and mark it read"""
        parent_id = args.strip()
        if not parent_id:
            raise ValidationError("Usage: open <parent id>")
        self.selected = parent_id
        await self.load_thread()

    @action("reply", usage="reply <message>")
    async def reply(self, args: str) -> None:
        """Reply in the open conversation"""
        content = args.strip()
        if not self.selected:
            raise ValidationError("Open a conversation first")
        if not content:
            raise ValidationError("Message cannot be empty")
        await self.api.tutor.send_message(self.selected, content)
        self.messages = await self.api.tutor.messages()
        self.thread = await self.api.tutor.messages(parent_id=self.selected)

    def body(self):
        inbox = Table(title="Conversations", show_header=True, header_style="bold", title_justify="left")
        inbox.add_column("Parent ID", style="dim")
        inbox.add_column("Name")
        inbox.add_column("Last message")
        inbox.add_column("Unread", justify="right")
        conversations = self.conversations
        for c in conversations:
            marker = "bold" if c.other_id == self.selected else ""
            inbox.add_row(c.other_id, Text(c.name, style=marker),
                          truncate(c.last.content if c.last else "", 40),
                          Text(str(c.unread), style="red") if c.unread else "")
        if not conversations:
            inbox.add_row("", Text("No messages yet.", style="dim"), "", "")

        parts: List[Any] = [inbox]
        if self.selected:
            thread = Table(show_header=False, box=None, expand=True)
            thread.add_column(style="dim", no_wrap=True)
            thread.add_column(no_wrap=True)
            thread.add_column()
            for m in self.thread:
                mine = ref_id(m.sender_id) == self.me
                thread.add_row(format_datetime(m.created_at),
                               Text("You" if mine else ref_name(m.sender_id, "Parent"),
                                    style="bold cyan" if mine else "bold"),
                               m.content or "")
            parts.extend([thread, Text("reply <message>", style="dim")])
        return Group(*parts)
