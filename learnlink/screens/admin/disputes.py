"""Dispute queue: filter, resolve, reprioritize, dismiss"""

from typing import Dict, List, Optional

from rich.console import Group
from rich.text import Text

from learnlink.components.cards import dispute_card
from learnlink.exceptions import ValidationError
from learnlink.models import Dispute
from learnlink.roles import Role
from learnlink.screens.base import Screen, action, require_args

STATUSES = ("pending", "under_review", "resolved", "dismissed")
PRIORITIES = ("low", "medium", "high", "urgent")
DISPUTE_TYPES = ("payment", "quality", "scheduling", "behavior", "technical", "other")
RESOLUTION_TYPES = ("refund", "partial_refund", "reschedule", "credit", "warning", "dismiss")

FILTER_CHOICES = {
    "status": STATUSES,
    "priority": PRIORITIES,
    "type": DISPUTE_TYPES,
}


class AdminDisputesScreen(Screen):
    title = "Dispute Management"
    allowed_roles = (Role.ADMIN,)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.disputes: List[Dispute] = []
        self.filters: Dict[str, Optional[str]] = {
            "status": self.query.get("status"),
            "priority": self.query.get("priority"),
            "type": self.query.get("disputeType"),
        }

    async def load(self) -> None:
        self.disputes = await self.api.admin.disputes(
            status=self.filters["status"],
            priority=self.filters["priority"],
            dispute_type=self.filters["type"],
        )

    @action("filter", usage="filter <status|priority|type> [value]")
    async def set_filter(self, args: str) -> None:
        """Filter disputes; an empty value clears the filter"""
        parts = args.split()
        if not parts or parts[0] not in FILTER_CHOICES:
            raise ValidationError("Usage: filter <status|priority|type> [value]")
        name = parts[0]
        value = parts[1] if len(parts) > 1 else None
        if value and value not in FILTER_CHOICES[name]:
            raise ValidationError(f"{name} must be one of: {', '.join(FILTER_CHOICES[name])}")
        self.filters[name] = value
        await self.load()

    @action("resolve", usage="resolve <id> <resolution type> [notes]")
    async def resolve(self, args: str) -> None:
        """Resolve a dispute (refund, partial_refund, reschedule, credit, warning, dismiss)"""
        parts = args.split(maxsplit=2)
        if len(parts) < 2:
            raise ValidationError("Choose a resolution type: " + ", ".join(RESOLUTION_TYPES))
        dispute_id, resolution_type = parts[0], parts[1]
        if resolution_type not in RESOLUTION_TYPES:
            raise ValidationError("Resolution type must be one of: " + ", ".join(RESOLUTION_TYPES))
        notes = parts[2] if len(parts) > 2 else ""

        await self.api.admin.resolve_dispute(dispute_id, resolution_type, notes)
        await self.load()
        self.success = "The dispute has been successfully resolved."

    @action("priority", usage="priority <id> <low|medium|high|urgent>")
    async def set_priority(self, args: str) -> None:
        """Change a dispute's priority"""
        dispute_id, priority = require_args(args, 2, "priority <id> <low|medium|high|urgent>")[:2]
        if priority not in PRIORITIES:
            raise ValidationError("Priority must be one of: " + ", ".join(PRIORITIES))
        await self.api.admin.set_dispute_priority(dispute_id, priority)
        await self.load()
        self.success = "Dispute priority has been updated successfully."

    @action("dismiss", usage="dismiss <id> [reason]")
    async def dismiss(self, args: str) -> None:
        """Dismiss a dispute with an optional reason"""
        parts = args.split(maxsplit=1)
        if not parts:
            raise ValidationError("Usage: dismiss <id> [reason]")
        await self.api.admin.dismiss_dispute(parts[0], parts[1] if len(parts) > 1 else "")
        await self.load()
        self.success = "The dispute has been dismissed successfully."

    def visible(self) -> List[Dispute]:
        """Disputes matching every active filter"""
        fields = {"status": "status", "priority": "priority", "type": "dispute_type"}
        return [
            d for d in self.disputes
            if all(getattr(d, fields[name]) == value for name, value in self.filters.items() if value)
        ]

    def body(self):
        disputes = self.visible()
        active = ", ".join(f"{k}={v}" for k, v in self.filters.items() if v) or "none"
        parts = [Text(f"{len(disputes)} dispute(s)   Filters: {active}", style="dim")]
        if not disputes:
            parts.append(Text("No disputes match these filters.", style="dim"))
        parts.extend(dispute_card(d) for d in disputes)
        return Group(*parts)
