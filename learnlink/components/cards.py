"""
Presentational cards. They only format what they are given; nothing here
talks to the API.
"""

from typing import Iterable, List, Optional

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from learnlink.components.format import (
    format_date,
    format_datetime,
    humanize,
    money,
    priority_badge,
    stars,
    status_badge,
    truncate,
)
from learnlink.listings import TutorOffer
from learnlink.models import Dispute, Review, User, ref_name


def tutor_card(offer: TutorOffer, image_url: Optional[str] = None,
               bookmarked: bool = False) -> Panel:
    tutor = offer.tutor
    body = Table.grid(padding=(0, 1))
    body.add_column(style="dim")
    body.add_column()

    body.add_row("Subject", Text(offer.subject_name, style="bold"))
    if offer.title:
        body.add_row("Title", offer.title)
    body.add_row("Rate", f"{money(offer.hourly_rate)}/hr")
    body.add_row("Rating", f"{stars(tutor.rating)} {tutor.rating or 'New'}")
    if tutor.location:
        body.add_row("Location", tutor.location)
    if image_url:
        body.add_row("Photo", Text(image_url, style="link " + image_url))
    body.add_row("Open", f"/parent/tutor/{tutor.id}/subject/{offer.subject_id}")

    mark = "🔖 " if bookmarked else ""
    return Panel(body, title=f"{mark}{tutor.display_name}", title_align="left", border_style="#2DB8A1")


def user_card(user: User, image_url: Optional[str] = None) -> Panel:
    body = Table.grid(padding=(0, 1))
    body.add_column(style="dim")
    body.add_column()

    body.add_row("Email", user.email or "")
    body.add_row("Role", humanize(user.role))
    if user.status:
        body.add_row("Status", status_badge(user.status))
    if user.location:
        body.add_row("Location", user.location)
    if user.date:
        body.add_row("Joined", format_date(user.date))
    if image_url:
        body.add_row("Photo", image_url)

    return Panel(body, title=user.display_name, title_align="left", subtitle=user.id or None)


def review_card(review: Review, actions: Iterable[str] = ()) -> Panel:
    header = Text.assemble(
        (stars(review.rating), "yellow"),
        f"  {ref_name(review.parent_id, 'Anonymous')} → {ref_name(review.tutor_id, 'Tutor')}",
    )
    lines = [header, Text(review.comment or "", style="italic")]

    flags = []
    if review.is_flagged:
        flags.append(status_badge("flagged"))
    if review.is_removed:
        flags.append(status_badge("removed"))
    if flags:
        lines.append(Text(" ").join(flags))

    actions = list(actions)
    if actions:
        lines.append(Text(f"Actions: {', '.join(f'{a} {review.id}' for a in actions)}", style="dim"))

    return Panel(Group(*lines), title=format_date(review.created_at), title_align="right",
                 subtitle=review.id or None)


def dispute_card(dispute: Dispute) -> Panel:
    body = Table.grid(padding=(0, 1))
    body.add_column(style="dim")
    body.add_column()

    body.add_row("Status", status_badge(dispute.status))
    body.add_row("Priority", priority_badge(dispute.priority))
    body.add_row("Type", humanize(dispute.dispute_type))
    body.add_row("Parent", ref_name(dispute.parent_id, "Unknown"))
    body.add_row("Tutor", ref_name(dispute.tutor_id, "Unknown"))
    body.add_row("Filed", format_datetime(dispute.created_at))
    body.add_row("Details", truncate(dispute.description, 200))
    if dispute.resolution:
        body.add_row("Resolution", dispute.resolution)
    for message in dispute.messages[-3:]:
        body.add_row(ref_name(message.sender, "Message"), truncate(message.message, 120))

    return Panel(body, title=dispute.title or "Dispute", title_align="left", subtitle=dispute.id or None)


def review_actions(review: Review) -> List[str]:
    """Moderation actions that make sense for a review's current state"""
    actions = []
    if not review.is_flagged and not review.is_removed:
        actions.append("flag")
    if not review.is_removed:
        actions.append("remove")
    if review.is_flagged or review.is_removed:
        actions.append("approve")
    return actions
