"""/subjects/:subjectId - every tutor teaching one subject"""

from typing import List, Optional

from rich.console import Group
from rich.text import Text

from learnlink.exceptions import ValidationError
from learnlink.listings import TutorOffer, flatten_by_subject
from learnlink.models import Subject
from learnlink.screens.parent.listing import TutorListScreen


class ParentSubjectTutorsScreen(TutorListScreen):
    title = "Tutors by Subject"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.subject: Optional[Subject] = None
        self.offers: List[TutorOffer] = []

    async def load(self) -> None:
        subject_id = self.params["subjectId"]
        catalog = await self.api.subjects.list()
        self.subject = next((s for s in catalog if s.id == subject_id), None)
        if self.subject is None:
            raise ValidationError("Subject not found")

        tutors = await self.api.parent.search_tutors(subject=subject_id, filter_type="subject", limit=50)
        self.offers = [o for o in flatten_by_subject(tutors) if o.subject_id == subject_id]
        await self.load_bookmarks()

    def body(self):
        if self.subject is None:
            return None
        return Group(
            Text(f"{self.subject.name} tutors", style="bold"),
            self.cards(self.offers, "No tutors teach this subject yet."),
        )
