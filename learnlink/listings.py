"""
Tutor listings: one card per (tutor, subject) pair, plus the small list
helpers parent screens share (bookmark lookup, location choices).
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from learnlink.models import (
    Subject,
    TutorSubject,
    TutorSubjectPair,
    User,
)


@dataclass
class TutorOffer:
    """A tutor teaching one particular subject at that subject's rate"""
    tutor: User
    subject_id: str
    subject_name: str
    title: Optional[str] = None
    hourly_rate: Optional[float] = None
    hours: Optional[float] = None
    subject_image: Optional[str] = None

    @property
    def key(self) -> tuple:
        return (self.tutor.id, self.subject_id)


def offer_for(tutor: User, entry: TutorSubject) -> TutorOffer:
    subject = entry.subject if isinstance(entry.subject, Subject) else None
    return TutorOffer(
        tutor=tutor,
        subject_id=entry.subject_id,
        subject_name=entry.subject_name or "Subject",
        title=entry.title,
        hourly_rate=entry.hourly_rate,
        hours=entry.hours,
        subject_image=subject.image_url if subject else None,
    )


def flatten_by_subject(tutors: Iterable[User]) -> List[TutorOffer]:
    """Tutors without subjects produce no cards"""
    return [offer_for(tutor, entry) for tutor in tutors for entry in tutor.subjects]


def offer_from_pair(pair: TutorSubjectPair) -> Optional[TutorOffer]:
    """Card for a bookmark or recent visit; None when either side is not populated"""
    tutor = pair.tutor_id if isinstance(pair.tutor_id, User) else None
    subject = pair.subject_id if isinstance(pair.subject_id, Subject) else None
    if tutor is None or subject is None:
        return None

    entry = next((s for s in tutor.subjects if s.subject_id == subject.id), None)
    return TutorOffer(
        tutor=tutor,
        subject_id=subject.id,
        subject_name=subject.name or "Subject",
        title=entry.title if entry else None,
        hourly_rate=entry.hourly_rate if entry else None,
        hours=entry.hours if entry else None,
        subject_image=subject.image_url,
    )


def is_bookmarked(bookmarks: Sequence[TutorSubjectPair], tutor_id: str, subject_id: str) -> bool:
    return any(b.key == (tutor_id, subject_id) for b in bookmarks)


def locations_of(tutors: Iterable[User]) -> List[str]:
    """Distinct tutor locations, first-seen order"""
    seen: List[str] = []
    for tutor in tutors:
        if tutor.location and tutor.location not in seen:
            seen.append(tutor.location)
    return seen


def subject_names(tutor: User) -> List[str]:
    """Names for a tutor's subjects, falling back to whatever the entry carries"""
    return [entry.subject_name for entry in tutor.subjects if entry.subject_name]


def find_subject(subjects: Iterable[Subject], ref: str) -> Optional[Subject]:
    """Look a catalog subject up by id, then by case-insensitive name"""
    ref = (ref or "").strip()
    subjects = list(subjects)
    for subject in subjects:
        if subject.id == ref:
            return subject
    lowered = ref.lower()
    return next((s for s in subjects if (s.name or "").lower() == lowered), None)
