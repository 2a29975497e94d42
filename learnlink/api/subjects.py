"""Public subject catalog"""

from typing import TYPE_CHECKING, List

from learnlink.models import Subject

if TYPE_CHECKING:
    from learnlink.api.client import ApiClient


def parse_subjects(data) -> List[Subject]:
    """Catalog endpoints answer either a list or {subjects: [...]}"""
    if isinstance(data, dict):
        data = data.get("subjects") or []
    return [Subject.model_validate(s) for s in data or []]


class SubjectsAPI:

    def __init__(self, client: "ApiClient"):
        self.client = client

    async def list(self) -> List[Subject]:
        response = await self.client.get("/api/subjects", auth=False, fallback="Failed to fetch subjects")
        return parse_subjects(response.data)

    async def list_all(self) -> List[Subject]:
        """Same catalog, served from the tutor namespace"""
        response = await self.client.get("/api/tutor/subjects/all", fallback="Failed to fetch subjects")
        return parse_subjects(response.data)
