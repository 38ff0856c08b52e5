"""
Resume repository.
"""
from app.models.resume import Resume
from app.repositories.base import OwnedRepository


class ResumeRepository(OwnedRepository[Resume]):
    def __init__(self):
        super().__init__(Resume)
