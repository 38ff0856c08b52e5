"""
Cover letter repository.
"""
from app.models.cover_letter import CoverLetter
from app.repositories.base import OwnedRepository


class CoverLetterRepository(OwnedRepository[CoverLetter]):
    def __init__(self):
        super().__init__(CoverLetter)
