"""Domain entity representing a marketplace user."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    """Core attributes describing a poster or helper."""

    id: int | None
    name: str
    email: str
    is_active: bool = True
    created_at: datetime | None = None

    @property
    def display_name(self) -> str:
        """Return the name shown to the other chat participant."""

        return self.name or self.email
