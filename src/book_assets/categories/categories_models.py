"""Category data models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True)
class Category:
    id: str
    name: str
    slug: str
    created_at: datetime | None = None
