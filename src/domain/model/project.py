from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Project:
    """An opaque per-user project document."""
    id: str
    user_id: str
    updated_at: datetime
    data: dict = field(default_factory=dict)
