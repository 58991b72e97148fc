"""Domain models for mp_app — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class AppConfig:
    """Per-application settings. Absent rows read as the zero-valued default."""

    application: str
    enabled: bool = False            # platform-controlled
    active: bool = False             # app-controlled
    fee_rate: int = 0                # x/255 of post-royalty proceeds
    gratitude_rate: int = 0          # x/255 of the app fee, diverted to platform
    seller_approval_required: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_eligible(self) -> bool:
        return self.enabled and self.active

