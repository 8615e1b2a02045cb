"""Store-wide runtime settings (single record)."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ...utils.clock import utc_now


@dataclass
class StoreSettings:
    stripe_enabled: bool = True
    updated_by: Optional[str] = None
    updated_at: datetime = field(default_factory=utc_now)
