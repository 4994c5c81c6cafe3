from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class SelectedSlot:
    date_label: str  # e.g. "January 4"
    start_time: str  # e.g. "2:30pm"
    starts_at: datetime
