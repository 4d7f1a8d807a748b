"""
Appointment as held by the remote API. Nothing is persisted locally.
"""

import datetime
from dataclasses import dataclass
from typing import Optional


@dataclass
class Appointment:
    id: int = 0
    patient_id: Optional[int] = None
    doctor_id: Optional[int] = None
    date: Optional[datetime.date] = None
    time: Optional[datetime.time] = None
    status: str = ""
    purpose_description: str = ""

    @property
    def is_new(self) -> bool:
        """An id of 0 (or none) marks an appointment the API has not stored yet."""
        return not self.id or self.id <= 0
