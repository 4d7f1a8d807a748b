from dataclasses import dataclass, field
from typing import Any, List

NO_APPOINTMENTS_MESSAGE = "No appointments found."


@dataclass
class AppointmentListPage:
    title: str
    appointments: List[Any] = field(default_factory=list)
    empty_message: str = NO_APPOINTMENTS_MESSAGE

    @property
    def is_empty(self) -> bool:
        return not self.appointments


@dataclass
class AppointmentFormPage:
    form: Any
    doctors: List[Any] = field(default_factory=list)
    patient_id: str = ""
    message: str = ""
