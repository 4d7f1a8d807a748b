from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass
class Patient:
    id: int = 0
    name: str = ""
    username: str = ""
    password: str = ""
    confirm_password: str = ""
    gender: str = ""
    date_of_birth: Optional[date] = None
