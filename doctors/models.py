from dataclasses import dataclass


@dataclass
class Doctor:
    id: int = 0
    name: str = ""
    username: str = ""
    password: str = ""
    confirm_password: str = ""
    gender: str = ""
    specialization: str = ""
    years_of_experience: int = 0
