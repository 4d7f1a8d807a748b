from django.db import models


class Role(models.TextChoices):
    """Roles carried in the ``role`` claim of API-issued tokens."""

    DOCTOR = "Doctor", "Doctor"
    PATIENT = "Patient", "Patient"
