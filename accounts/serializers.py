"""
Shared pieces for translating remote API JSON into local entities.

The remote API is not strict about key casing (``doctorID`` and ``DoctorId``
both occur), so incoming keys are matched to serializer fields
case-insensitively.
"""

import logging
from collections.abc import Mapping

from rest_framework import serializers

logger = logging.getLogger(__name__)


class ApiDateField(serializers.DateField):
    """Accepts ``YYYY-MM-DD`` as well as a midnight date-time like ``2024-05-01T00:00:00``."""

    def to_internal_value(self, value):
        if isinstance(value, str) and "T" in value:
            value = value.split("T", 1)[0]
        return super().to_internal_value(value)


class ApiSerializer(serializers.Serializer):
    """Serializer whose ``save()`` builds the dataclass named by ``entity_class``."""

    entity_class = None

    def to_internal_value(self, data):
        if isinstance(data, Mapping):
            names = {name.lower(): name for name in self.fields}
            data = {names.get(str(key).lower(), key): value for key, value in data.items()}
        return super().to_internal_value(data)

    def create(self, validated_data):
        return self.entity_class(**validated_data)

    def update(self, instance, validated_data):
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        return instance


def load_entity(serializer_class, payload):
    """Deserialize one entity; returns None if the payload does not fit."""
    if not isinstance(payload, Mapping):
        logger.error("[API] Expected a JSON object for %s, got %r.", serializer_class.__name__, type(payload).__name__)
        return None

    serializer = serializer_class(data=payload)
    if not serializer.is_valid():
        logger.error("[API] Invalid %s payload: %s", serializer_class.__name__, serializer.errors)
        return None
    return serializer.save()


def load_entities(serializer_class, payload):
    """Deserialize a list of entities; a null body counts as an empty list."""
    if payload is None:
        return []
    if not isinstance(payload, list):
        logger.error("[API] Expected a JSON array for %s, got %r.", serializer_class.__name__, type(payload).__name__)
        return None

    serializer = serializer_class(data=payload, many=True)
    if not serializer.is_valid():
        logger.error("[API] Invalid %s list payload: %s", serializer_class.__name__, serializer.errors)
        return None
    return serializer.save()


def dump_entity(serializer_class, entity) -> dict:
    return dict(serializer_class(entity).data)
