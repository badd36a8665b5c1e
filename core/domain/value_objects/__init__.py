"""Domain value objects."""

from .instance_address import (
    EntityAddress,
    PlainAddress,
    InstanceAddress,
    classify_instance_id,
)

__all__ = [
    "EntityAddress",
    "PlainAddress",
    "InstanceAddress",
    "classify_instance_id",
]
