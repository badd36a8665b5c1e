"""
Instance address value objects.

An instance id either addresses a plain orchestration or a durable entity.
Entity ids come in two spellings:
- "@counter@abc"   (native runtime form)
- "Counter@@abc"   (type name, double separator, key)
"""
import re
from dataclasses import dataclass
from typing import Union

from core.domain.enums.runtime_status import EntityType


_NATIVE_ENTITY_ID = re.compile(r"^@(\w+)@(.+)$", re.DOTALL)
_TYPED_ENTITY_ID = re.compile(r"^(\w+)@@(.+)$", re.DOTALL)


@dataclass(frozen=True)
class EntityAddress:
    """Durable entity address."""
    entity_name: str
    entity_key: str

    @property
    def entity_type(self) -> EntityType:
        return EntityType.DURABLE_ENTITY


@dataclass(frozen=True)
class PlainAddress:
    """Plain orchestration address."""
    instance_id: str

    @property
    def entity_type(self) -> EntityType:
        return EntityType.ORCHESTRATION


InstanceAddress = Union[EntityAddress, PlainAddress]


def classify_instance_id(instance_id: str) -> InstanceAddress:
    """
    Classify an instance id.

    Args:
        instance_id: Instance id as seen by the runtime

    Returns:
        EntityAddress if the id matches an entity pattern, PlainAddress otherwise
    """
    for pattern in (_NATIVE_ENTITY_ID, _TYPED_ENTITY_ID):
        match = pattern.match(instance_id)
        if match:
            return EntityAddress(entity_name=match.group(1), entity_key=match.group(2))

    return PlainAddress(instance_id=instance_id)
