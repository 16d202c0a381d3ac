from __future__ import annotations

import uuid
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class EventType(str, Enum):
    # Heal attempts
    HEAL_SUCCEEDED = "HEAL_SUCCEEDED"
    HEAL_FAILED = "HEAL_FAILED"
    HEAL_REJECTED = "HEAL_REJECTED"
    HEAL_ON_COOLDOWN = "HEAL_ON_COOLDOWN"
    # Entity state
    HEALTH_CHANGED = "HEALTH_CHANGED"
    OVERHEAL_CHANGED = "OVERHEAL_CHANGED"
    STATUS_EFFECT_ADDED = "STATUS_EFFECT_ADDED"
    STATUS_EFFECT_REMOVED = "STATUS_EFFECT_REMOVED"
    # Cooldowns
    COOLDOWN_STARTED = "COOLDOWN_STARTED"
    COOLDOWN_ENDED = "COOLDOWN_ENDED"
    # Roster
    ENTITY_ADDED = "ENTITY_ADDED"
    ENTITY_REMOVED = "ENTITY_REMOVED"


class HealEvent(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    event_type: EventType
    timestamp_ms: float = 0.0
    actor_id: Optional[str] = None
    target_id: Optional[str] = None
    description: str = ""
    details: dict[str, Any] = Field(default_factory=dict)
