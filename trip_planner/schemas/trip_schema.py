from enum import Enum
from typing import Any, Dict, List, Optional
from datetime import date

from pydantic import BaseModel, ConfigDict, Field


# ============================================================
# 🧳 Trip status (stored on the trip record)
# ============================================================
class TripStatus(str, Enum):
    DRAFT = "draft"
    PLANNED = "planned"
    ACTIVE = "active"
    COMPLETED = "completed"


# ============================================================
# 🎒 Trip request (validated input)
# ============================================================
class TripRequest(BaseModel):
    """
    A validated, sanitized trip request.
    Only ``validate_trip_input`` should build one from caller JSON.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    trip_id: str = Field(alias="tripId")
    destination: str
    start_date: date = Field(alias="startDate")
    end_date: date = Field(alias="endDate")
    travelers: int = 1
    budget: Optional[float] = None
    preferences: List[str] = Field(default_factory=list)

    @property
    def duration_days(self) -> int:
        return (self.end_date - self.start_date).days

    def to_payload(self) -> Dict[str, Any]:
        """camelCase JSON form, the same shape callers send."""
        return self.model_dump(mode="json", by_alias=True)


# ============================================================
# 👤 Caller identity
# ============================================================
class Identity(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    email: Optional[str] = None
