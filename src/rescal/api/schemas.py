from typing import Any, Dict, List, Optional
from datetime import date
from pydantic import BaseModel, Field

from rescal.scheduling.bands import UtilizationBand
from rescal.scheduling.conflicts import ConflictSeverity

# --- Shared ---

class ResourceSchema(BaseModel):
    id: str
    name: str
    email: Optional[str] = None

    class Config:
        from_attributes = True

class AssignmentSchema(BaseModel):
    id: str
    resource_id: str
    resource_type: str = "user"
    project_id: Optional[str] = None
    task_id: Optional[str] = None
    start_date: date
    end_date: date
    allocation_percentage: float
    is_active: bool

    class Config:
        from_attributes = True

# --- Calendar ---

class MonthSchema(BaseModel):
    year: int
    month: int
    label: str

class UtilizationCellSchema(BaseModel):
    aggregate_percentage: float = Field(..., description="Unclamped sum of active allocations")
    band: UtilizationBand

class CalendarSummarySchema(BaseModel):
    total_resources: int
    active_assignments: int
    over_allocated_days: int
    skipped_assignments: int = Field(0, description="Malformed assignments left out of the aggregates")

class CalendarResponse(BaseModel):
    project_id: str
    month: MonthSchema
    resource_filter: str
    grid: List[Optional[date]] = Field(..., description="Leading blanks (null) then every day of the month")
    resources: List[ResourceSchema]
    utilization: Dict[str, Dict[str, UtilizationCellSchema]]
    summary: CalendarSummarySchema

# --- Resources ---

class ResourceUtilizationResponse(BaseModel):
    resource_id: str
    start_date: date
    end_date: date
    total_allocation: float
    assignments: List[AssignmentSchema]
    utilization_by_date: Dict[str, float]
    skipped_assignments: int = 0

class DayAvailabilitySchema(BaseModel):
    day: date
    available_percentage: float
    allocations: List[AssignmentSchema]

class AvailabilityResponse(BaseModel):
    resource_id: str
    start_date: date
    end_date: date
    days: List[DayAvailabilitySchema]

class ConflictSchema(BaseModel):
    day: date
    total_allocation: float
    severity: ConflictSeverity
    description: str
    assignments: List[AssignmentSchema]
    suggested_actions: List[Dict[str, Any]] = Field(default_factory=list)

class ConflictResponse(BaseModel):
    resource_id: str
    start_date: date
    end_date: date
    has_conflicts: bool
    by_severity: Dict[str, int]
    conflicts: List[ConflictSchema]
    detected_at: str

# --- Leveling ---

class AdjustmentSchema(BaseModel):
    assignment_id: str
    resource_id: str
    original_allocation: float
    new_allocation: float
    reason: str

class LevelingResponse(BaseModel):
    project_id: str
    adjustments: List[AdjustmentSchema]
    leveled_assignments: List[AssignmentSchema]
    skipped_assignments: List[str] = Field(default_factory=list)
