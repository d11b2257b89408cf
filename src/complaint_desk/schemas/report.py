"""Report schema definitions.

A report is a frozen snapshot: regenerating it is the only way to pick up
later changes to the complaint collection.
"""

from datetime import date, datetime
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from complaint_desk.schemas.complaint import (
    Complaint,
    ComplaintCategory,
    ComplaintStatus,
)


class ReportFilter(BaseModel):
    start_date: Optional[date] = Field(
        default=None, description="Inclusive lower bound on the submission date."
    )
    end_date: Optional[date] = Field(
        default=None, description="Inclusive upper bound on the submission date."
    )
    statuses: List[ComplaintStatus] = Field(
        default_factory=lambda: list(ComplaintStatus)
    )
    categories: List[ComplaintCategory] = Field(
        default_factory=lambda: list(ComplaintCategory)
    )


class ReportSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    generated_at: datetime
    report_filter: ReportFilter
    complaints: Tuple[Complaint, ...]

    def __len__(self) -> int:
        return len(self.complaints)
