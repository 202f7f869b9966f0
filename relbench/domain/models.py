"""
Result records produced by the retrieval strategies.

Each strategy has exactly one canonical output shape declared here. Field
names are Pythonic; the JSON keys written to disk come from
`serialization_alias` and are emitted with `model_dump(by_alias=True)`.
"""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator

# Fixed-point amounts are written as JSON numbers rather than strings.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class _Record(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        from_attributes=True,
        arbitrary_types_allowed=False,
    )


class CompanyRecord(_Record):
    """
    A company as nested into job records.

    The defaults make up the zero-valued company used when a job references a
    company that does not exist.
    """

    company_id: str = Field("", serialization_alias="CompanyID")
    company_name: Optional[str] = Field("", serialization_alias="CompanyName")


class FileRecord(_Record):
    file_id: str = Field(..., serialization_alias="FileID")
    file_name: Optional[str] = Field(None, serialization_alias="FileName")
    job_id: Optional[str] = Field(None, serialization_alias="JobID")


class JobRecord(_Record):
    uuid: str = Field(..., serialization_alias="UUID")
    job_title: Optional[str] = Field(None, serialization_alias="JobTitle")
    company_id: Optional[str] = Field(None, serialization_alias="CompanyID")
    location: Optional[str] = Field(None, serialization_alias="Location")
    salary: Optional[Money] = Field(None, serialization_alias="Salary")
    posted_date: Optional[date] = Field(None, serialization_alias="PostedDate")


class JobWithRelations(JobRecord):
    """Job with its company and files nested in, as produced by eager loading."""

    company: CompanyRecord = Field(default_factory=CompanyRecord, serialization_alias="Company")
    files: List[FileRecord] = Field(default_factory=list, serialization_alias="Files")

    @field_validator("company", mode="before")
    @classmethod
    def company_or_zero(cls, value: Any) -> Any:
        return CompanyRecord() if value is None else value


class LazyJobDetails(_Record):
    """Job, company and files assembled from separate per-job queries."""

    job: JobRecord
    company: CompanyRecord = Field(default_factory=CompanyRecord)
    files: List[FileRecord] = Field(default_factory=list)

    @field_validator("company", mode="before")
    @classmethod
    def company_or_zero(cls, value: Any) -> Any:
        return CompanyRecord() if value is None else value


class JobDetailRow(_Record):
    """
    One flattened (job, file) pair from the left join.

    Company and file columns are null when the join found no match.
    """

    job_id: str
    job_title: Optional[str] = None
    company_id: Optional[str] = None
    company_name: Optional[str] = None
    location: Optional[str] = None
    salary: Optional[Money] = None
    posted_date: Optional[date] = None
    file_id: Optional[str] = None
    file_name: Optional[str] = None


class JobAggregateRow(_Record):
    """
    One job row whose company and files were serialized by the database.

    `company` holds a JSON object as text (null when no company matched) and
    `files` a JSON array as text.
    """

    job_id: str
    job_title: Optional[str] = None
    company_id: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    salary: Optional[Money] = None
    posted_date: Optional[date] = None
    files: str = "[]"


__all__ = [
    "CompanyRecord",
    "FileRecord",
    "JobAggregateRow",
    "JobDetailRow",
    "JobRecord",
    "JobWithRelations",
    "LazyJobDetails",
    "Money",
]
