"""
Domain package for the relational fetch benchmark.

Exports the ORM table descriptors and the result records the strategies
produce. Keep this package focused on data definitions.
"""

from relbench.domain.models import (
    CompanyRecord,
    FileRecord,
    JobAggregateRow,
    JobDetailRow,
    JobRecord,
    JobWithRelations,
    LazyJobDetails,
)
from relbench.domain.schema import Base, Company, File, Job

__all__ = [
    # Tables
    "Base",
    "Company",
    "File",
    "Job",
    # Records
    "CompanyRecord",
    "FileRecord",
    "JobAggregateRow",
    "JobDetailRow",
    "JobRecord",
    "JobWithRelations",
    "LazyJobDetails",
]
