"""
Join strategy: a single LEFT JOIN across jobs, company and files.

The projection is flat, so a job with N files comes back as N rows with its
job and company columns repeated, and a job without files as one row with
null file columns. Rows are never collapsed.
"""

from __future__ import annotations

from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from relbench.domain.models import JobDetailRow
from relbench.domain.schema import Company, File, Job
from relbench.strategies.abstract import AbstractBenchmarkStrategy


class JoinStrategy(AbstractBenchmarkStrategy):
    """
    One round trip, row multiplication across the one-to-many relationship.
    """

    name: str = "join"
    description: str = "Single SELECT with LEFT JOIN company and files (flat rows)."
    output_file: str = "join_output.json"

    def fetch(self, session: Session) -> List[JobDetailRow]:
        stmt = (
            select(
                Job.uuid.label("job_id"),
                Job.job_title,
                Job.company_id,
                Company.company_name,
                Job.location,
                Job.salary,
                Job.posted_date,
                File.file_id,
                File.file_name,
            )
            .outerjoin(Company, Job.company_id == Company.company_id)
            .outerjoin(File, Job.uuid == File.job_id)
            .order_by(Job.uuid, File.file_id)
        )
        rows = session.execute(stmt).mappings().all()
        return [JobDetailRow.model_validate(dict(row)) for row in rows]


__all__ = ["JoinStrategy"]
