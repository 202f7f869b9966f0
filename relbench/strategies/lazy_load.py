"""
Lazy loading strategy: the N+1 query pattern, on purpose.

One query reads a bounded page of jobs, then every job triggers its own
company lookup and its own files lookup. It exists as the contrast to
`EagerLoadStrategy`, which batches the same reads.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from relbench.config import get_settings
from relbench.domain.models import LazyJobDetails
from relbench.domain.schema import Company, File, Job
from relbench.strategies.abstract import AbstractBenchmarkStrategy


class LazyLoadStrategy(AbstractBenchmarkStrategy):
    """
    Per-job lookups for company and files (1 + 2N statements).

    The job query carries a real LIMIT but no ORDER BY, so which jobs are
    picked is up to the database.
    """

    name: str = "lazy"
    description: str = "Jobs LIMIT n, then one company query and one files query per job."
    output_file: str = "lazy_load_output.json"

    def __init__(self, limit: Optional[int] = None) -> None:
        self.limit = limit if limit is not None else get_settings().lazy_load_limit

    def fetch(self, session: Session) -> List[LazyJobDetails]:
        jobs = session.scalars(select(Job).limit(self.limit)).all()

        details: List[LazyJobDetails] = []
        for job in jobs:
            company = session.scalars(
                select(Company).where(Company.company_id == job.company_id).limit(1)
            ).first()
            files = session.scalars(
                select(File).where(File.job_id == job.uuid).order_by(File.file_id)
            ).all()
            details.append(
                LazyJobDetails.model_validate(
                    {"job": job, "company": company, "files": list(files)}
                )
            )
        return details


__all__ = ["LazyLoadStrategy"]
