"""
Eager loading strategy: jobs plus one batched load per relationship.

Company and files are fetched with `subqueryload`, which re-runs the job query
as a subquery and joins each relationship to it in a single statement. The
whole result costs three statements (jobs, companies, files) no matter how
many jobs exist.
"""

from __future__ import annotations

from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session, subqueryload

from relbench.domain.models import JobWithRelations
from relbench.domain.schema import Job
from relbench.strategies.abstract import AbstractBenchmarkStrategy


class EagerLoadStrategy(AbstractBenchmarkStrategy):
    """
    Load every job with its company and files preloaded by the ORM.
    """

    name: str = "eager"
    description: str = "ORM query with subqueryload for company and files (3 statements)."
    output_file: str = "eager_load_output.json"

    def fetch(self, session: Session) -> List[JobWithRelations]:
        stmt = (
            select(Job)
            .options(subqueryload(Job.company), subqueryload(Job.files))
            .order_by(Job.uuid)
        )
        jobs = session.scalars(stmt).all()
        return [JobWithRelations.model_validate(job) for job in jobs]


__all__ = ["EagerLoadStrategy"]
