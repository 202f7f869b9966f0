"""
JSON aggregate strategy: nesting done inside the database.

A single statement reads jobs; two correlated scalar subqueries render the
company as a JSON object and the files as a JSON array (ordered by file id)
with the engine's own JSON functions. Both arrive as text, already
serialized, which is the observable difference from the eager strategy.
"""

from __future__ import annotations

from typing import Dict, List, NamedTuple

from sqlalchemy import Select, Text, cast, func, literal_column, select
from sqlalchemy.dialects.postgresql import aggregate_order_by
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from relbench.domain.models import JobAggregateRow
from relbench.domain.schema import Company, File, Job
from relbench.strategies.abstract import AbstractBenchmarkStrategy


class JsonFunctions(NamedTuple):
    build_object: str
    array_agg: str
    # Accepts ORDER BY inside the aggregate call.
    ordered_agg: bool


# Native JSON object/array builders per SQLAlchemy dialect name.
JSON_FUNCTIONS: Dict[str, JsonFunctions] = {
    "postgresql": JsonFunctions("json_build_object", "json_agg", True),
    "sqlite": JsonFunctions("json_object", "json_group_array", False),
}


def _key(name: str) -> ColumnElement:
    return literal_column(f"'{name}'")


class JsonAggregateStrategy(AbstractBenchmarkStrategy):
    """
    Server-side JSON aggregation through correlated subqueries.
    """

    name: str = "json_aggregate"
    description: str = "Single SELECT; company and files built as JSON by the database."
    output_file: str = "json_aggregate_output.json"

    def _json_functions(self, session: Session) -> JsonFunctions:
        dialect = session.get_bind().dialect.name
        try:
            return JSON_FUNCTIONS[dialect]
        except KeyError:
            raise ValueError(
                f"JSON aggregation is not supported on dialect '{dialect}'. "
                f"Supported: {', '.join(JSON_FUNCTIONS)}"
            ) from None

    def _files_array(self, fns: JsonFunctions) -> Select:
        """
        Files of the outer job as one JSON array, ordered by file id.

        Engines without ORDER BY inside aggregates read from an ordered,
        correlated derived table instead.
        """
        build_object = getattr(func, fns.build_object)
        array_agg = getattr(func, fns.array_agg)

        if fns.ordered_agg:
            file_object = build_object(
                _key("file_id"), File.file_id, _key("file_name"), File.file_name
            )
            return select(
                cast(array_agg(aggregate_order_by(file_object, File.file_id)), Text)
            ).where(File.job_id == Job.uuid)

        ordered = (
            select(File.file_id, File.file_name)
            .where(File.job_id == Job.uuid)
            .order_by(File.file_id)
            .correlate(Job)
            .subquery()
        )
        file_object = build_object(
            _key("file_id"), ordered.c.file_id, _key("file_name"), ordered.c.file_name
        )
        return select(cast(array_agg(file_object), Text)).select_from(ordered)

    def fetch(self, session: Session) -> List[JobAggregateRow]:
        fns = self._json_functions(session)
        build_object = getattr(func, fns.build_object)

        company_json = (
            select(
                cast(
                    build_object(
                        _key("company_id"),
                        Company.company_id,
                        _key("company_name"),
                        Company.company_name,
                    ),
                    Text,
                )
            )
            .where(Company.company_id == Job.company_id)
            .limit(1)
            .scalar_subquery()
        )
        files_json = self._files_array(fns).scalar_subquery()

        stmt = select(
            Job.uuid.label("job_id"),
            Job.job_title,
            Job.company_id,
            company_json.label("company"),
            Job.location,
            Job.salary,
            Job.posted_date,
            # json_agg over zero rows is NULL; the column is always an array
            func.coalesce(files_json, _key("[]")).label("files"),
        ).order_by(Job.uuid)

        rows = session.execute(stmt).mappings().all()
        return [JobAggregateRow.model_validate(dict(row)) for row in rows]


__all__ = ["JSON_FUNCTIONS", "JsonAggregateStrategy"]
