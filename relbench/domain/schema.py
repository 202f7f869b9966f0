"""
Static ORM descriptors for the three benchmarked tables.

The tables are expected to exist and be populated already (see
`db/init.sql`). References between them are declared on the ORM side only:
the database does not enforce them, so both relationships are view-only and
use `foreign()` annotations instead of `ForeignKey` constraints.
"""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import CHAR, Date, Numeric, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Declarative base shared by the benchmark tables."""


class Company(Base):
    __tablename__ = "company"

    company_id: Mapped[str] = mapped_column(CHAR(36), primary_key=True)
    company_name: Mapped[Optional[str]] = mapped_column(String(255))

    def __repr__(self) -> str:
        return f"<Company {self.company_id} {self.company_name!r}>"


class File(Base):
    __tablename__ = "files"

    file_id: Mapped[str] = mapped_column(CHAR(36), primary_key=True)
    file_name: Mapped[Optional[str]] = mapped_column(String(255))
    job_id: Mapped[Optional[str]] = mapped_column(CHAR(36))

    def __repr__(self) -> str:
        return f"<File {self.file_id} {self.file_name!r}>"


class Job(Base):
    __tablename__ = "jobs"

    uuid: Mapped[str] = mapped_column(CHAR(36), primary_key=True)
    job_title: Mapped[Optional[str]] = mapped_column(String(255))
    company_id: Mapped[Optional[str]] = mapped_column(CHAR(36))
    location: Mapped[Optional[str]] = mapped_column(String(255))
    salary: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2))
    posted_date: Mapped[Optional[date]] = mapped_column(Date)

    company: Mapped[Optional[Company]] = relationship(
        Company,
        primaryjoin="foreign(Job.company_id) == Company.company_id",
        viewonly=True,
    )
    files: Mapped[List[File]] = relationship(
        File,
        primaryjoin="Job.uuid == foreign(File.job_id)",
        order_by=File.file_id,
        viewonly=True,
    )

    def __repr__(self) -> str:
        return f"<Job {self.uuid} {self.job_title!r}>"


__all__ = ["Base", "Company", "File", "Job"]
