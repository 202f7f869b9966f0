"""
Data generation and loading script for the relational fetch benchmark.

Implements deterministic pseudo-random generation of companies, jobs and
files, CSV emission, and Postgres COPY loading for maximum throughput.
Some jobs get no files and some reference a company that does not exist,
so every strategy's edge cases show up in a seeded database.
"""

from __future__ import annotations

import csv
import random
import sys
import tempfile
import time
import uuid
from datetime import date, timedelta
from pathlib import Path
from typing import Dict

import psycopg
import typer

from relbench.infrastructure.db_factory import build_dsn

app = typer.Typer(help="Generate synthetic jobs data and load into Postgres (CSV + COPY).")

TABLE_COLUMNS: Dict[str, list[str]] = {
    "company": ["company_id", "company_name"],
    "jobs": ["uuid", "job_title", "company_id", "location", "salary", "posted_date"],
    "files": ["file_id", "file_name", "job_id"],
}

_TITLES = ["Engineer", "Data Analyst", "Product Manager", "Designer", "SRE", "Recruiter"]
_LOCATIONS = ["Berlin", "Lisbon", "New York", "Remote", "Sao Paulo", "Toronto"]
_NAME_PARTS = ["Acme", "Globex", "Initech", "Umbrella", "Hooli", "Vandelay", "Stark"]
_EXTENSIONS = ["pdf", "docx", "png", "txt"]


def _build_dsn(dsn_override: str | None) -> str:
    if dsn_override:
        return dsn_override
    return build_dsn(driver=None)


def _uuid(rng: random.Random) -> str:
    return str(uuid.UUID(int=rng.getrandbits(128), version=4))


def _generate_dataset_csv(
    out_dir: Path,
    companies: int,
    jobs: int,
    max_files_per_job: int,
    seed: int,
    orphan_ratio: float = 0.05,
) -> Dict[str, Path]:
    """
    Write company, jobs and files CSVs into `out_dir`.

    Returns a mapping of table name to CSV path. A file count of zero is as
    likely as any other, and roughly `orphan_ratio` of the jobs point at a
    company id that is not generated.
    """
    rng = random.Random(seed)
    out_dir.mkdir(parents=True, exist_ok=True)
    paths = {table: out_dir / f"{table}.csv" for table in TABLE_COLUMNS}

    company_ids = [_uuid(rng) for _ in range(companies)]
    with paths["company"].open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(TABLE_COLUMNS["company"])
        for i, company_id in enumerate(company_ids):
            writer.writerow([company_id, f"{rng.choice(_NAME_PARTS)} {i}"])

    first_posted = date(2024, 1, 1)
    with paths["jobs"].open("w", newline="", encoding="utf-8") as jobs_f, paths["files"].open(
        "w", newline="", encoding="utf-8"
    ) as files_f:
        jobs_writer = csv.writer(jobs_f)
        files_writer = csv.writer(files_f)
        jobs_writer.writerow(TABLE_COLUMNS["jobs"])
        files_writer.writerow(TABLE_COLUMNS["files"])

        for _ in range(jobs):
            job_id = _uuid(rng)
            if not company_ids or rng.random() < orphan_ratio:
                company_id = _uuid(rng)
            else:
                company_id = rng.choice(company_ids)
            salary = round(rng.uniform(30_000, 250_000), 2)
            posted = first_posted + timedelta(days=rng.randint(0, 365))
            jobs_writer.writerow(
                [
                    job_id,
                    rng.choice(_TITLES),
                    company_id,
                    rng.choice(_LOCATIONS),
                    f"{salary:.2f}",
                    posted.isoformat(),
                ]
            )
            for n in range(rng.randint(0, max_files_per_job)):
                files_writer.writerow(
                    [_uuid(rng), f"attachment-{n}.{rng.choice(_EXTENSIONS)}", job_id]
                )

    return paths


def _copy_into_db(dsn: str, csv_paths: Dict[str, Path], truncate: bool = False) -> None:
    with psycopg.connect(dsn) as conn:
        with conn.cursor() as cur:
            if truncate:
                cur.execute("TRUNCATE TABLE files, jobs, company;")
            for table, columns in TABLE_COLUMNS.items():
                with cur.copy(
                    f"COPY {table} ({', '.join(columns)}) FROM STDIN WITH (FORMAT csv, HEADER TRUE)"
                ) as copy:
                    with csv_paths[table].open("r", encoding="utf-8") as f:
                        for line in f:
                            copy.write(line)
        conn.commit()


@app.command()
def main(
    companies: int = typer.Option(100, "--companies", "-c", help="Number of companies."),
    jobs: int = typer.Option(1_000, "--jobs", "-j", help="Number of jobs."),
    max_files: int = typer.Option(
        3, "--max-files", "-f", help="Maximum files attached to a single job."
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Optional CSV output directory (if omitted, a temp dir will be used).",
    ),
    dsn: str | None = typer.Option(
        None,
        "--dsn",
        help="Optional DSN override for Postgres.",
    ),
    truncate: bool = typer.Option(
        False,
        "--truncate",
        help="Empty the three tables before loading.",
    ),
    no_load: bool = typer.Option(
        False,
        "--no-load",
        help="Only generate CSV; skip loading into Postgres.",
    ),
) -> None:
    """
    Generate synthetic jobs data and optionally load it into Postgres using COPY.
    """
    start = time.perf_counter()
    out_dir = output or Path(tempfile.mkdtemp(prefix="relbench_csv_"))

    typer.echo(
        f"Generating {companies:,} companies, {jobs:,} jobs (<= {max_files} files each) "
        f"-> {out_dir} (seed={seed})"
    )
    csv_paths = _generate_dataset_csv(
        out_dir, companies=companies, jobs=jobs, max_files_per_job=max_files, seed=seed
    )
    typer.echo(f"CSV generation completed in {time.perf_counter() - start:.2f}s")

    if no_load:
        typer.echo("Skipping load (no-load flag set).")
        return

    load_start = time.perf_counter()
    typer.echo("Loading CSV into Postgres via COPY...")
    _copy_into_db(_build_dsn(dsn), csv_paths, truncate=truncate)
    typer.echo(
        f"Load completed in {time.perf_counter() - load_start:.2f}s. "
        f"Total time {time.perf_counter() - start:.2f}s."
    )


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
