"""SQLite implementation of JobLookup."""

import sqlite3
from datetime import datetime
from pathlib import Path

from buildlens.errors import JobNotFound
from buildlens.types import JobRecord

SCHEMA = """
CREATE TABLE IF NOT EXISTS jobs (
    job_name TEXT NOT NULL,
    build_id TEXT NOT NULL,
    status_url TEXT NOT NULL,
    state TEXT NOT NULL DEFAULT 'pending',
    pod_name TEXT,
    started_at TIMESTAMP,
    finished_at TIMESTAMP,
    PRIMARY KEY (job_name, build_id)
);
CREATE INDEX IF NOT EXISTS idx_jobs_started ON jobs(started_at);
"""


class SQLiteJobStore:
    """SQLite-based job metadata store."""

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self._conn: sqlite3.Connection | None = None

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def initialize(self) -> None:
        """Initialize the database schema."""
        self.conn.executescript(SCHEMA)
        self.conn.commit()

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def record_job(self, job: JobRecord) -> None:
        """Insert or replace the record for a job build."""
        self.conn.execute(
            """
            INSERT OR REPLACE INTO jobs (
                job_name, build_id, status_url, state,
                pod_name, started_at, finished_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                job.job_name,
                job.build_id,
                job.status_url,
                job.state,
                job.pod_name,
                job.started_at.isoformat() if job.started_at else None,
                job.finished_at.isoformat() if job.finished_at else None,
            ),
        )
        self.conn.commit()

    def get_job(self, job_name: str, build_id: str) -> JobRecord:
        row = self.conn.execute(
            "SELECT * FROM jobs WHERE job_name = ? AND build_id = ?",
            (job_name, build_id),
        ).fetchone()
        if row is None:
            raise JobNotFound(f"Job not found: {job_name}/{build_id}")
        return self._row_to_job(row)

    def list_jobs(self, job_name: str | None = None, limit: int = 50) -> list[JobRecord]:
        """List jobs, most recently started first."""
        query = "SELECT * FROM jobs"
        params: list = []
        if job_name:
            query += " WHERE job_name = ?"
            params.append(job_name)
        query += " ORDER BY started_at DESC, build_id DESC LIMIT ?"
        params.append(limit)

        rows = self.conn.execute(query, params).fetchall()
        return [self._row_to_job(row) for row in rows]

    def set_job_state(
        self,
        job_name: str,
        build_id: str,
        state: str,
        finished_at: datetime | None = None,
    ) -> None:
        """Update the state of a job build."""
        cursor = self.conn.execute(
            "UPDATE jobs SET state = ?, finished_at = COALESCE(?, finished_at) "
            "WHERE job_name = ? AND build_id = ?",
            (
                state,
                finished_at.isoformat() if finished_at else None,
                job_name,
                build_id,
            ),
        )
        self.conn.commit()
        if cursor.rowcount == 0:
            raise JobNotFound(f"Job not found: {job_name}/{build_id}")

    def _row_to_job(self, row: sqlite3.Row) -> JobRecord:
        return JobRecord(
            job_name=row["job_name"],
            build_id=row["build_id"],
            status_url=row["status_url"],
            state=row["state"],
            pod_name=row["pod_name"],
            started_at=datetime.fromisoformat(row["started_at"]) if row["started_at"] else None,
            finished_at=datetime.fromisoformat(row["finished_at"]) if row["finished_at"] else None,
        )
