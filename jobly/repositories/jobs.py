"""
Jobs Repository.

Responsibilities:
- CRUD operations for the jobs table.
- Filtering jobs by title, minimum salary and equity.
- Translating missing rows into NotFoundError / BadRequestError.

Non-Responsibilities:
- No HTTP concerns.
- No company CRUD.
- No transactions; each statement commits on its own.

Invariant:
Only values are bound as parameters, column names come from the fixed
mappings below. Every payload is validated before it reaches a builder.
"""

from typing import Any, Dict, List, Optional

from ..errors import BadRequestError, NotFoundError
from ..logger import get_logger
from ..schema import (
    require_valid,
    validate_job_filter,
    validate_job_new,
    validate_job_update,
)
from ..sql import Comparison, FilterColumn, build_filter_clause, build_update_clause

JOB_COLUMNS = "id, title, salary, equity, company_handle"

UPDATE_COLUMNS = {
    "title": "title",
    "salary": "salary",
    "equity": "equity",
}

FILTER_COLUMNS = {
    "title": FilterColumn("j.title", Comparison.SUBSTRING),
    "min_salary": FilterColumn("j.salary", Comparison.THRESHOLD),
    "has_equity": FilterColumn("j.equity", Comparison.THRESHOLD),
}

LIST_SQL = """SELECT j.id,
                     j.title,
                     j.salary,
                     j.equity,
                     j.company_handle,
                     c.name AS company_name
              FROM jobs AS j
              LEFT JOIN companies AS c ON c.handle = j.company_handle"""


def normalize_filters(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Turn a validated filter request into builder input.

    has_equity=True becomes the threshold 0 (equity > 0); has_equity=False
    places no constraint and is dropped. Returns a new dict.
    """
    normalized = {}
    for field, value in data.items():
        if field == "has_equity":
            if value:
                normalized[field] = 0
            continue
        normalized[field] = value
    return normalized


class JobRepository:
    """Data access for jobs, run through a Database-like query primitive."""

    def __init__(self, db):
        self.db = db

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a job from data and return it.

        data should be { title, salary, equity, company_handle }

        Returns { id, title, salary, equity, company_handle }

        Raises BadRequestError if data is invalid or company_handle is not
        in the database.
        """
        require_valid(validate_job_new(data))
        company_handle = data["company_handle"]

        company_check = self.db.query(
            """SELECT handle
               FROM companies
               WHERE handle = $1""",
            [company_handle],
        )
        if len(company_check.rows) == 0:
            raise BadRequestError(f"Company not found: {company_handle}")

        result = self.db.query(
            f"""INSERT INTO jobs (title, salary, equity, company_handle)
                VALUES ($1, $2, $3, $4)
                RETURNING {JOB_COLUMNS}""",
            [
                data["title"],
                data.get("salary"),
                data.get("equity"),
                company_handle,
            ],
        )
        job = result.rows[0]

        logger = get_logger()
        logger.record_mutation("create")
        logger.info("Job created", id=job["id"], company_handle=company_handle)
        return job

    def find_all(self, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        Find all jobs, each with its company's name.

        With filters, delegates to filter_by.

        Returns [{ id, title, salary, equity, company_handle, company_name }, ...]
        """
        if filters:
            return self.filter_by(filters)

        result = self.db.query(f"{LIST_SQL}\n ORDER BY j.title, j.id")
        return result.rows

    def get(self, id: int) -> Dict[str, Any]:
        """
        Given a job id, return data about the job.

        Returns { id, title, salary, equity, company }
          where company is { handle, name, description, num_employees, logo_url }

        Raises NotFoundError if not found.
        """
        job_res = self.db.query(
            f"""SELECT {JOB_COLUMNS}
                FROM jobs
                WHERE id = $1""",
            [id],
        )
        if not job_res.rows:
            raise NotFoundError(f"No job: {id}")
        job = dict(job_res.rows[0])

        company_res = self.db.query(
            """SELECT handle,
                      name,
                      description,
                      num_employees,
                      logo_url
               FROM companies
               WHERE handle = $1""",
            [job.pop("company_handle")],
        )
        job["company"] = company_res.rows[0] if company_res.rows else None
        return job

    def filter_by(self, data: Dict[str, Any]) -> List[Dict[str, Any]]:
        """
        Filter jobs by data.

        Only provided fields constrain the result. Data can include:
          { title, min_salary, has_equity }

        title is a case-sensitive substring match, min_salary keeps jobs
        paying more than it, has_equity=True keeps jobs with equity above 0.

        Returns [{ id, title, salary, equity, company_handle, company_name }, ...]

        Raises BadRequestError if data is empty or has unknown fields.
        """
        require_valid(validate_job_filter(data))

        filters = normalize_filters(data)
        if not filters:
            return self.find_all()

        fragment = build_filter_clause(filters, FILTER_COLUMNS)
        result = self.db.query(
            f"{LIST_SQL}\n WHERE {fragment.clause}\n ORDER BY j.title, j.id",
            fragment.values,
        )
        return result.rows

    def update(self, id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Update job data with data.

        This is a "partial update": only the provided fields change.
        Data can include: { title, salary, equity }

        Returns { id, title, salary, equity, company_handle }

        Raises NotFoundError if not found.
        """
        require_valid(validate_job_update(data))

        fragment = build_update_clause(data, UPDATE_COLUMNS)
        id_idx = f"${len(fragment.values) + 1}"

        result = self.db.query(
            f"""UPDATE jobs
                SET {fragment.clause}
                WHERE id = {id_idx}
                RETURNING {JOB_COLUMNS}""",
            [*fragment.values, id],
        )
        if not result.rows:
            raise NotFoundError(f"No job: {id}")
        job = result.rows[0]

        logger = get_logger()
        logger.record_mutation("update")
        logger.info("Job updated", id=id, fields=list(data))
        return job

    def remove(self, id: int) -> None:
        """
        Delete given job from database; returns None.

        Raises NotFoundError if not found.
        """
        result = self.db.query(
            """DELETE
               FROM jobs
               WHERE id = $1
               RETURNING id""",
            [id],
        )
        if not result.rows:
            raise NotFoundError(f"No job: {id}")

        logger = get_logger()
        logger.record_mutation("remove")
        logger.info("Job removed", id=id)
