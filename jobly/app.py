import argparse
from typing import Any, Dict, List, Optional

from . import __version__
from .config import load_env
from .database import Company, Database, Job, get_session, init_database
from .errors import BadRequestError, NotFoundError
from .repositories import JobRepository

SAMPLE_COMPANIES = [
    {"handle": "c1", "name": "C1", "num_employees": 1, "description": "Desc1", "logo_url": "http://c1.img"},
    {"handle": "c2", "name": "C2", "num_employees": 2, "description": "Desc2", "logo_url": "http://c2.img"},
    {"handle": "c3", "name": "C3", "num_employees": 3, "description": "Desc3", "logo_url": "http://c3.img"},
]

SAMPLE_JOBS = [
    {"title": "Job1", "salary": 100, "equity": 0.1, "company_handle": "c1"},
    {"title": "Job2", "salary": 200, "equity": 0.2, "company_handle": "c1"},
    {"title": "Job3", "salary": 300, "equity": 0, "company_handle": "c1"},
    {"title": "Job4", "salary": None, "equity": None, "company_handle": "c1"},
]


def seed_sample_data(target=None) -> int:
    """Insert the sample companies and jobs; returns the number of jobs added."""
    session = get_session(target)
    try:
        session.add_all(Company(**c) for c in SAMPLE_COMPANIES)
        session.flush()
        session.add_all(Job(**j) for j in SAMPLE_JOBS)
        session.commit()
    finally:
        session.close()
    return len(SAMPLE_JOBS)


def _print_job(job: Dict[str, Any]) -> None:
    print(f"ID: {job['id']}")
    print(f"  Title: {job['title']}")
    print(f"  Salary: {job['salary']}")
    print(f"  Equity: {job['equity']}")
    if "company" in job:
        company = job["company"] or {}
        print(f"  Company: {company.get('name')} ({company.get('handle')})")
    else:
        print(f"  Company: {job.get('company_name') or job['company_handle']}")
    print()


def _fields(args: argparse.Namespace, names: List[str]) -> Dict[str, Any]:
    return {n: getattr(args, n) for n in names if getattr(args, n) is not None}


def cmd_init_db(args: argparse.Namespace) -> None:
    init_database(args.db)
    print("Tables created.")
    if args.seed:
        count = seed_sample_data(args.db)
        print(f"Seeded {len(SAMPLE_COMPANIES)} companies and {count} jobs.")


def cmd_create(args: argparse.Namespace) -> None:
    job = args.repo.create(_fields(args, ["title", "salary", "equity", "company_handle"]))
    _print_job(job)


def cmd_list(args: argparse.Namespace) -> None:
    filters = _fields(args, ["title", "min_salary"])
    if args.has_equity:
        filters["has_equity"] = True
    jobs = args.repo.find_all(filters or None)
    if not jobs:
        print("No jobs found.")
        return
    print(f"Found {len(jobs)} jobs:\n")
    for job in jobs:
        _print_job(job)


def cmd_get(args: argparse.Namespace) -> None:
    _print_job(args.repo.get(args.id))


def cmd_update(args: argparse.Namespace) -> None:
    job = args.repo.update(args.id, _fields(args, ["title", "salary", "equity"]))
    _print_job(job)


def cmd_remove(args: argparse.Namespace) -> None:
    args.repo.remove(args.id)
    print(f"Deleted job {args.id}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="jobly", description="Jobly jobs store CLI")
    parser.add_argument("--version", action="store_true", help="Show version")
    parser.add_argument("--db", help="Database URL or SQLite path (default: JOBLY_DATABASE_URL)")

    subparsers = parser.add_subparsers(dest="command")
    ini = subparsers.add_parser("init-db", help="Create the companies and jobs tables")
    ini.add_argument("--seed", action="store_true", help="Insert sample companies and jobs")
    ini.set_defaults(func=cmd_init_db, needs_repo=False)

    crt = subparsers.add_parser("create", help="Create a job")
    crt.add_argument("--title", required=True)
    crt.add_argument("--company-handle", dest="company_handle", required=True)
    crt.add_argument("--salary", type=int)
    crt.add_argument("--equity", type=float)
    crt.set_defaults(func=cmd_create, needs_repo=True)

    lst = subparsers.add_parser("list", help="List jobs, optionally filtered")
    lst.add_argument("--title", help="Case-sensitive substring of the title")
    lst.add_argument("--min-salary", dest="min_salary", type=int, help="Only jobs paying more than this")
    lst.add_argument("--has-equity", dest="has_equity", action="store_true", help="Only jobs with equity above 0")
    lst.set_defaults(func=cmd_list, needs_repo=True)

    get = subparsers.add_parser("get", help="Show one job with its company")
    get.add_argument("id", type=int)
    get.set_defaults(func=cmd_get, needs_repo=True)

    upd = subparsers.add_parser("update", help="Change title, salary or equity of a job")
    upd.add_argument("id", type=int)
    upd.add_argument("--title")
    upd.add_argument("--salary", type=int)
    upd.add_argument("--equity", type=float)
    upd.set_defaults(func=cmd_update, needs_repo=True)

    rem = subparsers.add_parser("remove", help="Delete a job")
    rem.add_argument("id", type=int)
    rem.set_defaults(func=cmd_remove, needs_repo=True)

    return parser


def main(argv: Optional[List[str]] = None):
    # Load .env if present (JOBLY_DATABASE_URL, JOBLY_LOG_LEVEL, etc.)
    load_env()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    if not hasattr(args, "func"):
        parser.print_help()
        return

    db = Database(args.db) if args.needs_repo else None
    args.repo = JobRepository(db) if db is not None else None
    try:
        args.func(args)
    except NotFoundError as e:
        raise SystemExit(e.message)
    except BadRequestError as e:
        print("Invalid:")
        print(f" - {e.message}")
        raise SystemExit(2)
    finally:
        if db is not None:
            db.close()


if __name__ == "__main__":
    main()
