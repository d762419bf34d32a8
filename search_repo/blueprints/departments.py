# search_repo/blueprints/departments.py
from __future__ import annotations

from flask import Blueprint, request
from sqlalchemy.orm import contains_eager

from search_repo.common.http import ok, fail
from search_repo.common.search_repo import SearchRepo
from search_repo.models.directory import Department, Company

bp = Blueprint("departments", __name__, url_prefix="/api/v1/departments")

# "companies.name" resolves through the join below
SORTABLE = ["name", "created_at", "employee_count", "companies.name"]


@bp.get("")
def list_departments():
    qry = (
        Department.query
        .join(Company, Department.company_id == Company.id)
        .options(contains_eager(Department.company))
    )

    is_active = request.args.get("is_active")
    if is_active is not None:
        v = (is_active or "").lower()
        if v in ("true", "1", "yes"):
            qry = qry.filter(Department.is_active.is_(True))
        elif v in ("false", "0", "no"):
            qry = qry.filter(Department.is_active.is_(False))
        else:
            return fail("is_active must be true/false", 422)

    page = (
        SearchRepo.of(qry, sortable=SORTABLE)
        .add_column("company_name", lambda d: d.company.name if d.company else None)
        .paginate()
    )
    return ok(page)
