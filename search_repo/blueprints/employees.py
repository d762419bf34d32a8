# search_repo/blueprints/employees.py
from __future__ import annotations

from flask import Blueprint, request

from search_repo.common.http import ok, fail
from search_repo.common.rows import row_to_dict
from search_repo.common.search_repo import SearchRepo
from search_repo.models.directory import Employee

bp = Blueprint("employees", __name__, url_prefix="/api/v1/employees")

SORTABLE = ["code", "first_name", "last_name", "email", "base_pay", "created_at"]


def _full_name(row):
    return " ".join(p for p in (row.first_name, row.last_name) if p)


def _gross_pay(row):
    return float((row.base_pay or 0) + (row.allowance or 0))


def _filtered():
    """Base query with the plain (non-search) filters applied, or an error response."""
    qry = Employee.query

    company_id = request.args.get("company_id")
    if company_id:
        try:
            qry = qry.filter(Employee.company_id == int(company_id))
        except ValueError:
            return None, fail("company_id must be integer", 422)

    status = (request.args.get("status") or "").strip().lower()
    if status:
        if status not in ("active", "inactive"):
            return None, fail("status must be active/inactive", 422)
        qry = qry.filter(Employee.status == status)

    return qry, None


@bp.get("")
def list_employees():
    qry, err = _filtered()
    if err:
        return err

    page = (
        SearchRepo.of(qry, sortable=SORTABLE)
        .add_column("full_name", _full_name)
        .add_column("gross_pay", _gross_pay)
        .paginate()
    )
    return ok(page)


@bp.get("/all")
def list_all_employees():
    qry, err = _filtered()
    if err:
        return err

    result = SearchRepo.of(qry, sortable=SORTABLE).get()
    return ok({
        "data": [row_to_dict(e) for e in result["data"]],
        "sortable": result["sortable"],
    })
