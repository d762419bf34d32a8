from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.orm import column_property

from search_repo.extensions import db
from search_repo.models.mixins import SearchableMixin


class Company(SearchableMixin, db.Model):
    __tablename__ = "companies"

    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(50), unique=True, nullable=False)
    name = db.Column(db.String(255), nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)


# Department, per company
class Department(SearchableMixin, db.Model):
    __tablename__ = "departments"
    __searchable__ = ("name", "company.name")

    id = db.Column(db.Integer, primary_key=True)
    company_id = db.Column(
        db.Integer,
        db.ForeignKey("companies.id", ondelete="RESTRICT"),
        nullable=False,
    )
    name = db.Column(db.String(120), nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.UniqueConstraint("company_id", "name", name="uq_department_company_name"),
    )

    company = db.relationship(
        "Company", backref=db.backref("departments", lazy="dynamic")
    )


class Employee(SearchableMixin, db.Model):
    __tablename__ = "employees"
    __searchable__ = ("code", "first_name", "last_name", "email", "department.name")

    id = db.Column(db.Integer, primary_key=True)
    company_id    = db.Column(db.Integer, db.ForeignKey("companies.id", ondelete="RESTRICT"), nullable=False)
    department_id = db.Column(db.Integer, db.ForeignKey("departments.id", ondelete="RESTRICT"), nullable=True)

    code  = db.Column(db.String(32), nullable=False)    # unique per company
    email = db.Column(db.String(255), unique=True, nullable=False)
    first_name = db.Column(db.String(80), nullable=False)
    last_name  = db.Column(db.String(80), nullable=True)

    # monthly, company currency
    base_pay  = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    allowance = db.Column(db.Numeric(12, 2), nullable=False, default=0)

    status = db.Column(db.String(16), default="active", nullable=False)  # active/inactive
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint("company_id", "code", name="uq_employee_company_code"),
        db.Index("ix_emp_company_id", "company_id"),
        db.Index("ix_emp_dept_id", "department_id"),
    )

    company    = db.relationship("Company")
    department = db.relationship(
        "Department", backref=db.backref("employees", lazy="dynamic")
    )


# one correlated COUNT in the SELECT; sortable like any column
Department.employee_count = column_property(
    select(func.count(Employee.id))
    .where(Employee.department_id == Department.id)
    .correlate_except(Employee)
    .scalar_subquery()
)
