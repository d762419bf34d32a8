import os
from decimal import Decimal

import pytest

from search_repo import create_app
from search_repo.extensions import db
from search_repo.models.directory import Company, Department, Employee


@pytest.fixture(scope="function")
def app():
    os.environ["DATABASE_URL"] = "sqlite:///:memory:"
    app = create_app()
    app.config["TESTING"] = True
    with app.app_context():
        db.create_all()
        yield app


@pytest.fixture(scope="function")
def session(app):
    with app.app_context():
        yield db.session


@pytest.fixture
def client(app):
    return app.test_client()


def _emp(company, dept, code, first, last, email, base, allowance, status="active"):
    return Employee(
        company_id=company.id,
        department_id=dept.id if dept else None,
        code=code,
        first_name=first,
        last_name=last,
        email=email,
        base_pay=Decimal(base),
        allowance=Decimal(allowance),
        status=status,
    )


@pytest.fixture
def directory(session):
    """Two companies, three departments, four employees (one without a department)."""
    acme = Company(code="ACME", name="Acme Corp")
    globex = Company(code="GLBX", name="Globex")
    session.add_all([acme, globex]); session.commit()

    eng = Department(company_id=acme.id, name="Engineering")
    sales = Department(company_id=acme.id, name="Sales")
    research = Department(company_id=globex.id, name="Research")
    session.add_all([eng, sales, research]); session.commit()

    alice = _emp(acme, eng, "E001", "Alice", "Smith", "alice@acme.test", 1000, 100)
    bob = _emp(acme, sales, "E002", "Bob", "Jones", "bob@acme.test", 2000, 200)
    carol = _emp(globex, research, "E003", "Carol", None, "carol@globex.test", 1500, 150)
    dave = _emp(globex, None, "E004", "Dave", "Brown", "dave@globex.test", 500, 50, status="inactive")
    session.add_all([alice, bob, carol, dave]); session.commit()

    return {
        "companies": {"acme": acme, "globex": globex},
        "departments": {"eng": eng, "sales": sales, "research": research},
        "employees": {"alice": alice, "bob": bob, "carol": carol, "dave": dave},
    }


@pytest.fixture
def many_employees(session):
    """25 employees in one company: 3 pages at 10 per page."""
    c = Company(code="BULK", name="Bulk Ltd")
    session.add(c); session.commit()
    rows = [
        _emp(c, None, f"B{i:03d}", f"Worker{i:02d}", "Bulk", f"w{i}@bulk.test", 100 * i, 10)
        for i in range(1, 26)
    ]
    session.add_all(rows); session.commit()
    return rows
