import os
import click
from flask import Flask
from flask_cors import CORS

from search_repo.extensions import db, migrate, init_db
from search_repo.common.errors import register_error_handlers
from search_repo.models import load_all


def _env_int(name: str, default=None):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


def create_app(config_object: str | None = None):
    app = Flask(__name__)

    # Basic inline config (defaults)
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    app.config["SEARCH_ON_UNKNOWN_SORT"] = os.getenv("SEARCH_ON_UNKNOWN_SORT", "ignore").strip().lower()
    app.config["SEARCH_DEFAULT_PER_PAGE"] = _env_int("SEARCH_DEFAULT_PER_PAGE", 10)
    app.config["SEARCH_MAX_PER_PAGE"] = _env_int("SEARCH_MAX_PER_PAGE")

    # Try loading external config, but don't crash if missing
    if config_object:
        try:
            app.config.from_object(config_object)
        except Exception as e:
            # Just log and continue with defaults
            app.logger.warning("Could not import config object %r: %s", config_object, e)

    # CORS (dev)
    CORS(app, resources={r"/api/*": {"origins": "*"}})

    # Extensions
    init_db(app)
    register_error_handlers(app)
    migrate.init_app(app, db)

    # Ensure models are loaded so metadata is complete
    with app.app_context():
        load_all()

    # Blueprints
    from search_repo.blueprints.employees import bp as employees_bp
    from search_repo.blueprints.departments import bp as departments_bp

    app.register_blueprint(employees_bp)
    app.register_blueprint(departments_bp)

    # ----------------- CLI COMMANDS -----------------

    @app.cli.command("seed-demo")
    def seed_demo():
        """Seed a demo company with departments and employees."""
        from search_repo.models.directory import Company, Department, Employee

        c = Company.query.filter_by(code="DEMO").first()
        if not c:
            c = Company(code="DEMO", name="Demo Co")
            db.session.add(c)
            db.session.commit()

        depts = {}
        for nm in ("Engineering", "HR", "Finance"):
            d = c.departments.filter_by(name=nm).first()
            if not d:
                d = Department(company_id=c.id, name=nm)
                db.session.add(d)
            depts[nm] = d
        db.session.commit()

        created = 0
        for i, (first, last, dept) in enumerate((
            ("Asha", "Patil", "Engineering"),
            ("Rohan", "Mehta", "Engineering"),
            ("Neha", "Kulkarni", "HR"),
            ("Vikram", "Rao", "Finance"),
            ("Sara", None, "Finance"),
        ), start=1):
            code = f"EMP-{i:03d}"
            if Employee.query.filter_by(company_id=c.id, code=code).first():
                continue
            db.session.add(Employee(
                company_id=c.id,
                department_id=depts[dept].id,
                code=code,
                email=f"{first.lower()}@demo.local",
                first_name=first,
                last_name=last,
                base_pay=30000 + 5000 * i,
                allowance=2500,
            ))
            created += 1
        db.session.commit()

        click.echo(f"Seeded/ensured: company DEMO; {len(depts)} departments; {created} new employees")

    return app
