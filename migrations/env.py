# migrations/env.py
"""
Alembic environment for `flask db ...`.

Flask-Migrate runs this inside the app context it was registered on; a bare
`alembic` invocation gets a fresh app from create_app().
"""
from __future__ import annotations

import logging
from contextlib import nullcontext
from logging.config import fileConfig

from alembic import context
from flask import current_app, has_app_context

config = context.config

if config.config_file_name is not None:
    try:
        fileConfig(config.config_file_name, disable_existing_loggers=False)
    except KeyError:
        # alembic.ini without [loggers]/[handlers]
        pass

log = logging.getLogger("alembic.env")


def _flask_app():
    if has_app_context():
        return current_app._get_current_object(), nullcontext()
    from search_repo import create_app

    app = create_app()
    return app, app.app_context()


flask_app, app_ctx = _flask_app()


def _configure(**kw) -> None:
    db = flask_app.extensions["migrate"].db
    url = flask_app.config["SQLALCHEMY_DATABASE_URI"]
    context.configure(
        target_metadata=db.metadata,
        compare_type=True,
        # SQLite cannot ALTER most constraints in place
        render_as_batch=url.startswith("sqlite"),
        **kw,
    )


def run_migrations_offline() -> None:
    url = flask_app.config["SQLALCHEMY_DATABASE_URI"]
    log.info("Emitting SQL for %s", url.split("@")[-1])
    _configure(url=url, literal_binds=True)
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = flask_app.extensions["migrate"].db.engine
    with engine.connect() as connection:
        _configure(connection=connection)
        with context.begin_transaction():
            context.run_migrations()


with app_ctx:
    if context.is_offline_mode():
        run_migrations_offline()
    else:
        run_migrations_online()
