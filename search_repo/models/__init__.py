# search_repo/models/__init__.py


def load_all():
    """Import the model modules so their tables are on db.metadata before create_all / migrate."""
    from search_repo.models import directory  # noqa: F401
