# search_repo/wsgi.py
from search_repo import create_app

app = create_app()
