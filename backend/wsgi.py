# Overview: WSGI entrypoint; `flask --app wsgi <command>` from the backend directory.

from dukan import create_app

app = create_app()
