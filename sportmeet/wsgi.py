"""WSGI entrypoint used by Gunicorn."""
import atexit
import os

from sportmeet.app import create_app, shutdown_store

config_name = os.environ.get('FLASK_ENV', 'production')
app = create_app(config_name)
atexit.register(shutdown_store, app)
