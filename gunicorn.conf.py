"""Gunicorn configuration for the DiveOps engine (gunicorn -c gunicorn.conf.py wsgi:application)."""

import os

bind = os.environ.get('GUNICORN_BIND', '127.0.0.1:8000')

# Per-resource locks live in each process; the conditional writes keep
# separate workers consistent with each other.
workers = int(os.environ.get('GUNICORN_WORKERS', 2))
threads = int(os.environ.get('GUNICORN_THREADS', 4))
worker_class = 'gthread'

# Lock and database waits are bounded well below this
timeout = 30

# stdout/stderr; the app writes its own log file in production
accesslog = '-'
errorlog = '-'
loglevel = 'info'

proc_name = 'diveops'
