"""Gunicorn config: gunicorn -c gunicorn.conf.py fleetboard.main:app"""
import os

# Bind to the platform's PORT or default 8000
bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

# One uvicorn worker: every worker runs its own refresh schedulers, so more
# workers multiply sheet traffic. Tune via WEB_CONCURRENCY env var.
worker_class = "uvicorn.workers.UvicornWorker"
workers = int(os.environ.get("WEB_CONCURRENCY", "1"))

# Sheet fetches run off the event loop; requests themselves are fast
timeout = 60

# Graceful timeout for shutdown (lets an in-flight fetch wind down)
graceful_timeout = 30

# Keep-alive must exceed the proxy keep-alive (default 60s)
keepalive = 65

# Logging
accesslog = "-"
errorlog = "-"
loglevel = os.environ.get("FLEETBOARD_LOG_LEVEL", "info").lower()
