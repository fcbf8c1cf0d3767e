"""
Gunicorn configuration for the storefront API.

Env vars that override defaults:
  PORT     — TCP port to bind
  WORKERS  — number of worker processes (default: 2)

Each worker builds its own ErrorLogger and product catalog in the app
lifespan, so catalog writes are not shared between workers.
"""
import os

wsgi_app = "storefront.main:app"

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

workers = int(os.environ.get("WORKERS", "2"))

# Uvicorn's ASGI event loop inside Gunicorn's process manager.
worker_class = "uvicorn.workers.UvicornWorker"

keepalive = 5

# Also bounds a hung error tracking call, together with ERROR_TRACKING_TIMEOUT_SECONDS.
timeout = 60

# Application logs go through structlog on stdout; keep gunicorn's there too.
loglevel = os.environ.get("LOG_LEVEL", "info").lower()
accesslog = "-"
errorlog = "-"
access_log_format = '%(h)s "%(r)s" %(s)s %(b)sB %(D)sµs request_id=%({x-request-id}o)s'

graceful_timeout = 30
