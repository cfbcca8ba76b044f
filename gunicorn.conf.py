"""Gunicorn config for production deployment."""
import os

# Bind to the platform's PORT or default 3300
bind = f"0.0.0.0:{os.environ.get('PORT', '3300')}"

# Uvicorn async workers — each loads its own copy of the parts file.
# Reloads (POST /reload) only refresh the worker that handled the request,
# so keep a single worker unless reloads are driven by a restart instead.
worker_class = "uvicorn.workers.UvicornWorker"
workers = int(os.environ.get("WEB_CONCURRENCY", "1"))

# Timeout: startup load of a large export runs before the worker is ready
timeout = 120

# Graceful timeout for shutdown
graceful_timeout = 30

# Keep-alive — must exceed the proxy keep-alive (commonly 60s)
keepalive = 65

# Logging
accesslog = "-"
errorlog = "-"
loglevel = "info"
