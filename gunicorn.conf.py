"""Gunicorn config for the Marketing Dashboard API."""
import os

wsgi_app = "marketing_dashboard.main:app"

# Bind to the platform's PORT or default 8000
bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

# Uvicorn async workers. Uploaded data lives in process memory, so every
# worker has its own store; keep a single worker unless a shared store is added.
worker_class = "uvicorn.workers.UvicornWorker"
workers = int(os.environ.get("WEB_CONCURRENCY", "1"))

# Timeout: large workbook uploads are parsed synchronously in the request
timeout = 120

# Graceful timeout for shutdown
graceful_timeout = 30

# Keep-alive — must exceed the proxy keep-alive (default 60s)
keepalive = 65

# Logging
accesslog = "-"
errorlog = "-"
loglevel = "info"
