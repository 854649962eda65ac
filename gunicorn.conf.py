"""Gunicorn config for container deployment."""
import os

# Bind to the platform's PORT or default 8000
bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

# Uvicorn async workers; each opens its own Supabase client and change channel
# and keeps its own organization snapshot. Tune via WEB_CONCURRENCY env var.
worker_class = "uvicorn.workers.UvicornWorker"
workers = int(os.environ.get("WEB_CONCURRENCY", "2"))

# Timeout: the initial load fetches every company row with seven joins
timeout = 120

# Graceful timeout for shutdown (channels unsubscribe during lifespan exit)
graceful_timeout = 30

# Keep-alive must exceed the proxy keep-alive (default 60s)
keepalive = 65

# Logging
accesslog = "-"
errorlog = "-"
loglevel = os.environ.get("INDYGX_LOG_LEVEL", "info").lower()
