import os

# Bind only to loopback; the upstream router proxies /auth here
bind = os.getenv("GUNICORN_BIND", "127.0.0.1:8888")

# The blacklist lives in process memory: more than one worker would mean
# several independent blacklists. Concurrency comes from the worker's threadpool.
workers = 1

# Uvicorn worker for ASGI/FastAPI
worker_class = "uvicorn.workers.UvicornWorker"

# /blacklist/init waits on a remote source; keep above REMOTE_TIMEOUT
timeout = int(os.getenv("GUNICORN_TIMEOUT", "60"))
keepalive = int(os.getenv("GUNICORN_KEEPALIVE", "5"))

# Logging to stdout/stderr; systemd/journalctl will capture
loglevel = os.getenv("GUNICORN_LOGLEVEL", "info")
accesslog = "-"
errorlog = "-"

# Graceful behavior
graceful_timeout = int(os.getenv("GUNICORN_GRACEFUL_TIMEOUT", "30"))

# Set forwarded-allow-ips if behind reverse proxy (nginx)
forwarded_allow_ips = "*"
