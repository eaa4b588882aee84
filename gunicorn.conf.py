"""
Gunicorn configuration for the Habitline API.

Every setting can be overridden from the environment:
  PORT               — TCP port to bind (default: 8000)
  WORKERS            — worker processes (default: 2)
  WORKER_TIMEOUT     — seconds before a silent worker is killed (default: 60)
  LOG_LEVEL          — shared with the application loggers (default: info)

Run with:  gunicorn -c gunicorn.conf.py app.main:app
"""
import os


def _int_env(name: str, default: int) -> int:
    return int(os.environ.get(name, str(default)))


bind = f"0.0.0.0:{_int_env('PORT', 8000)}"

# A save is one short transaction; a small pool of sync-free ASGI workers is enough.
workers = _int_env("WORKERS", 2)
worker_class = "uvicorn.workers.UvicornWorker"

# Long cascades touch at most a few thousand rows.
timeout = _int_env("WORKER_TIMEOUT", 60)
graceful_timeout = 30
keepalive = 5

loglevel = os.environ.get("LOG_LEVEL", "info").lower()
accesslog = "-"
errorlog = "-"
access_log_format = '%(h)s "%(r)s" %(s)s %(b)sB %(M)sms'


def on_starting(server):
    server.log.info("Starting Habitline API with %d worker(s) on %s", workers, bind)
