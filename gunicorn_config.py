"""Gunicorn configuration for the scheduler extender."""
import sys

from extender.config import load_config

_config = load_config()

# Gunicorn config variables
bind = _config.bind
workers = 2
worker_class = "sync"
# The scheduler gives up on an extender well before this; a stuck request is killed
timeout = 30
graceful_timeout = 10
preload_app = False
loglevel = _config.log_level.lower()


def post_worker_init(worker):
    """Called just after a worker has initialized the application."""
    app = getattr(worker, "wsgi", None)
    if app is None or not hasattr(app, "url_map"):
        print(f"[Worker {worker.pid}] WARNING: Flask app not found", file=sys.stderr, flush=True)
        return
    routes = sorted(r.rule for r in app.url_map.iter_rules() if "POST" in r.methods)
    print(f"[Worker {worker.pid}] serving priority routes: {', '.join(routes)}", file=sys.stderr, flush=True)
