"""
Production Server Configuration

Runs the dashboard API with Uvicorn workers under Gunicorn:

    gunicorn mfg_dashboard.main:app -c gunicorn.conf.py

With more than one worker, set PROMETHEUS_MULTIPROC_DIR to an empty,
writable directory so /metrics aggregates every worker.
"""

import multiprocessing
import os

from prometheus_client import multiprocess

bind = os.getenv("BIND", f"{os.getenv('API_HOST', '0.0.0.0')}:{os.getenv('API_PORT', '8000')}")
backlog = 2048

workers = int(os.getenv("API_WORKERS", multiprocessing.cpu_count() * 2 + 1))
worker_class = "uvicorn.workers.UvicornWorker"
worker_connections = 1000
max_requests = 10000
max_requests_jitter = 1000
# a full dashboard request runs every metric query
timeout = 120
keepalive = 5
graceful_timeout = 30

proc_name = "mfg-dashboard-api"
daemon = False
pidfile = "/tmp/mfg-dashboard.pid"

# RequestLoggingMiddleware writes the access log
accesslog = None
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()


def when_ready(server):
    server.log.info("Manufacturing Dashboard API listening on %s with %s workers", bind, workers)


def child_exit(server, worker):
    """Drop the exited worker's live metrics from the shared directory"""
    if os.getenv("PROMETHEUS_MULTIPROC_DIR"):
        multiprocess.mark_process_dead(worker.pid)


def worker_abort(worker):
    """Worker killed after `timeout`, usually by a stuck database query"""
    worker.log.warning("Worker %s aborted", worker.pid)
