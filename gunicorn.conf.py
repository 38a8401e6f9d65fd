"""
Gunicorn Configuration

Runs the analytics API with Uvicorn workers. Every request loads the Gold
Layer into memory, so keep the worker count modest on large warehouses.
"""

import multiprocessing
import os

# Server socket
bind = os.getenv("BIND", "0.0.0.0:8000")
backlog = 2048

# Worker processes
workers = int(os.getenv("WORKERS", min(multiprocessing.cpu_count() + 1, 8)))
worker_class = "uvicorn.workers.UvicornWorker"
max_requests = 5000
max_requests_jitter = 500
timeout = 300
keepalive = 5
graceful_timeout = 30

proc_name = "gold-analytics-api"
daemon = False

# Logging
errorlog = "-"
accesslog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
access_log_format = '%(h)s "%(r)s" %(s)s %(b)s %(D)s'


def post_fork(server, worker):
    server.log.info("Worker spawned (pid: %s)", worker.pid)
