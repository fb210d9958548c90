# Usage: gunicorn taskcal.main:app -c gunicorn_conf.py
import multiprocessing
import os

bind = os.getenv("BIND", "0.0.0.0:8000")
workers = int(os.getenv("WEB_CONCURRENCY", multiprocessing.cpu_count() * 2 + 1))
worker_class = "uvicorn.workers.UvicornWorker"

# Application logs go through taskcal.logging_setup; gunicorn keeps its access log on stdout
accesslog = "-"
