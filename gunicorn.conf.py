# gunicorn.conf.py
# gunicorn -c gunicorn.conf.py travelkitchen.app:app
import multiprocessing as mp
import os

# Bind to address and port
bind = os.getenv("BIND", "0.0.0.0:8076")

# Worker class - using Uvicorn worker for ASGI apps
worker_class = "uvicorn.workers.UvicornWorker"

# Number of worker processes
workers = int(os.getenv("WEB_CONCURRENCY", mp.cpu_count() * 2 + 1))

# Model calls can take a while; the chat endpoint streams
timeout = int(os.getenv("TIMEOUT", "120"))
graceful_timeout = int(os.getenv("GRACEFUL_TIMEOUT", "30"))
keepalive = int(os.getenv("KEEPALIVE", "5"))

# Each worker opens its own MongoClient after fork
preload_app = False

# Limit maximum requests per worker to mitigate memory leaks
max_requests = int(os.getenv("MAX_REQUESTS", "1000"))
max_requests_jitter = int(os.getenv("MAX_REQUESTS_JITTER", "100"))

forwarded_allow_ips = os.getenv("FORWARDED_ALLOW_IPS", "127.0.0.1")

# Logs
accesslog = "-" if os.getenv("ACCESS_LOG", "1") == "1" else None
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
capture_output = True
