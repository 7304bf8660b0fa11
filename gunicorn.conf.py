# Gunicorn configuration file for the live status page
# Usage: gunicorn -c gunicorn.conf.py wsgi:app

import os
from logging.handlers import RotatingFileHandler
import logging
from dotenv import load_dotenv

load_dotenv()

# Server socket
bind = f"0.0.0.0:{os.getenv('PORT') or '8080'}"
backlog = 2048

# Load wsgi.py in the master before binding, so missing config exits early
preload_app = True

# Worker processes; a single one, the token cache lives in process memory
workers = 1
worker_class = "sync"
threads = 16
timeout = 30
graceful_timeout = 30
keepalive = 5

# Logging (configurable via .env)
errorlog = "-"   # Log to stderr
loglevel = os.getenv("LOGLEVEL", "warning")  # info, warning, error, critical
access_log_format = '%(h)s %(l)s %(u)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

_accesslog_path = os.getenv("GUNICORN_ACCESSLOG", "-")
accesslog = _accesslog_path

def on_starting(server):
    """Setup rotating file handler for access log"""
    if _accesslog_path and _accesslog_path not in ("-", "None", ""):
        log_dir = os.path.dirname(_accesslog_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        # 10MB max, 5 backups
        handler = RotatingFileHandler(
            _accesslog_path,
            maxBytes=10*1024*1024,
            backupCount=5
        )
        handler.setFormatter(logging.Formatter('%(message)s'))

        # gunicorn already opened a plain FileHandler on the same path
        access_logger = logging.getLogger('gunicorn.access')
        for h in list(access_logger.handlers):
            if isinstance(h, logging.FileHandler):
                access_logger.removeHandler(h)
                h.close()
        access_logger.addHandler(handler)

proc_name = "live-status-page"

# systemd handles daemonization
daemon = False
pidfile = None
