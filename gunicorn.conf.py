# gunicorn.conf.py
import multiprocessing, os

bind = f"0.0.0.0:{os.getenv('PORT','5000')}"
workers = int(os.getenv("XIU_WORKERS", max(2, multiprocessing.cpu_count() // 2)))
threads = int(os.getenv("XIU_THREADS", "2"))  # chart math is short; mansion tables are cached per worker
worker_class = "gthread"
timeout = 30
graceful_timeout = 15
keepalive = 2
accesslog = "-"   # stdout
errorlog = "-"    # stderr
loglevel = os.getenv("XIU_LOG_LEVEL", "info").lower()

access_log_format = (
    '%(h)s - "%(r)s" %(s)s %(b)s "%(a)s" '
    'req_id:%({X-Request-ID}i)s rt:%(L)s'
)
