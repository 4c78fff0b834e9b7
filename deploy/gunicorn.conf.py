"""Gunicorn 生产配置

用法:
  PKGMIRROR_CONFIG=configs/default.yml \
  gunicorn --config deploy/gunicorn.conf.py pkgmirror.web.app:app
"""

import os

from pkgmirror.core.config import init_config

# ---------- 配置 ----------
# 各 worker 启动前加载同一份镜像配置
init_config(os.getenv("PKGMIRROR_CONFIG", "configs/default.yml"))

# ---------- 网络 ----------
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8080")

# ---------- 并发 ----------
# 只读服务：清单查询 + 静态包文件
workers = int(os.getenv("GUNICORN_WORKERS", "4"))
threads = int(os.getenv("GUNICORN_THREADS", "4"))
worker_class = "gthread"
# 大包下载可能持续较久
timeout = 600

# ---------- 日志 ----------
accesslog = os.getenv("GUNICORN_ACCESS_LOG", "-")
errorlog = os.getenv("GUNICORN_ERROR_LOG", "-")
loglevel = os.getenv("GUNICORN_LOG_LEVEL", "info")

# ---------- 进程管理 ----------
graceful_timeout = 30
keepalive = 5
