"""镜像服务（基于 Flask）

提供：清单查询、最后更新时间查询、镜像包文件下载。

启动方式: pkgmirror serve --port 8080
生产部署: gunicorn --config deploy/gunicorn.conf.py pkgmirror.web.app:app
"""

from __future__ import annotations

import logging

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from pkgmirror.web.blueprints.manifests_bp import manifests_bp
from pkgmirror.web.blueprints.packages_bp import packages_bp

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.register_blueprint(manifests_bp)
app.register_blueprint(packages_bp)


@app.errorhandler(HTTPException)
def handle_http_exception(exc):  # type: ignore[no-untyped-def]
    """将所有 HTTP 异常统一返回 JSON"""
    return jsonify(error=exc.description), exc.code


@app.errorhandler(Exception)
def handle_generic_exception(exc):  # type: ignore[no-untyped-def]  # noqa: ARG001
    """捕获未处理异常，返回 500 JSON"""
    logger.exception("未处理的异常")
    return jsonify(error="服务器内部错误"), 500


def run_server(host: str = "127.0.0.1", port: int = 8080) -> None:
    logger.info("镜像服务启动: http://%s:%d", host, port)
    app.run(host=host, port=port, debug=False)
