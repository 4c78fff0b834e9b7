"""包文件下载 Blueprint

改写后的 URL 保留上游路径，镜像服务按同样的路径从 package_dir 提供文件。
"""

from __future__ import annotations

from pathlib import Path

from flask import Blueprint, Response, send_from_directory

packages_bp = Blueprint("packages", __name__)


@packages_bp.route("/<path:url_path>", methods=["GET", "HEAD"])
def package_file(url_path: str) -> Response:
    from pkgmirror.services.container import get_container
    package_dir = Path(get_container().config.package_dir).resolve()
    # send_from_directory 拒绝越出 package_dir 的路径并返回 404
    return send_from_directory(package_dir, url_path, as_attachment=True)
