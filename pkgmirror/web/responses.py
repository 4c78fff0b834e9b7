"""Web 层统一响应辅助函数"""

from __future__ import annotations

from flask import Response, jsonify

from pkgmirror.core.exceptions import (
    ManifestStructureError,
    MirrorError,
    MissingManifestError,
)

_STATUS_BY_ERROR: tuple[tuple[type[MirrorError], int], ...] = (
    (MissingManifestError, 404),
    (ManifestStructureError, 422),
)


def not_found(resource: str) -> tuple[Response, int]:
    """资源不存在"""
    return jsonify(error=f"{resource}不存在"), 404


def from_error(exc: MirrorError) -> tuple[Response, int]:
    """把业务异常映射为 JSON 错误响应"""
    status = 500
    for err_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, err_type):
            status = code
            break
    return jsonify(error=str(exc), code=exc.code), status
