"""清单查询 API Blueprint"""

from __future__ import annotations

from flask import Blueprint, Response, jsonify

from pkgmirror.core.exceptions import MirrorError
from pkgmirror.web.responses import from_error, not_found

manifests_bp = Blueprint("manifests", __name__, url_prefix="/api")


def _container():  # type: ignore[no-untyped-def]
    from pkgmirror.services.container import get_container
    return get_container()


@manifests_bp.route("/channels", methods=["GET"])
def channels() -> Response:
    """已知渠道、已配置项目与已生成的清单"""
    cfg = _container().config
    manifests = [
        {"project": project, "channel": channel}
        for project, channel in _container().store.list_manifests()
    ]
    return jsonify(
        channels=cfg.known_channels, projects=cfg.projects, manifests=manifests,
    )


@manifests_bp.route("/<channel>/<project>/manifest", methods=["GET"])
def manifest(channel: str, project: str) -> tuple[Response, int] | Response:
    if channel not in _container().config.known_channels:
        return not_found(f"渠道 {channel} ")
    try:
        return jsonify(_container().store.manifest_for(project, channel))
    except MirrorError as e:
        return from_error(e)


@manifests_bp.route("/<channel>/<project>/last-modified", methods=["GET"])
def last_modified(channel: str, project: str) -> tuple[Response, int] | Response:
    if channel not in _container().config.known_channels:
        return not_found(f"渠道 {channel} ")
    try:
        timestamp = _container().store.last_modified_for(project, channel)
    except MirrorError as e:
        return from_error(e)
    return jsonify(project=project, channel=channel, timestamp=timestamp)
