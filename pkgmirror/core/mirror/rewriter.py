"""下载 URL 改写

把包描述的 scheme/host/port 换成本地镜像配置，path/query/fragment 原样保留。
路径是访问本地镜像的稳定寻址键，镜像目录结构与上游 URL 路径一一对应。

改写作用于清单中的每个包，包括未被版本筛选选中的包；这些包的镜像 URL
在未另行同步前会返回 404。
"""

from __future__ import annotations

from urllib.parse import urlsplit, urlunsplit

from pkgmirror.core.models import Manifest, MirrorTarget
from pkgmirror.utils.net import format_netloc


def rewrite_url(url: str, target: MirrorTarget | None) -> str:
    """改写单个 URL；target 为 None 时原样返回"""
    if target is None:
        return url
    parts = urlsplit(url)
    netloc = format_netloc(target.host, target.port, target.protocol)
    return urlunsplit(
        (target.protocol, netloc, parts.path, parts.query, parts.fragment)
    )


def rewrite_manifest(manifest: Manifest, target: MirrorTarget | None) -> Manifest:
    """返回所有 URL 指向镜像的新清单，原清单保持上游地址"""
    return manifest.map_packages(
        lambda pkg: pkg.with_url(rewrite_url(pkg.url, target))
    )
