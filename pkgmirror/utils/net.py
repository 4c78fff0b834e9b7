"""网络工具 - URL 安全校验与路径提取"""

from __future__ import annotations

from urllib.parse import urlsplit

from pkgmirror.core.exceptions import ValidationError

_ALLOWED_SCHEMES = frozenset(("http", "https"))

DEFAULT_PORTS = {"http": 80, "https": 443}


def validate_url_scheme(url: str, *, context: str = "") -> None:
    """校验 URL 仅使用 http/https，防止 file:// 等非预期协议访问

    Raises:
        ValidationError: URL scheme 不在白名单内
    """
    scheme = urlsplit(url).scheme
    if scheme not in _ALLOWED_SCHEMES:
        label = f" ({context})" if context else ""
        raise ValidationError(
            f"不允许的 URL 协议 '{scheme}'{label}，仅支持 http/https: {url}"
        )


def url_path(url: str) -> str:
    """提取 URL 的路径部分，拒绝包含 '..' 段或不指向文件的路径

    镜像目录结构是上游 URL 路径空间的投影，路径穿越会写出 package_dir 之外。
    """
    path = urlsplit(url).path
    if any(seg == ".." for seg in path.split("/")):
        raise ValidationError(f"URL 路径包含非法的 '..' 段: {url}")
    if not path.strip("/") or path.endswith("/"):
        raise ValidationError(f"URL 路径不指向文件: {url}")
    return path


def format_netloc(host: str, port: int, scheme: str) -> str:
    """拼接 netloc，端口为协议默认值时省略"""
    if ":" in host and not host.startswith("["):
        host = f"[{host}]"
    if DEFAULT_PORTS.get(scheme) == port:
        return host
    return f"{host}:{port}"
