"""包镜像下载器

职责:
- 计算包在本地镜像中的路径（package_dir + URL 路径）
- 本地文件存在且 SHA-256 一致时直接命中，不发起网络请求
- 否则流式下载到同目录临时文件，校验摘要后原子替换
"""

from __future__ import annotations

import hashlib
import logging
import os
import shutil
import tempfile
import urllib.error
import urllib.request
from pathlib import Path

from pkgmirror import __version__
from pkgmirror.core.exceptions import IntegrityError, TransportError
from pkgmirror.core.models import MirrorResult, PackageDescriptor
from pkgmirror.utils.file_io import publish_mode
from pkgmirror.utils.net import url_path, validate_url_scheme

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
USER_AGENT = f"pkgmirror/{__version__}"


def file_sha256(path: Path) -> str:
    """流式计算文件的 SHA-256 十六进制摘要"""
    sha256 = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
            sha256.update(chunk)
    return sha256.hexdigest()


def _digest_matches(actual: str, expected: str) -> bool:
    return actual.lower() == expected.strip().lower()


class PackageMirror:
    """包镜像器 - 本地命中优先，缺失或损坏时重新下载"""

    def __init__(self, package_dir: str | Path, *, timeout: float = 300.0) -> None:
        self.package_dir = Path(package_dir)
        self.timeout = timeout

    def cache_path(self, pkg: PackageDescriptor) -> Path:
        """包在本地镜像中的路径: package_dir + URL 路径"""
        return self.package_dir / url_path(pkg.url).lstrip("/")

    def mirror(self, pkg: PackageDescriptor) -> MirrorResult:
        """确保包在本地有一份校验通过的副本

        Raises:
            TransportError: 网络错误或非 2xx 响应
            IntegrityError: 下载内容的摘要与清单不一致
            ValidationError: URL 协议不是 http/https，或路径无法映射为文件
        """
        validate_url_scheme(pkg.url, context=f"package {pkg.name}")
        path = self.cache_path(pkg)
        rel = url_path(pkg.url)
        context = {"package": "/".join(pkg.coordinates)}

        if path.is_file():
            if _digest_matches(file_sha256(path), pkg.sha256):
                logger.info("%s is already in cache", rel, extra=context)
                return MirrorResult(
                    descriptor=pkg, path=path, status="cached",
                    size=path.stat().st_size,
                )
            logger.warning(
                "本地文件摘要不匹配，重新下载: %s", path, extra=context,
            )

        logger.info("Downloading %s", pkg.url, extra=context)
        path.parent.mkdir(parents=True, exist_ok=True)
        size = self._download(pkg, path)
        logger.info("已保存: %s (%d 字节)", path, size, extra=context)
        return MirrorResult(descriptor=pkg, path=path, status="downloaded", size=size)

    def _download(self, pkg: PackageDescriptor, dest: Path) -> int:
        """下载到同目录临时文件，校验通过后替换目标文件"""
        req = urllib.request.Request(pkg.url, headers={"User-Agent": USER_AGENT})

        fd, tmp_name = tempfile.mkstemp(dir=str(dest.parent), suffix=".part")
        tmp = Path(tmp_name)
        try:
            try:
                with os.fdopen(fd, "wb") as out:
                    with urllib.request.urlopen(  # nosec B310
                        req, timeout=self.timeout,
                    ) as resp:
                        shutil.copyfileobj(resp, out, CHUNK_SIZE)
            except urllib.error.HTTPError as e:
                raise TransportError(pkg.url, f"HTTP {e.code} {e.reason}") from e
            except (urllib.error.URLError, TimeoutError, ConnectionError) as e:
                raise TransportError(pkg.url, str(e)) from e

            actual = file_sha256(tmp)
            if not _digest_matches(actual, pkg.sha256):
                logger.error(
                    "下载后校验失败: %s 期望 %s 实际 %s", pkg.url, pkg.sha256, actual,
                )
                dest.unlink(missing_ok=True)
                raise IntegrityError(str(dest), pkg.sha256, actual)

            size = tmp.stat().st_size
            publish_mode(tmp)
            os.replace(tmp, dest)
            return size
        finally:
            tmp.unlink(missing_ok=True)
