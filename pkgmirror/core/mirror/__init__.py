"""包镜像模块

拆分说明:
- version_filter.py: 按最低版本筛选待镜像的包
- rewriter.py: 把下载 URL 改写到本地镜像
- fetcher.py: 下载 + 摘要校验
- store.py: 清单持久化与查询
- providers.py: 上游清单提供者
"""

from pkgmirror.core.mirror.fetcher import PackageMirror, file_sha256
from pkgmirror.core.mirror.providers import (
    FileManifestProvider,
    HttpManifestProvider,
    create_provider,
)
from pkgmirror.core.mirror.rewriter import rewrite_manifest, rewrite_url
from pkgmirror.core.mirror.store import ManifestStore
from pkgmirror.core.mirror.version_filter import is_newer, select_packages

__all__ = [
    "FileManifestProvider",
    "HttpManifestProvider",
    "ManifestStore",
    "PackageMirror",
    "create_provider",
    "file_sha256",
    "is_newer",
    "rewrite_manifest",
    "rewrite_url",
    "select_packages",
]
