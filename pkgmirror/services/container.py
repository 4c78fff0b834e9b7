"""服务容器 - CLI 与 Web 层共享的懒加载实例

同一容器内 cache / store 共享同一份配置。

用法:
    container = ServiceContainer()
    container.cache.update()

    # 全局单例（Web / 多模块共享）
    from pkgmirror.services.container import get_container
    get_container().store.manifest_for("chef", "stable")
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pkgmirror.core.cache import MirrorCache
    from pkgmirror.core.config import Config
    from pkgmirror.core.mirror.store import ManifestStore


class ServiceContainer:
    """懒加载服务容器"""

    def __init__(self, config: Config | None = None) -> None:
        self._instances: dict[str, object] = {}
        if config is None:
            from pkgmirror.core.config import get_config
            config = get_config()
        self._config = config

    @property
    def config(self) -> Config:
        return self._config

    @property
    def store(self) -> ManifestStore:
        if "store" not in self._instances:
            from pkgmirror.core.mirror.store import ManifestStore
            self._instances["store"] = ManifestStore(self._config.metadata_dir)
        return self._instances["store"]  # type: ignore[return-value]

    @property
    def cache(self) -> MirrorCache:
        if "cache" not in self._instances:
            from pkgmirror.core.cache import MirrorCache
            self._instances["cache"] = MirrorCache(self._config, store=self.store)
        return self._instances["cache"]  # type: ignore[return-value]


# ---- 全局单例 ----

_global: ServiceContainer | None = None
_global_lock = threading.Lock()


def get_container() -> ServiceContainer:
    """获取全局 ServiceContainer 单例（线程安全）"""
    global _global  # noqa: PLW0603
    if _global is not None:
        return _global
    with _global_lock:
        if _global is None:
            _global = ServiceContainer()
        return _global


def reset_container() -> None:
    """重置全局容器（配置切换或测试时使用）"""
    global _global  # noqa: PLW0603
    with _global_lock:
        _global = None
