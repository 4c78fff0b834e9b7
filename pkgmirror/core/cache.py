"""镜像缓存编排器

按配置遍历 project × channel，对每一对执行一次更新周期:

  1. 清单提供者生成上游清单（失败直接抛出）
  2. 按 sync_min_version 筛选待镜像的包
  3. 改写清单中全部包的下载 URL（不仅是被选中的包）
  4. 下载被选中的包（仍从上游地址下载）
  5. 持久化改写后的完整清单

用法:
    from pkgmirror.core.cache import MirrorCache

    cache = MirrorCache()
    cache.update()
    cache.manifest_for("chef", "stable")
    cache.last_modified_for("chef", "stable")

执行模型是严格串行的：一次一对、一次一个包。任何一个包失败都会中止
当前周期，清单不会被写入。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pkgmirror.core.exceptions import ConfigError
from pkgmirror.core.mirror.fetcher import PackageMirror
from pkgmirror.core.mirror.providers import create_provider
from pkgmirror.core.mirror.rewriter import rewrite_manifest
from pkgmirror.core.mirror.store import ManifestStore
from pkgmirror.core.mirror.version_filter import select_packages
from pkgmirror.core.models import CycleResult

if TYPE_CHECKING:
    from pkgmirror.core.config import Config
    from pkgmirror.core.protocols import ManifestProvider

logger = logging.getLogger(__name__)


class MirrorCache:
    """镜像缓存统一管理器"""

    def __init__(
        self,
        config: Config | None = None,
        *,
        provider: ManifestProvider | None = None,
        mirror: PackageMirror | None = None,
        store: ManifestStore | None = None,
    ) -> None:
        if config is None:
            from pkgmirror.core.config import get_config
            config = get_config()
        self.config = config
        self.provider = provider or create_provider(config.provider)
        self.mirror = mirror or PackageMirror(
            config.package_dir, timeout=config.download_timeout,
        )
        self.store = store or ManifestStore(config.metadata_dir)
        self.store.ensure_channels(config.known_channels)

    # ------------------------------------------------------------------
    # 更新
    # ------------------------------------------------------------------

    def update(self) -> None:
        """更新全部已配置的 (project, channel)"""
        for project in self.config.projects:
            for channel in self.config.channels:
                self.update_channel(project, channel)

    def update_channel(self, project: str, channel: str) -> CycleResult:
        """执行单个 (project, channel) 的更新周期"""
        if channel not in self.config.known_channels:
            raise ConfigError(
                f"未知渠道: {channel}，已知: {self.config.known_channels}"
            )
        context = {"project": project, "channel": channel}
        logger.info("开始更新: %s/%s", project, channel, extra=context)

        manifest = self.provider.generate(project, channel)
        logger.info("上游清单时间: %s", manifest.timestamp, extra=context)
        selected = select_packages(
            manifest.iter_packages(), self.config.sync_min_version,
        )
        rewritten = rewrite_manifest(manifest, self.config.mirror_target)

        cycle = CycleResult(
            project=project, channel=channel,
            manifest_path=self.store.path(project, channel),
            total=sum(1 for _ in manifest.iter_packages()),
            selected=len(selected),
        )
        for pkg in selected:
            cycle.results.append(self.mirror.mirror(pkg))

        self.store.write(project, channel, self.provider.serialize(rewritten))
        logger.info(
            "更新完成: %s/%s 共 %d 个包, 选中 %d, 下载 %d, 命中缓存 %d",
            project, channel, cycle.total, cycle.selected,
            cycle.downloaded, cycle.cached, extra=context,
        )
        return cycle

    # ------------------------------------------------------------------
    # 查询
    # ------------------------------------------------------------------

    def project_manifest_path(self, project: str, channel: str) -> Path:
        return self.store.path(project, channel)

    def manifest_for(self, project: str, channel: str) -> dict[str, Any]:
        """返回已持久化的清单内容，不存在时抛出 MissingManifestError"""
        return self.store.manifest_for(project, channel)

    def last_modified_for(self, project: str, channel: str) -> str:
        """返回清单的 run_data.timestamp"""
        return self.store.last_modified_for(project, channel)
