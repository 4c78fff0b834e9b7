"""清单持久化

每个 (project, channel) 的改写后清单保存在
<metadata_dir>/<channel>/<project>-manifest.json，整文件原子写入。
查询接口 manifest_for / last_modified_for 从这里读取。
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from pkgmirror.core.exceptions import ManifestStructureError, MissingManifestError
from pkgmirror.core.models import RUN_DATA_KEY, Manifest
from pkgmirror.utils.file_io import atomic_write, load_json

logger = logging.getLogger(__name__)

MANIFEST_SUFFIX = "-manifest.json"


class ManifestStore:
    """清单文件存储"""

    def __init__(self, metadata_dir: str | Path) -> None:
        self.metadata_dir = Path(metadata_dir)

    def ensure_channels(self, channels: Iterable[str]) -> None:
        """为每个已知渠道创建 metadata_dir/<channel>/ 目录"""
        for channel in channels:
            (self.metadata_dir / channel).mkdir(parents=True, exist_ok=True)

    def path(self, project: str, channel: str) -> Path:
        """清单文件路径，纯计算不做 IO"""
        return self.metadata_dir / channel / f"{project}{MANIFEST_SUFFIX}"

    def write(self, project: str, channel: str, manifest: Manifest | str) -> Path:
        """整文件写入清单；传入字符串时视为已序列化的 JSON 文本"""
        path = self.path(project, channel)
        content = manifest if isinstance(manifest, str) else manifest.to_json()
        atomic_write(path, content)
        logger.info(
            "清单已写入: %s", path, extra={"project": project, "channel": channel},
        )
        return path

    def read(self, project: str, channel: str) -> dict[str, Any]:
        """读取并解析清单 JSON

        Raises:
            MissingManifestError: 清单文件不存在
        """
        path = self.path(project, channel)
        if not path.is_file():
            raise MissingManifestError(project, channel)
        data: dict[str, Any] = load_json(path)
        return data

    def load(self, project: str, channel: str) -> Manifest:
        """读取清单并解析为 Manifest 对象"""
        return Manifest.from_dict(self.read(project, channel))

    def manifest_for(self, project: str, channel: str) -> dict[str, Any]:
        return self.read(project, channel)

    def last_modified_for(self, project: str, channel: str) -> str:
        """返回清单 run_data.timestamp

        Raises:
            MissingManifestError: 清单文件不存在
            ManifestStructureError: 清单缺少 run_data.timestamp
        """
        data = self.read(project, channel)
        run_data = data.get(RUN_DATA_KEY) if isinstance(data, dict) else None
        if not isinstance(run_data, dict) or "timestamp" not in run_data:
            raise ManifestStructureError(
                f"清单缺少 run_data.timestamp: {self.path(project, channel)}"
            )
        return str(run_data["timestamp"])

    def list_manifests(self) -> list[tuple[str, str]]:
        """列出已持久化的 (project, channel)"""
        if not self.metadata_dir.is_dir():
            return []
        found: list[tuple[str, str]] = []
        for channel_dir in sorted(self.metadata_dir.iterdir()):
            if not channel_dir.is_dir():
                continue
            for f in sorted(channel_dir.glob(f"*{MANIFEST_SUFFIX}")):
                found.append((f.name[: -len(MANIFEST_SUFFIX)], channel_dir.name))
        return found
