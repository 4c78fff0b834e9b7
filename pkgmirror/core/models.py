"""核心数据模型

清单是四层有序嵌套: platform → version → architecture → 包名 → PackageDescriptor，
外加与平台同级的 run_data。所有模块统一从此处导入清单相关实体。
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

from pkgmirror.core.exceptions import ManifestStructureError

RUN_DATA_KEY = "run_data"

PlatformTree = dict[str, dict[str, dict[str, dict[str, "PackageDescriptor"]]]]


@dataclass
class PackageDescriptor:
    """单个可安装制品的元信息

    坐标 (platform / platform_version / architecture / name) 是它在清单中的
    映射键，不随描述本身序列化。attributes 保留上游给出的全部字段及其顺序，
    url / sha256 序列化时写回原位置。
    """

    platform: str
    platform_version: str
    architecture: str
    name: str
    url: str
    sha256: str
    attributes: dict[str, Any] = field(default_factory=dict)

    @property
    def coordinates(self) -> tuple[str, str, str, str]:
        return (self.platform, self.platform_version, self.architecture, self.name)

    @classmethod
    def from_dict(
        cls, coordinates: tuple[str, str, str, str], data: Any,
    ) -> PackageDescriptor:
        where = "/".join(coordinates)
        if not isinstance(data, dict):
            raise ManifestStructureError(f"包描述不是对象: {where}")
        for key in ("url", "sha256"):
            if not isinstance(data.get(key), str) or not data[key]:
                raise ManifestStructureError(f"包描述缺少字段 '{key}': {where}")
        platform, platform_version, architecture, name = coordinates
        return cls(
            platform=platform,
            platform_version=platform_version,
            architecture=architecture,
            name=name,
            url=data["url"],
            sha256=data["sha256"],
            attributes=dict(data),
        )

    def to_dict(self) -> dict[str, Any]:
        data = dict(self.attributes)
        data["url"] = self.url
        data["sha256"] = self.sha256
        return data

    def with_url(self, url: str) -> PackageDescriptor:
        """返回仅 url 不同的新描述"""
        return PackageDescriptor(
            platform=self.platform,
            platform_version=self.platform_version,
            architecture=self.architecture,
            name=self.name,
            url=url,
            sha256=self.sha256,
            attributes=dict(self.attributes),
        )


@dataclass
class Manifest:
    """单个 (project, channel) 在某一时刻的完整目录"""

    platforms: PlatformTree = field(default_factory=dict)
    run_data: dict[str, Any] = field(default_factory=dict)

    @property
    def timestamp(self) -> str | None:
        value = self.run_data.get("timestamp")
        return None if value is None else str(value)

    def iter_packages(self) -> Iterator[PackageDescriptor]:
        """按清单遍历顺序产出全部包描述"""
        for versions in self.platforms.values():
            for archs in versions.values():
                for packages in archs.values():
                    yield from packages.values()

    def map_packages(
        self, fn: Callable[[PackageDescriptor], PackageDescriptor],
    ) -> Manifest:
        """构建新清单，每个包描述经 fn 变换；原清单不被修改"""
        platforms: PlatformTree = {}
        for platform, versions in self.platforms.items():
            platforms[platform] = {}
            for version, archs in versions.items():
                platforms[platform][version] = {}
                for arch, packages in archs.items():
                    platforms[platform][version][arch] = {
                        name: fn(pkg) for name, pkg in packages.items()
                    }
        return Manifest(platforms=platforms, run_data=dict(self.run_data))

    @classmethod
    def from_dict(cls, data: Any) -> Manifest:
        """从 JSON 对象解析，层级结构不符时抛出 ManifestStructureError"""
        if not isinstance(data, dict):
            raise ManifestStructureError("清单顶层不是 JSON 对象")
        run_data = data.get(RUN_DATA_KEY) or {}
        if not isinstance(run_data, dict):
            raise ManifestStructureError("run_data 不是 JSON 对象")

        platforms: PlatformTree = {}
        for platform, versions in data.items():
            if platform == RUN_DATA_KEY:
                continue
            _require_mapping(versions, platform)
            platforms[platform] = {}
            for version, archs in versions.items():
                _require_mapping(archs, platform, version)
                platforms[platform][version] = {}
                for arch, packages in archs.items():
                    _require_mapping(packages, platform, version, arch)
                    platforms[platform][version][arch] = {
                        name: PackageDescriptor.from_dict(
                            (platform, version, arch, name), info,
                        )
                        for name, info in packages.items()
                    }
        return cls(platforms=platforms, run_data=dict(run_data))

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for platform, versions in self.platforms.items():
            data[platform] = {
                version: {
                    arch: {name: pkg.to_dict() for name, pkg in packages.items()}
                    for arch, packages in archs.items()
                }
                for version, archs in versions.items()
            }
        data[RUN_DATA_KEY] = dict(self.run_data)
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False) + "\n"


def _require_mapping(value: Any, *coordinates: str) -> None:
    if not isinstance(value, dict):
        raise ManifestStructureError(
            f"清单层级不是 JSON 对象: {'/'.join(coordinates)}"
        )


@dataclass(frozen=True)
class MirrorTarget:
    """URL 改写目标（本地镜像的协议/主机/端口）"""

    host: str
    protocol: str = "http"
    port: int = 80


@dataclass
class MirrorResult:
    """单个包的镜像结果"""

    descriptor: PackageDescriptor
    path: Path
    status: str  # "cached", "downloaded"
    size: int = 0

    @property
    def downloaded(self) -> bool:
        return self.status == "downloaded"


@dataclass
class CycleResult:
    """一次 (project, channel) 更新周期的汇总"""

    project: str
    channel: str
    manifest_path: Path
    total: int = 0
    selected: int = 0
    results: list[MirrorResult] = field(default_factory=list)

    @property
    def downloaded(self) -> int:
        return sum(1 for r in self.results if r.downloaded)

    @property
    def cached(self) -> int:
        return sum(1 for r in self.results if not r.downloaded)

    def to_dict(self) -> dict[str, Any]:
        return {
            "project": self.project,
            "channel": self.channel,
            "manifest_path": str(self.manifest_path),
            "total": self.total,
            "selected": self.selected,
            "downloaded": self.downloaded,
            "cached": self.cached,
        }
