"""集中配置管理

镜像缓存的全部可调项集中在 Config，进程启动时设置一次。
支持从 YAML 文件加载 + 编程式覆盖；项目、渠道、最低版本、镜像地址
这些原先写死的值都作为默认配置提供。
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Mapping

from packaging.version import InvalidVersion, Version

from pkgmirror.core.exceptions import ConfigError
from pkgmirror.core.models import MirrorTarget
from pkgmirror.utils.file_io import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_KNOWN_CHANNELS = ("current", "stable", "unstable")


@dataclass
class Config:
    """镜像缓存全局配置"""

    # 目录
    metadata_dir: str = "./metadata_dir"
    package_dir: str = "./public"

    # 同步范围；为 None 时镜像全部版本
    sync_min_version: str | None = None
    known_channels: list[str] = field(
        default_factory=lambda: list(DEFAULT_KNOWN_CHANNELS),
    )
    projects: list[str] = field(default_factory=lambda: ["chef"])
    channels: list[str] = field(default_factory=lambda: ["stable"])

    # URL 改写目标；mirror_host 为 None 时保留上游地址
    mirror_host: str | None = None
    mirror_protocol: str = "http"
    mirror_port: int = 80

    # 下载
    download_timeout: float = 300.0

    # 清单提供者 (backend: file | http)
    provider: dict[str, Any] = field(
        default_factory=lambda: {"backend": "file", "source_dir": "upstream"},
    )

    # 自定义扩展 (放不到字段里的配置项)
    extra: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """校验配置一致性，不合法时抛出 ConfigError"""
        unknown = [c for c in self.channels if c not in self.known_channels]
        if unknown:
            raise ConfigError(
                f"渠道不在已知列表中: {unknown}，已知: {self.known_channels}"
            )
        if self.mirror_protocol not in ("http", "https"):
            raise ConfigError(f"不支持的镜像协议: {self.mirror_protocol}")
        try:
            port = int(self.mirror_port)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"镜像端口无效: {self.mirror_port!r}") from e
        if not 0 < port < 65536:
            raise ConfigError(f"镜像端口超出范围: {port}")
        self.mirror_port = port
        if self.sync_min_version is not None:
            if not isinstance(self.sync_min_version, str):
                # YAML 会把未加引号的 12.10 解析为浮点 12.1
                raise ConfigError(
                    f"sync_min_version 必须是字符串，请在配置中加引号: "
                    f"{self.sync_min_version!r}"
                )
            try:
                Version(self.sync_min_version)
            except InvalidVersion as e:
                raise ConfigError(
                    f"sync_min_version 无法解析为版本号: {self.sync_min_version}"
                ) from e

    @property
    def mirror_target(self) -> MirrorTarget | None:
        """URL 改写目标，未配置 mirror_host 时为 None"""
        if not self.mirror_host:
            return None
        return MirrorTarget(
            host=self.mirror_host,
            protocol=self.mirror_protocol,
            port=self.mirror_port,
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | str | None) -> Config:
        """从字典构建配置；传入字符串时视为 metadata_dir，其余取默认"""
        if data is None:
            return cls()
        if isinstance(data, str):
            return cls(metadata_dir=data)
        known = {f for f in cls.__dataclass_fields__}
        matched = {k: v for k, v in data.items() if k in known and k != "extra"}
        extra = {k: v for k, v in data.items() if k not in known}
        cfg = cls(**matched)
        cfg.extra = extra
        return cfg

    @classmethod
    def from_file(cls, path: str = "configs/default.yml") -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        data = load_yaml(path)
        if not data:
            return cls()
        return cls.from_mapping(data)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# 全局单例，首次 import 时不加载文件；由 CLI / Web 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str = "configs/default.yml") -> Config:
    """从文件初始化全局配置"""
    global _current  # noqa: PLW0603
    _current = Config.from_file(path)
    logger.info("配置已加载: %s", path)
    return _current
