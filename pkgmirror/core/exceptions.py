"""统一异常体系

所有业务异常继承 MirrorError，CLI 层据此输出友好提示，
Web 层据此映射 HTTP 状态码。核心层只抛出、不吞掉异常。
"""

from __future__ import annotations


class MirrorError(Exception):
    """镜像缓存基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(MirrorError):
    """配置文件缺失或内容无效"""

    code = "CONFIG_ERROR"


class ValidationError(MirrorError):
    """输入数据校验失败（URL 协议、路径穿越等）"""

    code = "VALIDATION_ERROR"


class MissingManifestError(MirrorError):
    """指定 project/channel 的清单文件尚未生成"""

    code = "MISSING_MANIFEST"

    def __init__(self, project: str, channel: str) -> None:
        super().__init__(
            f"Can not find the manifest file for '{project}' - '{channel}'"
        )
        self.project = project
        self.channel = channel


class ManifestStructureError(MirrorError):
    """清单 JSON 缺少必需字段（如 run_data.timestamp、url、sha256）"""

    code = "STRUCTURAL_ERROR"


class ProviderError(MirrorError):
    """清单提供者无法生成清单"""

    code = "PROVIDER_ERROR"


class TransportError(MirrorError):
    """下载失败：网络错误、非 2xx 响应或超时"""

    code = "TRANSPORT_ERROR"

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"下载失败: {url} - {reason}")
        self.url = url
        self.reason = reason


class IntegrityError(MirrorError):
    """下载完成后内容摘要与清单声明不一致"""

    code = "INTEGRITY_ERROR"

    def __init__(self, path: str, expected: str, actual: str) -> None:
        super().__init__(f"校验和不匹配 {path}: 期望 {expected}, 实际 {actual}")
        self.path = path
        self.expected = expected
        self.actual = actual


class MalformedVersionError(MirrorError):
    """包名键无法解析为版本号"""

    code = "MALFORMED_VERSION"

    def __init__(self, version: str, coordinates: tuple[str, ...] = ()) -> None:
        where = f" ({'/'.join(coordinates)})" if coordinates else ""
        super().__init__(f"无效的版本号 '{version}'{where}")
        self.version = version
        self.coordinates = coordinates
