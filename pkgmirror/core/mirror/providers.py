"""上游清单提供者

两种后端：
  - file: 读取本地目录中的原始清单 <source_dir>/<channel>/<project>.json
  - http: 按 URL 模板从上游服务拉取原始清单

提供者负责记录生成时间：上游数据没有 run_data.timestamp 时补上当前 UTC 时间。
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

from pkgmirror.core.exceptions import ConfigError, ProviderError, TransportError
from pkgmirror.core.models import RUN_DATA_KEY, Manifest
from pkgmirror.utils.file_io import load_json
from pkgmirror.utils.net import validate_url_scheme

logger = logging.getLogger(__name__)


def _stamp(data: Any) -> Any:
    if isinstance(data, dict):
        run_data = data.setdefault(RUN_DATA_KEY, {})
        if isinstance(run_data, dict) and "timestamp" not in run_data:
            run_data["timestamp"] = datetime.now(tz=timezone.utc).isoformat()
    return data


class _JsonProvider:
    def serialize(self, manifest: Manifest) -> str:
        return manifest.to_json()


class FileManifestProvider(_JsonProvider):
    """从本地目录读取原始清单"""

    def __init__(self, source_dir: str | Path) -> None:
        self.source_dir = Path(source_dir)

    def source_path(self, project: str, channel: str) -> Path:
        return self.source_dir / channel / f"{project}.json"

    def generate(self, project: str, channel: str) -> Manifest:
        path = self.source_path(project, channel)
        if not path.is_file():
            raise ProviderError(f"上游清单不存在: {path}")
        try:
            data = load_json(path)
        except json.JSONDecodeError as e:
            raise ProviderError(f"上游清单不是合法 JSON: {path} - {e}") from e
        logger.info("读取上游清单: %s", path)
        return Manifest.from_dict(_stamp(data))


class HttpManifestProvider(_JsonProvider):
    """从上游 HTTP 服务拉取原始清单

    url_template 支持 {project} / {channel} 占位符，
    如 https://packages.example.com/{channel}/{project}/manifest.json
    """

    def __init__(self, url_template: str, *, timeout: float = 60.0) -> None:
        self.url_template = url_template
        self.timeout = timeout

    def source_url(self, project: str, channel: str) -> str:
        return self.url_template.format(project=project, channel=channel)

    def generate(self, project: str, channel: str) -> Manifest:
        url = self.source_url(project, channel)
        validate_url_scheme(url, context="manifest provider")
        req = urllib.request.Request(url, headers={"Accept": "application/json"})
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:  # nosec B310
                body = resp.read()
        except urllib.error.HTTPError as e:
            raise TransportError(url, f"HTTP {e.code} {e.reason}") from e
        except (urllib.error.URLError, TimeoutError, ConnectionError) as e:
            raise TransportError(url, str(e)) from e

        try:
            data = json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ProviderError(f"上游清单不是合法 JSON: {url} - {e}") from e
        logger.info("拉取上游清单: %s", url)
        return Manifest.from_dict(_stamp(data))


def create_provider(
    config: Mapping[str, Any] | None = None,
) -> FileManifestProvider | HttpManifestProvider:
    """根据 provider 配置段创建清单提供者"""
    if config is None:
        config = {}

    backend = config.get("backend", "file")
    if backend == "http":
        url_template = config.get("url_template", "")
        if not url_template:
            raise ConfigError("http 清单提供者需要配置 url_template")
        return HttpManifestProvider(
            url_template, timeout=float(config.get("timeout", 60.0)),
        )
    if backend == "file":
        return FileManifestProvider(config.get("source_dir", "upstream"))
    raise ConfigError(f"不支持的清单提供者类型: {backend}")
