"""测试共享 fixture - 上游清单构造 + 假下载"""

from __future__ import annotations

import hashlib
import io
import json
import os
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

import pkgmirror.core.config as cfgmod
from pkgmirror.services.container import reset_container

UPSTREAM = "https://packages.example.com"

# 上游 URL 路径 -> 包内容
PACKAGE_BYTES: dict[str, bytes] = {
    "/stable/el/7/x86_64/chef-12.13.37-1.el7.x86_64.rpm": b"chef 12.13.37 el7",
    "/stable/el/7/x86_64/chef-12.14.60-1.el7.x86_64.rpm": b"chef 12.14.60 el7",
    "/stable/ubuntu/16.04/x86_64/chef_12.14.60-1_amd64.deb": b"chef 12.14.60 xenial",
}


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def descriptor(url_path: str, **extra: Any) -> dict[str, Any]:
    return {
        "url": f"{UPSTREAM}{url_path}",
        "sha256": sha256_hex(PACKAGE_BYTES[url_path]),
        **extra,
    }


def upstream_manifest(timestamp: str = "2016-09-01T00:00:00Z") -> dict[str, Any]:
    """el/7 下两个版本 + ubuntu/16.04 下一个版本"""
    return {
        "el": {
            "7": {
                "x86_64": {
                    "12.13.37": descriptor(
                        "/stable/el/7/x86_64/chef-12.13.37-1.el7.x86_64.rpm",
                        version="12.13.37",
                    ),
                    "12.14.60": descriptor(
                        "/stable/el/7/x86_64/chef-12.14.60-1.el7.x86_64.rpm",
                        version="12.14.60",
                    ),
                },
            },
        },
        "ubuntu": {
            "16.04": {
                "x86_64": {
                    "12.14.60": descriptor(
                        "/stable/ubuntu/16.04/x86_64/chef_12.14.60-1_amd64.deb",
                        version="12.14.60",
                    ),
                },
            },
        },
        "run_data": {"timestamp": timestamp},
    }


def write_upstream(source_dir: Path, project: str, channel: str, data: dict) -> Path:
    path = source_dir / channel / f"{project}.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class FakeUpstream:
    """替代 urllib.request.urlopen，按 URL 路径返回内容并记录请求"""

    def __init__(self, files: dict[str, bytes] | None = None) -> None:
        self.files = dict(PACKAGE_BYTES if files is None else files)
        self.requests: list[str] = []

    def __call__(self, req: Any, timeout: float | None = None) -> io.BytesIO:
        import urllib.error
        from urllib.parse import urlsplit

        url = req.full_url if hasattr(req, "full_url") else str(req)
        self.requests.append(url)
        path = urlsplit(url).path
        if path not in self.files:
            raise urllib.error.HTTPError(url, 404, "Not Found", None, None)  # type: ignore[arg-type]
        return io.BytesIO(self.files[path])


@pytest.fixture()
def fake_upstream():
    upstream = FakeUpstream()
    with patch("urllib.request.urlopen", upstream):
        yield upstream


@pytest.fixture()
def mirror_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> cfgmod.Config:
    """临时目录下的独立配置，同时注册为全局配置"""
    cfg = cfgmod.Config(
        metadata_dir=str(tmp_path / "metadata"),
        package_dir=str(tmp_path / "public"),
        provider={"backend": "file", "source_dir": str(tmp_path / "upstream")},
    )
    monkeypatch.setattr(cfgmod, "_current", cfg)
    reset_container()
    yield cfg
    reset_container()


@pytest.fixture()
def package_bytes() -> dict[str, bytes]:
    return dict(PACKAGE_BYTES)


@pytest.fixture()
def manifest_data() -> dict[str, Any]:
    return upstream_manifest()


@pytest.fixture()
def publish_upstream(mirror_config: cfgmod.Config):
    """把原始清单写入 file 提供者的 source_dir"""
    source_dir = Path(mirror_config.provider["source_dir"])

    def _publish(data: dict, project: str = "chef", channel: str = "stable") -> Path:
        return write_upstream(source_dir, project, channel, data)

    return _publish


@pytest.fixture()
def umask_022():
    """固定进程 umask，测试结束后恢复"""
    old = os.umask(0o022)
    yield
    os.umask(old)
