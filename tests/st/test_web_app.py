"""镜像服务 Web API 测试"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from pkgmirror.core.config import Config
from pkgmirror.core.mirror.store import ManifestStore
from pkgmirror.core.models import Manifest
from pkgmirror.web.app import app


@pytest.fixture()
def client(mirror_config: Config):
    """Flask 测试客户端，使用临时目录配置"""
    app.config["TESTING"] = True
    with app.test_client() as c:
        yield c


@pytest.fixture()
def stored(mirror_config: Config, manifest_data: dict[str, Any]) -> dict[str, Any]:
    ManifestStore(mirror_config.metadata_dir).write(
        "chef", "stable", Manifest.from_dict(manifest_data),
    )
    return manifest_data


class TestErrorHandlers:
    def test_404_returns_json(self, client) -> None:
        resp = client.get("/api/nonexistent")
        assert resp.status_code == 404
        assert "error" in resp.get_json()

    def test_405_returns_json(self, client) -> None:
        resp = client.delete("/api/channels")
        assert resp.status_code == 405
        assert "error" in resp.get_json()


class TestChannels:
    def test_lists_channels_and_projects(self, client) -> None:
        data = client.get("/api/channels").get_json()
        assert data["channels"] == ["current", "stable", "unstable"]
        assert data["projects"] == ["chef"]
        assert data["manifests"] == []

    def test_lists_persisted_manifests(self, client, stored) -> None:
        data = client.get("/api/channels").get_json()
        assert data["manifests"] == [{"project": "chef", "channel": "stable"}]


class TestManifestApi:
    def test_manifest(self, client, stored) -> None:
        resp = client.get("/api/stable/chef/manifest")
        assert resp.status_code == 200
        assert resp.get_json() == stored

    def test_missing_manifest_404(self, client) -> None:
        resp = client.get("/api/stable/chef/manifest")
        assert resp.status_code == 404
        assert resp.get_json()["code"] == "MISSING_MANIFEST"

    def test_unknown_channel_404(self, client) -> None:
        resp = client.get("/api/nightly/chef/manifest")
        assert resp.status_code == 404

    def test_last_modified(self, client, stored) -> None:
        data = client.get("/api/stable/chef/last-modified").get_json()
        assert data == {
            "project": "chef", "channel": "stable",
            "timestamp": "2016-09-01T00:00:00Z",
        }

    def test_last_modified_structural_error_422(
        self, client, mirror_config: Config,
    ) -> None:
        path = Path(mirror_config.metadata_dir) / "stable" / "chef-manifest.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("{}", encoding="utf-8")
        resp = client.get("/api/stable/chef/last-modified")
        assert resp.status_code == 422
        assert resp.get_json()["code"] == "STRUCTURAL_ERROR"


class TestPackageFiles:
    def test_serves_mirrored_file(self, client, mirror_config: Config) -> None:
        local = Path(mirror_config.package_dir) / "stable/el/7/x86_64/chef.rpm"
        local.parent.mkdir(parents=True)
        local.write_bytes(b"rpm bytes")
        resp = client.get("/stable/el/7/x86_64/chef.rpm")
        assert resp.status_code == 200
        assert resp.data == b"rpm bytes"

    def test_missing_file_404(self, client, mirror_config: Config) -> None:
        Path(mirror_config.package_dir).mkdir(parents=True, exist_ok=True)
        resp = client.get("/stable/el/7/x86_64/none.rpm")
        assert resp.status_code == 404
        assert "error" in resp.get_json()
