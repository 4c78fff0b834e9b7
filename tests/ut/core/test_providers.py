"""上游清单提供者测试"""

from __future__ import annotations

import io
import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from pkgmirror.core.exceptions import (
    ConfigError,
    ManifestStructureError,
    ProviderError,
    TransportError,
)
from pkgmirror.core.mirror.providers import (
    FileManifestProvider,
    HttpManifestProvider,
    create_provider,
)


def _write(source_dir: Path, data: Any, project: str = "chef", channel: str = "stable") -> None:
    path = source_dir / channel / f"{project}.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")


class TestFileProvider:
    def test_generate(self, tmp_path: Path, manifest_data: dict[str, Any]) -> None:
        _write(tmp_path, manifest_data)
        manifest = FileManifestProvider(tmp_path).generate("chef", "stable")
        assert manifest.to_dict() == manifest_data

    def test_missing_source(self, tmp_path: Path) -> None:
        with pytest.raises(ProviderError, match="上游清单不存在"):
            FileManifestProvider(tmp_path).generate("chef", "stable")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "stable" / "chef.json"
        path.parent.mkdir(parents=True)
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ProviderError, match="不是合法 JSON"):
            FileManifestProvider(tmp_path).generate("chef", "stable")

    def test_bad_structure_propagates(self, tmp_path: Path) -> None:
        _write(tmp_path, {"el": {"7": {"x86_64": {"1.0": {"url": "http://u/a"}}}}})
        with pytest.raises(ManifestStructureError):
            FileManifestProvider(tmp_path).generate("chef", "stable")

    def test_missing_timestamp_is_stamped(self, tmp_path: Path) -> None:
        _write(tmp_path, {})
        manifest = FileManifestProvider(tmp_path).generate("chef", "stable")
        assert manifest.timestamp
        assert manifest.timestamp.endswith("+00:00")

    def test_serialize(self, tmp_path: Path, manifest_data: dict[str, Any]) -> None:
        _write(tmp_path, manifest_data)
        provider = FileManifestProvider(tmp_path)
        text = provider.serialize(provider.generate("chef", "stable"))
        assert json.loads(text) == manifest_data


class TestHttpProvider:
    def test_generate(self, manifest_data: dict[str, Any]) -> None:
        seen: list[str] = []

        def fake_urlopen(req, timeout=None):  # type: ignore[no-untyped-def]
            seen.append(req.full_url)
            return io.BytesIO(json.dumps(manifest_data).encode())

        provider = HttpManifestProvider("https://up.example.com/{channel}/{project}.json")
        with patch("urllib.request.urlopen", fake_urlopen):
            manifest = provider.generate("chef", "stable")
        assert seen == ["https://up.example.com/stable/chef.json"]
        assert manifest.to_dict() == manifest_data

    def test_transport_failure(self) -> None:
        import urllib.error

        def fake_urlopen(req, timeout=None):  # type: ignore[no-untyped-def]
            raise urllib.error.URLError("connection refused")

        provider = HttpManifestProvider("https://up.example.com/{channel}/{project}.json")
        with patch("urllib.request.urlopen", fake_urlopen):
            with pytest.raises(TransportError, match="connection refused"):
                provider.generate("chef", "stable")


class TestCreateProvider:
    def test_default_is_file(self) -> None:
        provider = create_provider(None)
        assert isinstance(provider, FileManifestProvider)
        assert provider.source_dir == Path("upstream")

    def test_http(self) -> None:
        provider = create_provider({
            "backend": "http", "url_template": "https://u/{channel}/{project}", "timeout": 5,
        })
        assert isinstance(provider, HttpManifestProvider)
        assert provider.timeout == 5.0

    def test_http_requires_template(self) -> None:
        with pytest.raises(ConfigError, match="url_template"):
            create_provider({"backend": "http"})

    def test_unknown_backend(self) -> None:
        with pytest.raises(ConfigError, match="s3"):
            create_provider({"backend": "s3"})
