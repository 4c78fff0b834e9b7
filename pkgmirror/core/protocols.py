"""领域协议定义

清单提供者是外部协作方：核心只通过 generate / serialize 两个调用与之交互。
使用 typing.Protocol 而非 ABC，外部实现无需继承即可满足协议。
"""

from __future__ import annotations

from typing import Protocol

from pkgmirror.core.models import Manifest


class ManifestProvider(Protocol):
    """清单提供者协议"""

    def generate(self, project: str, channel: str) -> Manifest:
        """生成指定 project/channel 的上游清单，无法生成时抛出异常"""
        ...

    def serialize(self, manifest: Manifest) -> str:
        """把清单序列化为 JSON 文本"""
        ...
