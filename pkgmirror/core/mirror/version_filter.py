"""版本筛选

包名键即包的版本号（如 "12.13.37"）。配置了 sync_min_version 时，
只有严格大于该版本的包进入镜像范围；未配置时全部镜像。
"""

from __future__ import annotations

from collections.abc import Iterable

from packaging.version import InvalidVersion, Version

from pkgmirror.core.exceptions import MalformedVersionError
from pkgmirror.core.models import PackageDescriptor


def parse_version(value: str, coordinates: tuple[str, ...] = ()) -> Version:
    try:
        return Version(value)
    except InvalidVersion as e:
        raise MalformedVersionError(value, coordinates) from e


def is_newer(pkg: PackageDescriptor, threshold: Version) -> bool:
    """包名键解析出的版本是否严格大于阈值"""
    return parse_version(pkg.name, pkg.coordinates) > threshold


def select_packages(
    packages: Iterable[PackageDescriptor], min_version: str | None = None,
) -> list[PackageDescriptor]:
    """返回待镜像的包，保持清单遍历顺序

    Raises:
        MalformedVersionError: 包名键或阈值不是合法版本号
    """
    if min_version is None:
        return list(packages)
    threshold = parse_version(min_version)
    return [pkg for pkg in packages if is_newer(pkg, threshold)]
