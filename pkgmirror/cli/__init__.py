"""pkgmirror 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
"""

import os
from typing import Any

import click

from pkgmirror import __version__
from pkgmirror.services.container import get_container, reset_container
from pkgmirror.utils.logger import setup_logging


def _svc() -> Any:
    """获取全局服务容器的快捷方式"""
    return get_container()


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config", "-c", "config_path", default=None,
    envvar="PKGMIRROR_CONFIG", help="配置文件路径（YAML）",
)
def main(config_path: str | None) -> None:
    """pkgmirror - 基于产品清单的软件包本地镜像"""
    setup_logging(
        level=os.getenv("PKGMIRROR_LOG_LEVEL", "INFO"),
        json_output=os.getenv("PKGMIRROR_LOG_JSON", "") == "1",
    )
    if config_path:
        from pkgmirror.core.config import init_config
        from pkgmirror.core.exceptions import MirrorError
        try:
            init_config(config_path)
        except MirrorError as e:
            raise click.ClickException(str(e)) from e
        reset_container()


# 注册各领域子命令
from pkgmirror.cli.cmd_cache import register as _reg_cache  # noqa: E402
from pkgmirror.cli.cmd_misc import register as _reg_misc  # noqa: E402

_reg_cache(main)
_reg_misc(main)
