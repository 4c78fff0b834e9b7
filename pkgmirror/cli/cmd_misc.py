"""CLI - 服务启动与配置查看"""

from __future__ import annotations

import click

from pkgmirror.cli import _svc
from pkgmirror.utils.file_io import dump_yaml


def register(group: click.Group) -> None:
    group.add_command(serve)
    group.add_command(show_config)


@click.command()
@click.option("--host", default="127.0.0.1", help="监听地址")
@click.option("--port", default=8080, help="监听端口")
def serve(host: str, port: int) -> None:
    """启动镜像服务（清单查询 + 包文件下载）"""
    from pkgmirror.web.app import run_server
    run_server(host=host, port=port)


@click.command(name="show-config")
def show_config() -> None:
    """以 YAML 输出当前生效的配置"""
    click.echo(dump_yaml(_svc().config.to_dict()), nl=False)
