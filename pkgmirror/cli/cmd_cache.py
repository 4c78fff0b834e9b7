"""CLI - 镜像更新与清单查询命令"""

from __future__ import annotations

import click

from pkgmirror.cli import _svc
from pkgmirror.core.exceptions import MirrorError
from pkgmirror.utils.file_io import dump_json


def register(group: click.Group) -> None:
    group.add_command(update)
    group.add_command(show_manifest)
    group.add_command(last_modified)
    group.add_command(manifest_path)


@click.command()
@click.option("--project", default=None, help="只更新指定项目（需同时指定 --channel）")
@click.option("--channel", default=None, help="只更新指定渠道（需同时指定 --project）")
def update(project: str | None, channel: str | None) -> None:
    """拉取上游清单、镜像软件包并写入改写后的清单"""
    if bool(project) != bool(channel):
        raise click.UsageError("--project 与 --channel 需同时指定")
    try:
        cache = _svc().cache
        if project and channel:
            cycle = cache.update_channel(project, channel)
            click.echo(
                f"{project}/{channel}: 选中 {cycle.selected}/{cycle.total}, "
                f"下载 {cycle.downloaded}, 命中缓存 {cycle.cached} -> {cycle.manifest_path}"
            )
        else:
            cache.update()
            click.echo("更新完成")
    except MirrorError as e:
        raise click.ClickException(f"[{e.code}] {e}") from e


@click.command(name="manifest")
@click.argument("project")
@click.argument("channel")
def show_manifest(project: str, channel: str) -> None:
    """输出已持久化的清单 JSON"""
    try:
        data = _svc().store.manifest_for(project, channel)
    except MirrorError as e:
        raise click.ClickException(f"[{e.code}] {e}") from e
    click.echo(dump_json(data), nl=False)


@click.command(name="last-modified")
@click.argument("project")
@click.argument("channel")
def last_modified(project: str, channel: str) -> None:
    """输出清单的最后更新时间（run_data.timestamp）"""
    try:
        click.echo(_svc().store.last_modified_for(project, channel))
    except MirrorError as e:
        raise click.ClickException(f"[{e.code}] {e}") from e


@click.command(name="path")
@click.argument("project")
@click.argument("channel")
def manifest_path(project: str, channel: str) -> None:
    """输出清单文件路径"""
    click.echo(str(_svc().store.path(project, channel)))
