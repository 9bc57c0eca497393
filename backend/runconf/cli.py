"""
命令行入口 - runconf

用法：
    runconf get run.conf override.conf --token n_events --type int
    runconf dump run.conf --format yaml
    runconf stats --log-file run.log
    runconf --summary get run.conf --token output   # 结束时写出运行摘要
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

import yaml

from . import __version__
from .config import configure_logging, reload_settings
from .lookup import getconfig
from .models import ConfigStore
from .models.entry import KIND_NAMES
from .runtime import RunSummary, write_log


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="runconf", description="读取 TOKEN VALUE 配置文件并查询")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    ap.add_argument("--settings", type=Path, default=None, help="runconf.yaml 路径")
    ap.add_argument("--log-level", default=None, help="覆盖设置中的日志级别")
    ap.add_argument("--summary", action="store_true", help="结束时写出运行摘要")
    sub = ap.add_subparsers(dest="command", required=True)

    get = sub.add_parser("get", help="查询单个 token")
    get.add_argument("files", nargs="+", help="配置文件（按顺序合并，后者覆盖前者）")
    get.add_argument("--token", required=True)
    get.add_argument("--type", dest="as_type", choices=KIND_NAMES, default="string")

    dump = sub.add_parser("dump", help="输出合并后的全部配置")
    dump.add_argument("files", nargs="+")
    dump.add_argument("--format", choices=("text", "json", "yaml"), default="text")

    stats = sub.add_parser("stats", help="写出当前进程统计")
    stats.add_argument("--log-file", default="", help="日志文件；省略时写到标准错误")
    return ap


def _load_store(files: list[str]) -> ConfigStore:
    store = ConfigStore()
    for name in files:
        store.append(name)
    return store


def cmd_get(args: argparse.Namespace) -> int:
    value = getconfig(_load_store(args.files), args.token, args.as_type)
    if args.as_type == "char" and value == "\0":
        value = ""
    print(value)
    return 0


def cmd_dump(args: argparse.Namespace) -> int:
    data = _load_store(args.files).to_dict()
    if args.format == "json":
        print(json.dumps(data, ensure_ascii=False, indent=2))
    elif args.format == "yaml":
        sys.stdout.write(yaml.safe_dump(data, allow_unicode=True, sort_keys=True))
    else:
        for token, raw in data.items():
            print(f"{token} {raw}")
    return 0


def cmd_stats(args: argparse.Namespace, summary: RunSummary | None) -> int:
    started_at = summary.start_time_hr if summary else ""
    return 0 if write_log(args.log_file, started_at=started_at) else 1


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    settings = reload_settings(args.settings) if args.settings else reload_settings()
    if args.log_level:
        settings.logging.log_level = args.log_level
    configure_logging(settings.logging)

    summary = RunSummary.from_settings(settings.summary) if args.summary else None
    try:
        if args.command == "get":
            return cmd_get(args)
        if args.command == "dump":
            return cmd_dump(args)
        return cmd_stats(args, summary)
    finally:
        if summary is not None:
            summary.finalize()


if __name__ == "__main__":
    sys.exit(main())
