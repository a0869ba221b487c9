"""
命令行入口 - 直接调用核心模块（统计/生成报表/管理已保存文档）

用法：
  flightlog totals --flights flights.yaml                 # 飞行统计
  flightlog report --flights flights.yaml --out log.pdf   # 生成报表（不保存）
  flightlog report --flights flights.yaml --save          # 生成并保存
  flightlog list                                          # 已保存文档
  flightlog show <ID> --out copy.pdf                      # 导出已保存文档
  flightlog delete <ID>                                   # 删除已保存文档
  flightlog stale --purge                                 # 清理文件缺失的记录
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import RuntimeConfig, configure_logging, reload_config
from .interfaces import FlightLogError
from .pipeline import ReportExecutor
from .storage import DocumentStore, YamlFlightRecordSource

logger = logging.getLogger(__name__)


def totals_command(config: RuntimeConfig, flights: Path) -> int:
    """输出飞行统计"""
    executor = ReportExecutor(config, record_source=YamlFlightRecordSource(flights))
    for stat in executor.totals():
        print(f"{stat.label:<25} {stat.value}")
    return 0


def report_command(
    config: RuntimeConfig,
    flights: Path,
    title: str | None,
    save: bool,
    out: Path | None,
) -> int:
    """生成报表"""
    executor = ReportExecutor(config)
    job = executor.create_job(title=title, save=save)
    job.flights_path = flights

    try:
        document = executor.execute(job)
        print(f"报表: {document.title} ({document.page_count}页, {document.size_bytes}字节)")

        if out:
            out.parent.mkdir(parents=True, exist_ok=True)
            out.write_bytes(document.data)
            print(f"已导出: {out}")

        if job.artifacts.stored:
            record = job.artifacts.stored
            print(f"已保存: {record.file_name} (id={record.id})")
    finally:
        # 命令行没有重试路径，未保存的暂存文件一律丢弃
        if job.artifacts.staged:
            executor.store.discard(job.artifacts.staged)
            job.artifacts.staged = None
    return 0


def list_command(config: RuntimeConfig) -> int:
    """列出已保存文档"""
    records = DocumentStore(config).list()
    if not records:
        print("没有已保存的文档")
        return 0
    for record in records:
        print(f"{record.id}  {record.file_name}  {record.created_at:%Y-%m-%d %H:%M:%S}")
    return 0


def show_command(config: RuntimeConfig, record_id: str, out: Path | None) -> int:
    """显示/导出已保存文档"""
    store = DocumentStore(config)
    record = store.get(record_id)
    if record is None:
        print(f"文档不存在: {record_id}", file=sys.stderr)
        return 1

    if out:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_bytes(store.load(record))
        print(f"已导出: {out}")
    else:
        print(store.path_for(record))
    print(f"页数: {store.count_pages(record)}")
    return 0


def delete_command(config: RuntimeConfig, record_id: str) -> int:
    """删除已保存文档"""
    store = DocumentStore(config)
    record = store.get(record_id)
    if record is None:
        print(f"文档不存在: {record_id}", file=sys.stderr)
        return 1
    store.delete(record)
    print(f"已删除: {record.file_name}")
    return 0


def stale_command(config: RuntimeConfig, purge: bool) -> int:
    """列出（并可清理）文件缺失的记录"""
    store = DocumentStore(config)
    stale = store.find_stale()
    for record in stale:
        print(f"{record.id}  {record.file_name}  (文件缺失)")
        if purge:
            store.delete(record)
    if purge and stale:
        print(f"已清理 {len(stale)} 条记录")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flightlog",
        description="飞行记录本 - 飞行统计与分页报表",
    )
    parser.add_argument(
        "--config",
        default="config/runtime.yaml",
        help="运行期配置文件（默认：config/runtime.yaml）",
    )

    subparsers = parser.add_subparsers(dest="command", help="命令")

    totals_parser = subparsers.add_parser("totals", help="飞行统计")
    totals_parser.add_argument("--flights", required=True, help="飞行记录文件（YAML/JSON）")

    report_parser = subparsers.add_parser("report", help="生成分页报表")
    report_parser.add_argument("--flights", required=True, help="飞行记录文件（YAML/JSON）")
    report_parser.add_argument("--title", default=None, help="报表标题")
    report_parser.add_argument("--save", action="store_true", help="保存到文档目录")
    report_parser.add_argument("--out", default="", help="可选：导出PDF路径")

    subparsers.add_parser("list", help="列出已保存文档")

    show_parser = subparsers.add_parser("show", help="显示/导出已保存文档")
    show_parser.add_argument("record_id", help="文档ID")
    show_parser.add_argument("--out", default="", help="可选：导出PDF路径")

    delete_parser = subparsers.add_parser("delete", help="删除已保存文档")
    delete_parser.add_argument("record_id", help="文档ID")

    stale_parser = subparsers.add_parser("stale", help="列出文件缺失的记录")
    stale_parser.add_argument("--purge", action="store_true", help="删除这些记录")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    config = reload_config(args.config)
    configure_logging(config)

    try:
        if args.command == "totals":
            return totals_command(config, Path(args.flights))
        elif args.command == "report":
            return report_command(
                config,
                flights=Path(args.flights),
                title=args.title,
                save=args.save,
                out=Path(args.out) if args.out else None,
            )
        elif args.command == "list":
            return list_command(config)
        elif args.command == "show":
            return show_command(config, args.record_id, Path(args.out) if args.out else None)
        elif args.command == "delete":
            return delete_command(config, args.record_id)
        elif args.command == "stale":
            return stale_command(config, args.purge)
    except (FlightLogError, OSError) as e:
        logger.error(f"命令失败: {e}")
        print(f"错误: {e}", file=sys.stderr)
        return 1

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
