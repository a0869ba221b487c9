"""
飞行记录本 - 后端核心模块

模块结构：
- config/     运行期配置加载
- models/     数据模型定义
- totals/     飞行时间统计
- doc_gen/    报表生成（行构建/分页排版/PDF渲染）
- storage/    文档存储（暂存/持久化/索引）与飞行记录来源
- pipeline/   报表任务编排与执行
- cli.py      命令行入口
"""

__version__ = "0.1.0"
