"""
配置加载单元测试

每个模块完成后必须运行：pytest backend/tests/unit/test_config.py -v
"""

import logging
from pathlib import Path

import pytest

from flightlog.config import RuntimeConfig, configure_logging, reload_config
from flightlog.config.runtime_config import DEFAULT_CONFIG_PATH

YAML_TEXT = """
runtime_options:
  paths:
    storage_dir: data
    flights_path: flights.yaml
  layout:
    row_height: {default: 24}
    repeat_header: {default: true}
    columns:
      - {label: Date, width: 100}
      - {label: Pilot, width: 200}
  storage:
    file_prefix: Logbook
    staging_dir: staging
  concurrency:
    max_workers: {default: 3}
  logging:
    log_level: {default: DEBUG}
"""


class TestRuntimeConfig:
    """运行期配置测试"""

    def test_default_config(self):
        """测试默认配置"""
        config = RuntimeConfig()
        assert config.concurrency.max_workers == 1
        assert config.storage.file_prefix == "FlightLog"
        assert config.storage.extension == "pdf"
        assert config.logging.log_level == "INFO"
        assert config.layout.repeat_header is False

    def test_from_yaml(self, temp_dir: Path):
        """测试YAML加载（含 {default: 值} 写法）"""
        path = temp_dir / "runtime.yaml"
        path.write_text(YAML_TEXT, encoding="utf-8")

        config = RuntimeConfig.from_yaml(path)
        assert config.layout.row_height == 24
        assert config.layout.repeat_header is True
        assert config.layout.labels == ["Date", "Pilot"]
        assert config.storage.file_prefix == "Logbook"
        assert config.concurrency.max_workers == 3
        assert config.logging.log_level == "DEBUG"

    def test_relative_paths_resolved(self, temp_dir: Path):
        """测试相对路径基于配置文件目录解析"""
        path = temp_dir / "runtime.yaml"
        path.write_text(YAML_TEXT, encoding="utf-8")

        config = RuntimeConfig.from_yaml(path)
        base = temp_dir.resolve()
        assert config.storage_dir == base / "data"
        assert config.flights_path == base / "flights.yaml"
        assert config.get_staging_dir() == base / "staging"
        assert config.get_documents_dir() == base / "data" / "documents"
        assert config.get_index_path() == base / "data" / "documents.json"

    def test_missing_file_uses_defaults(self, temp_dir: Path):
        """测试配置文件缺失时使用默认值"""
        config = RuntimeConfig.from_yaml(temp_dir / "missing.yaml")
        assert config.layout.row_height == 20
        assert config.flights_path is None

    def test_invalid_layout_rejected(self, temp_dir: Path):
        """测试列宽超出页宽"""
        path = temp_dir / "runtime.yaml"
        path.write_text(
            "runtime_options:\n  layout:\n    columns:\n      - {label: Wide, width: 2000}\n",
            encoding="utf-8",
        )
        with pytest.raises(ValueError):
            RuntimeConfig.from_yaml(path)

    def test_project_config_file(self):
        """测试仓库自带的配置文件"""
        path = Path(__file__).resolve().parents[3] / DEFAULT_CONFIG_PATH
        config = RuntimeConfig.from_yaml(path)
        assert len(config.layout.columns) == 8
        assert config.layout.labels[5] == "Duration"

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch):
        """测试环境变量覆盖"""
        monkeypatch.setenv("FLIGHTLOG_CONCURRENCY__MAX_WORKERS", "4")
        assert RuntimeConfig().concurrency.max_workers == 4

    def test_ensure_dirs(self, runtime_config: RuntimeConfig):
        """测试创建目录"""
        runtime_config.ensure_dirs()
        assert runtime_config.get_documents_dir().is_dir()
        assert runtime_config.get_staging_dir().is_dir()

    def test_reload_config(self, temp_dir: Path):
        """测试重新加载全局配置"""
        path = temp_dir / "runtime.yaml"
        path.write_text(YAML_TEXT, encoding="utf-8")
        try:
            assert reload_config(path).storage.file_prefix == "Logbook"
        finally:
            reload_config(temp_dir / "missing.yaml")


class TestConfigureLogging:
    """日志初始化测试"""

    def test_handlers_replaced_on_reconfigure(self, runtime_config: RuntimeConfig):
        """测试重复调用不叠加处理器"""
        root = logging.getLogger()
        original_level = root.level
        try:
            configure_logging(runtime_config)
            configure_logging(runtime_config)
            ours = [h for h in root.handlers if getattr(h, "_flightlog", False)]
            assert len(ours) == 1
            assert root.level == logging.INFO
        finally:
            for handler in [h for h in root.handlers if getattr(h, "_flightlog", False)]:
                root.removeHandler(handler)
            root.setLevel(original_level)

    def test_log_to_file(self, runtime_config: RuntimeConfig):
        """测试写入日志文件"""
        runtime_config.logging.log_to_file = True
        root = logging.getLogger()
        original_level = root.level
        try:
            configure_logging(runtime_config)
            logging.getLogger("flightlog.test").info("hello")
            for handler in root.handlers:
                handler.flush()
            log_file = runtime_config.storage_dir / runtime_config.logging.log_file
            assert "hello" in log_file.read_text(encoding="utf-8")
        finally:
            for handler in [h for h in root.handlers if getattr(h, "_flightlog", False)]:
                root.removeHandler(handler)
                handler.close()
            root.setLevel(original_level)
