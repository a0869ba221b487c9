"""
pytest 配置与公共 fixtures

使用方式：
    def test_something(runtime_config, sample_records):
        assert len(sample_records) == 3
"""

from __future__ import annotations

import tempfile
from datetime import date, datetime
from pathlib import Path
from typing import Callable, Generator

import pytest

from flightlog.config import LayoutConfig, RuntimeConfig, StorageConfig
from flightlog.models import FlightRecord
from flightlog.storage import DocumentStore, InMemoryDocumentIndex


# ============================================================================
# 文件 Fixtures
# ============================================================================

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """临时目录"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# ============================================================================
# 配置 Fixtures
# ============================================================================

@pytest.fixture
def layout_config() -> LayoutConfig:
    """默认排版配置"""
    return LayoutConfig()


@pytest.fixture
def runtime_config(temp_dir: Path) -> RuntimeConfig:
    """运行期配置（存储与暂存都在临时目录内）"""
    return RuntimeConfig(
        storage_dir=temp_dir / "storage",
        storage=StorageConfig(staging_dir=temp_dir / "staging"),
    )


# ============================================================================
# 数据模型 Fixtures
# ============================================================================

def _make_record(duration: str = "01:00", **overrides) -> FlightRecord:
    """构造飞行记录"""
    data = {
        "date": date(2025, 2, 19),
        "pilot_name": "Test Pilot",
        "aircraft": "G-ABCD",
        "departure_location": "EGKA",
        "departure_time": datetime(2025, 2, 19, 10, 0),
        "arrival_location": "EGHR",
        "arrival_time": datetime(2025, 2, 19, 11, 0),
        "takeoffs": 1,
        "landings": 1,
        "duration": duration,
    }
    data.update(overrides)
    return FlightRecord(**data)


@pytest.fixture
def make_record() -> Callable[..., FlightRecord]:
    """飞行记录工厂"""
    return _make_record


@pytest.fixture
def sample_records() -> list[FlightRecord]:
    """典型三条记录：01:15 / 00:45 / 02:00"""
    return [
        _make_record("01:15"),
        _make_record("00:45", aircraft="G-WXYZ"),
        _make_record("02:00", pilot_name="Second Pilot"),
    ]


# ============================================================================
# 存储 Fixtures
# ============================================================================

class FixedClock:
    """固定时钟（模拟同一秒内多次保存）"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def fixed_clock() -> FixedClock:
    return FixedClock(datetime(2025, 2, 19, 14, 30, 5))


@pytest.fixture
def memory_index() -> InMemoryDocumentIndex:
    return InMemoryDocumentIndex()


@pytest.fixture
def document_store(
    runtime_config: RuntimeConfig,
    memory_index: InMemoryDocumentIndex,
    fixed_clock: FixedClock,
) -> DocumentStore:
    """文档存储（内存索引 + 固定时钟）"""
    return DocumentStore(runtime_config, index=memory_index, clock=fixed_clock)
