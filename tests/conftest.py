import pytest

from utilkit.core.config import Settings, set_settings
from utilkit.utils import id_generator


class FakeClock:
    """可控的毫秒时钟，freeze_calls次调用之后每次调用前进1毫秒"""

    def __init__(self, now: int, freeze_calls=None):
        self.now = now
        self.freeze_calls = freeze_calls
        self.calls = 0

    def __call__(self) -> int:
        self.calls += 1
        if self.freeze_calls is not None and self.calls > self.freeze_calls:
            self.now += 1
        return self.now


@pytest.fixture(autouse=True)
def settings(monkeypatch):
    """每个测试使用独立的默认配置和默认生成器"""
    current = Settings()
    set_settings(current)
    monkeypatch.setattr(id_generator, "_default_generator", None)
    yield current
    set_settings(None)


@pytest.fixture
def state():
    return id_generator.GeneratorState()


@pytest.fixture
def clock():
    return FakeClock(id_generator.EPOCH + 1_000_000)
