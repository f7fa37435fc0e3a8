import random
from datetime import datetime, timedelta, timezone

import pytest

from csbuffer.event_codes import Category
from csbuffer.simulator import WATERMARK, BufferSimulator

START = datetime(2016, 1, 1, 20, 0, 0, tzinfo=timezone.utc)


def feed(simulator, make_event, sizes, device_id="DEV1", category=Category.AD_DISPLAY):
    """크기 목록대로 이벤트를 넣고 패키지를 만든 이벤트 인덱스 반환"""
    emitted = []
    for i, size in enumerate(sizes):
        event = make_event(device_id, category, START + timedelta(seconds=i), size)
        if simulator.observe(event) is not None:
            emitted.append(i)
    return emitted


class TestFlushRule:
    """watermark 초과 시 패키지 전송"""

    def test_known_sequence(self, make_event):
        simulator = BufferSimulator()
        simulator.prime("DEV1", 700)

        emitted = feed(simulator, make_event, [20, 40, 10, 760, 1])

        # 720 -> 760>750 전송(40) -> 50 -> 810>750 전송(760) -> 761>750 전송(1)
        assert emitted == [1, 3, 4]
        assert simulator.buffer_level("DEV1") == 1
        assert simulator.packages_sent == 3

    def test_exactly_watermark_does_not_flush(self, make_event):
        simulator = BufferSimulator(watermark=100)
        simulator.prime("DEV1", 90)

        assert feed(simulator, make_event, [10]) == []
        assert simulator.buffer_level("DEV1") == 100

    def test_matches_reference_loop(self, make_event):
        """임의 크기 시퀀스에서도 규칙과 일치"""
        sizes = random.Random(7).choices(range(5, 400), k=300)
        simulator = BufferSimulator()
        simulator.prime("DEV1", 123)

        expected, level = [], 123
        for i, size in enumerate(sizes):
            if level + size > WATERMARK:
                expected.append(i)
                level = size
            else:
                level += size

        assert feed(simulator, make_event, sizes) == expected
        assert simulator.buffer_level("DEV1") == level

    def test_package_fields(self, make_event):
        simulator = BufferSimulator(watermark=10)
        simulator.prime("STB-7", 9)
        event = make_event("STB-7", Category.KEY_PRESS, START, 5)

        package = simulator.observe(event)

        assert package.timestamp == event.timestamp
        assert package.device_id == "STB-7"
        assert package.category == Category.KEY_PRESS
        assert package.event_name == "Key Press"

    def test_devices_are_independent(self, make_event):
        simulator = BufferSimulator(watermark=100)
        simulator.prime("A", 99)
        simulator.prime("B", 0)

        assert simulator.observe(make_event("A", size_bytes=5)) is not None
        assert simulator.observe(make_event("B", size_bytes=5)) is None
        assert simulator.buffer_level("A") == 5
        assert simulator.buffer_level("B") == 5


class TestInitialLevel:
    """처음 보는 디바이스의 초기 버퍼값"""

    def test_random_start(self, make_event, zero_rng):
        zero_rng.value = 300
        simulator = BufferSimulator(rng=zero_rng)

        simulator.observe(make_event("DEV1", size_bytes=10))

        assert zero_rng.calls == [WATERMARK]
        assert simulator.buffer_level("DEV1") == 310

    def test_rng_used_once_per_device(self, make_event, zero_rng):
        simulator = BufferSimulator(rng=zero_rng)
        for _ in range(3):
            simulator.observe(make_event("DEV1"))
        simulator.observe(make_event("DEV2"))

        assert len(zero_rng.calls) == 2
        assert simulator.device_count == 2

    def test_seeded_levels_in_range(self, make_event):
        simulator = BufferSimulator(seed=1)
        for n in range(200):
            simulator.observe(make_event(f"DEV{n}", size_bytes=5))

        # 초기값 [0, 750) + 5 이거나, 초과해서 5로 재설정
        for n in range(200):
            assert 5 <= simulator.buffer_level(f"DEV{n}") < WATERMARK + 5

    def test_same_seed_same_packages(self, make_event):
        def run():
            simulator = BufferSimulator(seed=2016)
            sizes = random.Random(3).choices(range(5, 200), k=100)
            return [feed(simulator, make_event, sizes, device_id=f"DEV{d}") for d in range(5)]

        assert run() == run()

    def test_unknown_device_level(self):
        assert BufferSimulator().buffer_level("nobody") is None


class TestSuppression:
    """진단용 이벤트 제외 (-S)"""

    def test_diagnostic_dropped(self, make_event):
        simulator = BufferSimulator(watermark=100, suppress_diagnostics=True)
        simulator.prime("DEV1", 99)

        package = simulator.observe(make_event("DEV1", Category.STATUS, size_bytes=50))

        assert package is None
        assert simulator.buffer_level("DEV1") == 99
        assert simulator.suppressed_events == 1

    def test_diagnostic_still_registers_device(self, make_event, zero_rng):
        simulator = BufferSimulator(rng=zero_rng, suppress_diagnostics=True)
        simulator.observe(make_event("DEV1", Category.BUTTON_CONFIG))

        assert simulator.device_count == 1
        assert simulator.buffer_level("DEV1") == 0

    def test_diagnostic_counted_without_suppression(self, make_event):
        simulator = BufferSimulator(watermark=100)
        simulator.prime("DEV1", 99)

        assert simulator.observe(make_event("DEV1", Category.STATUS, size_bytes=50)) is not None


class TestValidation:

    @pytest.mark.parametrize("watermark", [0, -1])
    def test_bad_watermark(self, watermark):
        with pytest.raises(ValueError):
            BufferSimulator(watermark=watermark)

    @pytest.mark.parametrize("level", [-1, WATERMARK])
    def test_bad_prime_level(self, level):
        with pytest.raises(ValueError):
            BufferSimulator().prime("DEV1", level)
