import string
from concurrent.futures import ThreadPoolExecutor

import pytest

from tests.conftest import FakeClock
from utilkit.core.config import IdConfig, Settings, set_settings
from utilkit.core.exceptions import (
    ClockRegressionError,
    InvalidMachineIdError,
    TimestampOverflowError,
    ValidationError,
)
from utilkit.utils import id_generator
from utilkit.utils.id_generator import (
    EPOCH,
    MAX_SEQUENCE,
    MAX_TIMESTAMP,
    UNIQUE_ID_ALPHABET,
    GeneratorState,
    SnowflakeGenerator,
    decode_snowflake_id,
    get_default_generator,
    to_base36,
)


@pytest.mark.parametrize("machine_id", [-1, 32, 100])
def test_machine_id_out_of_range_is_rejected(machine_id):
    with pytest.raises(InvalidMachineIdError) as exc_info:
        SnowflakeGenerator(machine_id)
    assert exc_info.value.machine_id == machine_id
    assert exc_info.value.code == "INVALID_MACHINE_ID"


@pytest.mark.parametrize("machine_id", [1.5, "1", None, True])
def test_non_integer_machine_id_is_rejected(machine_id):
    with pytest.raises(InvalidMachineIdError):
        SnowflakeGenerator(machine_id)


@pytest.mark.parametrize("machine_id", [0, 31])
def test_machine_id_bounds_are_accepted(machine_id):
    assert SnowflakeGenerator(machine_id).machine_id == machine_id


def test_snowflake_id_is_decimal_string(state):
    value = SnowflakeGenerator(3, state=state).get_snowflake_id()
    assert isinstance(value, str)
    assert value.isdigit()
    assert int(value) > 0


def test_snowflake_id_layout(state, clock):
    generator = SnowflakeGenerator(5, clock=clock, state=state)

    first = generator.next_id()
    second = generator.next_id()

    assert first == (1_000_000 << 17) | (5 << 12)
    assert second == first + 1


def test_ids_are_monotonic(state):
    generator = SnowflakeGenerator(1, state=state)

    parts = [decode_snowflake_id(generator.get_snowflake_id()) for _ in range(5000)]
    pairs = [(p.timestamp, p.sequence) for p in parts]

    assert all(a < b for a, b in zip(pairs, pairs[1:]))


def test_concurrent_ids_are_unique(state):
    generator = SnowflakeGenerator(2, state=state)

    with ThreadPoolExecutor(max_workers=8) as executor:
        ids = list(executor.map(lambda _: generator.get_snowflake_id(), range(10_000)))

    assert len(ids) == 10_000
    assert len(set(ids)) == 10_000


def test_instances_share_state(state, clock):
    first = SnowflakeGenerator(1, clock=clock, state=state)
    second = SnowflakeGenerator(1, clock=clock, state=state)

    ids = [first.next_id(), second.next_id(), first.next_id()]

    assert [decode_snowflake_id(i).sequence for i in ids] == [0, 1, 2]
    assert len(set(ids)) == 3


def test_instances_use_process_state_by_default():
    first = SnowflakeGenerator(1)
    second = SnowflakeGenerator(2)
    assert first._state is second._state is id_generator._process_state


def test_sequence_wraparound_waits_for_next_millisecond(state):
    # 前4097次读取时钟停在同一毫秒，之后开始前进
    clock = FakeClock(EPOCH + 42, freeze_calls=MAX_SEQUENCE + 2)
    generator = SnowflakeGenerator(7, clock=clock, state=state)

    parts = [decode_snowflake_id(generator.next_id()) for _ in range(MAX_SEQUENCE + 2)]

    assert {p.timestamp for p in parts[:-1]} == {42}
    assert [p.sequence for p in parts[:-1]] == list(range(MAX_SEQUENCE + 1))
    assert parts[-1].timestamp == 43
    assert parts[-1].sequence == 0
    assert state.last_timestamp == 43


@pytest.mark.parametrize("machine_id", [0, 9, 31])
def test_decode_recovers_machine_id(state, machine_id):
    generator = SnowflakeGenerator(machine_id, state=state)
    for _ in range(10):
        assert decode_snowflake_id(generator.get_snowflake_id()).machine_id == machine_id


def test_decode_created_at(state, clock):
    generator = SnowflakeGenerator(1, clock=clock, state=state)
    parts = decode_snowflake_id(generator.get_snowflake_id())

    assert parts.unix_millis == clock.now
    assert parts.created_at.year == 2021


@pytest.mark.parametrize("value", ["abc", "", "-5", None])
def test_decode_rejects_invalid_values(value):
    with pytest.raises(ValidationError):
        decode_snowflake_id(value)


def test_clock_regression_is_rejected_without_mutating_state(state, clock):
    generator = SnowflakeGenerator(1, clock=clock, state=state)
    generator.next_id()
    generator.next_id()
    last_timestamp, sequence = state.last_timestamp, state.sequence

    clock.now -= 5
    with pytest.raises(ClockRegressionError) as exc_info:
        generator.get_snowflake_id()

    assert exc_info.value.last_timestamp == last_timestamp
    assert exc_info.value.timestamp == last_timestamp - 5
    assert (state.last_timestamp, state.sequence) == (last_timestamp, sequence)


def test_clock_recovers_after_regression(state, clock):
    generator = SnowflakeGenerator(1, clock=clock, state=state)
    before = generator.next_id()

    clock.now -= 1
    with pytest.raises(ClockRegressionError):
        generator.next_id()

    clock.now += 2
    assert generator.next_id() > before


@pytest.mark.parametrize("now", [EPOCH - 1, EPOCH + MAX_TIMESTAMP + 1])
def test_timestamp_outside_41_bits_is_rejected(state, now):
    generator = SnowflakeGenerator(1, clock=FakeClock(now), state=state)

    with pytest.raises(TimestampOverflowError):
        generator.next_id()
    assert state.last_timestamp == -1


def test_unique_id_without_timestamp():
    value = SnowflakeGenerator(1).get_unique_id(6, False)

    assert len(value) == 6
    assert all(char in UNIQUE_ID_ALPHABET for char in value)


def test_unique_id_with_timestamp(state, clock):
    generator = SnowflakeGenerator(1, clock=clock, state=state)

    value = generator.get_unique_id(6, True)
    prefix = value[:-6]

    assert len(value) > 6
    assert prefix == to_base36(clock.now)
    assert int(prefix, 36) == clock.now


def test_unique_id_defaults():
    value = SnowflakeGenerator(1).get_unique_id()
    assert len(value) > 4
    assert all(char in string.ascii_letters + string.digits for char in value)


def test_unique_id_degenerate_case_is_empty():
    assert SnowflakeGenerator(1).get_unique_id(0, False) == ""


def test_alphabet_has_62_characters():
    assert len(set(UNIQUE_ID_ALPHABET)) == 62


@pytest.mark.parametrize(
    "value, expected", [(0, "0"), (35, "z"), (36, "10"), (1295, "zz"), (46656, "1000")]
)
def test_to_base36(value, expected):
    assert to_base36(value) == expected
    assert int(expected, 36) == value


def test_default_generator_uses_configured_machine_id():
    set_settings(Settings(id=IdConfig(machine_id=9)))

    generator = get_default_generator()

    assert generator.machine_id == 9
    assert get_default_generator() is generator
