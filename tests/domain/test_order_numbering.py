"""Tests for order number generation."""

import threading

from storefront.order.numbering import PREFIX, OrderNumberGenerator, next_order_number


def test_format():
    number = next_order_number()
    assert number.startswith(PREFIX)
    assert len(number) == len(PREFIX) + 26


def test_many_numbers_never_collide():
    numbers = [next_order_number() for _ in range(10_000)]
    assert len(set(numbers)) == len(numbers)


def test_numbers_increase_within_the_same_millisecond():
    generator = OrderNumberGenerator(clock=lambda: 1_700_000_000.0)
    numbers = [generator.next() for _ in range(500)]
    assert numbers == sorted(numbers)
    assert len(set(numbers)) == 500


def test_clock_stepping_back_keeps_numbers_increasing():
    ticks = iter([1_700_000_001.0, 1_700_000_000.0, 1_700_000_000.0])
    generator = OrderNumberGenerator(clock=lambda: next(ticks))
    numbers = [generator.next() for _ in range(3)]
    assert numbers == sorted(numbers)
    assert len(set(numbers)) == 3


def test_random_part_overflow_rolls_into_next_millisecond():
    generator = OrderNumberGenerator(clock=lambda: 1_700_000_000.0, entropy=lambda bits: (1 << bits) - 1)
    first, second = generator.next(), generator.next()
    assert second > first


def test_threads_share_one_sequence():
    generator = OrderNumberGenerator()
    results = []
    lock = threading.Lock()

    def worker():
        produced = [generator.next() for _ in range(1_000)]
        with lock:
            results.extend(produced)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(set(results)) == 8_000
