import threading
import time

import pytest

from score.resourcehandler import CacheError, DescriptorCache


def test_factory_called_once_per_key():
    cache = DescriptorCache()
    calls = []
    value = object()

    def factory():
        calls.append(1)
        return value
    assert cache.get('a', factory) is value
    assert cache.get('a', factory) is value
    assert len(calls) == 1
    assert 'a' in cache
    assert len(cache) == 1


def test_concurrent_callers_share_result():
    cache = DescriptorCache()
    calls = []
    results = []
    barrier = threading.Barrier(10)

    def factory():
        calls.append(1)
        time.sleep(0.1)
        return object()

    def worker():
        barrier.wait()
        results.append(cache.get('key', factory))
    threads = [threading.Thread(target=worker) for _ in range(10)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert len(calls) == 1
    assert len(results) == 10
    assert all(result is results[0] for result in results)


def test_factory_failure():
    cache = DescriptorCache()

    def failing():
        raise RuntimeError('boom')
    with pytest.raises(CacheError) as excinfo:
        cache.get('key', failing)
    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert 'key' not in cache
    assert cache.get('key', lambda: 'value') == 'value'


def test_factory_failure_reported_to_waiting_callers():
    cache = DescriptorCache()
    started = threading.Event()
    errors = []

    def failing():
        started.set()
        time.sleep(0.1)
        raise RuntimeError('boom')

    def owner():
        try:
            cache.get('key', failing)
        except CacheError as e:
            errors.append(e)

    def waiter():
        started.wait()
        try:
            cache.get('key', lambda: 'unexpected')
        except CacheError as e:
            errors.append(e)
    threads = [threading.Thread(target=owner),
               threading.Thread(target=waiter)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert len(errors) == 2
    assert 'key' not in cache


class Interrupted(BaseException):
    pass


def test_factory_interrupted():
    cache = DescriptorCache()

    def interrupted():
        raise Interrupted()
    with pytest.raises(Interrupted):
        cache.get('key', interrupted)
    assert 'key' not in cache
    assert cache.get('key', lambda: 'value') == 'value'


def test_factory_interruption_reported_to_waiting_callers():
    cache = DescriptorCache()
    started = threading.Event()
    errors = []

    def interrupted():
        started.set()
        time.sleep(0.1)
        raise Interrupted()

    def owner():
        try:
            cache.get('key', interrupted)
        except Interrupted as e:
            errors.append(e)

    def waiter():
        started.wait()
        try:
            cache.get('key', lambda: 'unexpected')
        except Interrupted as e:
            errors.append(e)
    threads = [threading.Thread(target=owner),
               threading.Thread(target=waiter)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(5)
    assert not any(thread.is_alive() for thread in threads)
    assert len(errors) == 2


def test_eviction_of_least_recently_used():
    cache = DescriptorCache(max_size=2)
    cache.get('a', lambda: 1)
    cache.get('b', lambda: 2)
    cache.get('a', lambda: None)
    cache.get('c', lambda: 3)
    assert 'a' in cache
    assert 'b' not in cache
    assert 'c' in cache
    assert len(cache) == 2


def test_clear():
    cache = DescriptorCache()
    cache.get('a', lambda: 1)
    cache.clear()
    assert len(cache) == 0
    assert cache.get('a', lambda: 2) == 2


def test_invalid_size():
    with pytest.raises(ValueError):
        DescriptorCache(0)
