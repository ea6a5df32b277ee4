import socket

import pytest

from crosssocket import runtime
from crosssocket.manager import SocketManager, WatchedSocket
from crosssocket.sockets import Socket, SocketError


@pytest.fixture
def manager():
    mgr = SocketManager.instance()
    yield mgr
    mgr.close_sockets()
    mgr.release()


@pytest.fixture
def pair():
    a, b = socket.socketpair()
    left, right = Socket(a), Socket(b)
    yield left, right
    left.close()
    right.close()


def test_instance_is_singleton(manager):
    assert SocketManager.instance() is manager


def test_instance_initializes_runtime(manager):
    assert runtime.is_initialized() is True


def test_release_cleans_up_and_resets_singleton():
    first = SocketManager.instance()
    first.release()
    assert runtime.is_initialized() is False
    second = SocketManager.instance()
    try:
        assert second is not first
        assert runtime.is_initialized() is True
    finally:
        second.release()


def test_add_socket_returns_sequential_ids(manager, pair):
    left, right = pair
    assert manager.add_socket(left, True, False) == 0
    assert manager.add_socket(right, True, False) == 1


def test_watched_socket_fields(pair):
    left, _ = pair
    ws = WatchedSocket(left, 4, True, False)
    assert ws.socket is left
    assert ws.id == 4
    assert ws.on_read is None and ws.on_write is None


def test_run_once_dispatches_read(manager, pair):
    left, right = pair
    seen = []
    manager.add_socket(left, True, False, on_read=lambda s: seen.append(s.receive(5)))
    right.send(b"hello")
    manager.run_once(1000)
    assert seen == [b"hello"]


def test_run_once_skips_read_when_no_data(manager, pair):
    left, _ = pair
    seen = []
    manager.add_socket(left, True, False, on_read=seen.append)
    manager.run_once(0)
    assert seen == []


def test_run_once_ignores_unmonitored_read(manager, pair):
    left, right = pair
    seen = []
    manager.add_socket(left, False, False, on_read=seen.append)
    right.send(b"x")
    manager.run_once(0)
    assert seen == []


def test_run_once_dispatches_write(manager, pair):
    left, _ = pair
    seen = []
    manager.add_socket(left, False, True, on_write=seen.append)
    manager.run_once(1000)
    assert seen == [left]


def test_run_once_without_callbacks_is_quiet(manager, pair):
    left, right = pair
    manager.add_socket(left, True, True)
    right.send(b"data")
    manager.run_once(0)
    assert left.receive(4) == b"data"


def test_run_once_on_closed_socket_raises(manager, pair):
    left, _ = pair
    manager.add_socket(left, True, False)
    left.close()
    with pytest.raises(SocketError):
        manager.run_once(0)


def test_run_loop_stops_when_condition_false(manager, pair):
    left, _ = pair
    writes = []
    manager.add_socket(left, False, True, on_write=writes.append)
    remaining = iter([True, True, True, False])
    manager.run_loop(lambda: next(remaining))
    assert len(writes) == 3


def test_close_socket_closes_and_shifts_ids(manager, pair):
    left, right = pair
    manager.add_socket(left, True, False)
    manager.add_socket(right, True, False)
    manager.close_socket(0)
    assert left.fileno() == -1
    assert right.fileno() >= 0
    manager.close_socket(0)
    assert right.fileno() == -1


def test_close_socket_invalid_id(manager, pair):
    left, _ = pair
    manager.add_socket(left, True, False)
    with pytest.raises(IndexError):
        manager.close_socket(1)
    with pytest.raises(IndexError):
        manager.close_socket(-1)


def test_close_sockets_closes_all_and_empties(manager, pair):
    left, right = pair
    manager.add_socket(left, True, False)
    manager.add_socket(right, False, True)
    manager.close_sockets()
    assert left.fileno() == -1
    assert right.fileno() == -1
    with pytest.raises(IndexError):
        manager.close_socket(0)
    a, b = socket.socketpair()
    fresh = Socket(a)
    try:
        assert manager.add_socket(fresh, True, False) == 0
    finally:
        b.close()