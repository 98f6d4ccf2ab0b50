"""
Tests for disposables, emitters and observable values.
"""

import pytest

from celledit.disposable import Disposable, Holder
from celledit.observable import Emitter, Observable


class TestDisposable:

    def test_callbacks_run_once_in_reverse(self):
        owner = Disposable()
        calls = []
        owner.on_dispose(lambda: calls.append(1))
        owner.on_dispose(lambda: calls.append(2))

        owner.dispose()
        owner.dispose()
        assert calls == [2, 1]
        assert owner.is_disposed()

    def test_owned_objects_are_disposed(self):
        owner = Disposable()
        child = owner.auto_dispose(Disposable())
        detached = []
        owner.auto_dispose(lambda: detached.append(True))

        owner.dispose()
        assert child.is_disposed()
        assert detached == [True]

    def test_callback_added_after_dispose_runs_immediately(self):
        owner = Disposable()
        owner.dispose()
        calls = []
        owner.on_dispose(lambda: calls.append(True))
        assert calls == [True]

    def test_failing_callback_does_not_stop_others(self):
        owner = Disposable()
        calls = []
        owner.on_dispose(lambda: calls.append("last"))
        owner.on_dispose(lambda: 1 / 0)

        owner.dispose()
        assert calls == ["last"]

    def test_cannot_own_plain_value(self):
        with pytest.raises(TypeError):
            Disposable().auto_dispose(42)


class TestHolder:

    def test_replacing_disposes_previous(self):
        holder = Holder()
        first, second = Disposable(), Disposable()
        holder.set(first)
        holder.set(second)
        assert first.is_disposed()
        assert holder.get() is second

    def test_clear_and_dispose(self):
        holder = Holder()
        value = holder.set(Disposable())
        holder.clear()
        assert holder.is_empty()
        assert value.is_disposed()

        holder.set(Disposable())
        holder.dispose()
        assert holder.get() is None

    def test_set_after_dispose_is_rejected(self):
        holder = Holder()
        holder.dispose()
        value = Disposable()
        with pytest.raises(RuntimeError):
            holder.set(value)
        assert value.is_disposed()


class TestEmitter:

    def test_listeners_called_in_order(self):
        emitter = Emitter()
        calls = []
        emitter.add_listener(lambda x: calls.append(("a", x)))
        emitter.add_listener(lambda x: calls.append(("b", x)))

        emitter.emit(1)
        assert calls == [("a", 1), ("b", 1)]

    def test_disposed_listener_is_skipped(self):
        emitter = Emitter()
        calls = []
        second = None

        def first(_):
            calls.append("first")
            second.dispose()

        emitter.add_listener(first)
        second = emitter.add_listener(lambda _: calls.append("second"))

        emitter.emit(None)
        assert calls == ["first"]
        assert len(emitter._listeners) == 1

    def test_disposed_emitter_drops_listeners(self):
        emitter = Emitter()
        emitter.add_listener(lambda: None)
        emitter.dispose()
        assert not emitter.has_listeners()
        assert emitter.add_listener(lambda: None).is_disposed()


class TestObservable:

    def test_notifies_only_on_change(self):
        value = Observable(False)
        changes = []
        value.add_listener(lambda new, old: changes.append((new, old)))

        value.set(False)
        value.set(True)
        value.set(True)
        assert changes == [(True, False)]
        assert value.get() is True

    def test_bool_and_int_are_different_values(self):
        value = Observable(1)
        changes = []
        value.add_listener(lambda new, old: changes.append(new))
        value.set(True)
        assert changes == [True]
