"""Tests for the event emitter."""
from taisdk.core.api.events import EventEmitter


class TestEventEmitter:
    """Test suite for EventEmitter."""

    def test_emit_calls_handlers(self):
        emitter = EventEmitter()
        received = []
        emitter.on('retry', lambda *args, **kwargs: received.append((args, kwargs)))

        emitter.emit('retry', 1, attempt=2)

        assert received == [((1,), {'attempt': 2})]

    def test_emit_without_handlers(self):
        """Test emitting an unknown event is a no-op."""
        EventEmitter().emit('nothing')

    def test_on_returns_self(self):
        emitter = EventEmitter()
        assert emitter.on('error', print) is emitter

    def test_off_single_handler(self):
        emitter = EventEmitter()
        first, second = [], []
        handler = first.append
        emitter.on('error', handler)
        emitter.on('error', second.append)

        emitter.off('error', handler)
        emitter.emit('error', 'x')

        assert first == []
        assert second == ['x']

    def test_off_all_handlers(self):
        emitter = EventEmitter()
        emitter.on('error', print)
        emitter.off('error')

        assert emitter.listener_count('error') == 0

    def test_handler_removing_itself(self):
        """Test handlers may unsubscribe while being called."""
        emitter = EventEmitter()
        calls = []

        def once(value):
            calls.append(value)
            emitter.off('chunk_uploaded', once)

        emitter.on('chunk_uploaded', once)
        emitter.emit('chunk_uploaded', 1)
        emitter.emit('chunk_uploaded', 2)

        assert calls == [1]

    def test_once(self):
        """Test once() handlers fire a single time."""
        emitter = EventEmitter()
        calls = []
        emitter.once('upload_complete', lambda **kw: calls.append(kw['manifest_blob_id']))

        emitter.emit('upload_complete', manifest_blob_id='a')
        emitter.emit('upload_complete', manifest_blob_id='b')

        assert calls == ['a']
        assert emitter.listener_count('upload_complete') == 0
