import logging
from unittest.mock import Mock

from printcrop.errors import DecodeFailure
from printcrop.errors.handler import ErrorHandler, ErrorOccurredEvent, ErrorSeverity
from printcrop.events.bus import EventBus


def test_handle_error_logs_and_publishes():
    logger = Mock(spec=logging.Logger)
    event_bus = Mock(spec=EventBus)
    handler = ErrorHandler(logger, event_bus)

    error = DecodeFailure("not an image")
    handler.handle(error, ErrorSeverity.ERROR, {"path": "a.png"})

    logger.error.assert_called()
    assert logger.error.call_args.kwargs["extra"] == {"context": {"path": "a.png"}}

    event = event_bus.publish.call_args[0][0]
    assert isinstance(event, ErrorOccurredEvent)
    assert event.error is error
    assert event.severity == ErrorSeverity.ERROR
    assert event.context == {"path": "a.png"}


def test_ui_callback():
    logger = Mock(spec=logging.Logger)
    event_bus = Mock(spec=EventBus)
    handler = ErrorHandler(logger, event_bus)

    callback = Mock()
    handler.register_ui_callback(callback)

    handler.handle(RuntimeError("ui error"), ErrorSeverity.CRITICAL)

    callback.assert_called_with("ui error", ErrorSeverity.CRITICAL)


def test_ignore_low_severity_in_ui():
    logger = Mock(spec=logging.Logger)
    event_bus = Mock(spec=EventBus)
    handler = ErrorHandler(logger, event_bus)

    callback = Mock()
    handler.register_ui_callback(callback)

    handler.handle(Exception("info"), ErrorSeverity.INFO)
    handler.handle(Exception("warn"), ErrorSeverity.WARNING)

    callback.assert_not_called()
    logger.warning.assert_called()
