"""Root conftest: route structlog through stdlib logging so caplog sees engine warnings."""

import pytest
import structlog

from hkmj.shared.logging import _serialize_enums


def _configure_test_logging() -> None:
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            _serialize_enums,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


_configure_test_logging()


@pytest.fixture(autouse=True)
def _isolate_logging():
    """Clear bound match context, and undo any setup_logging() call made by the test."""
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()
    _configure_test_logging()
