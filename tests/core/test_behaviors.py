# tests/core/test_behaviors.py
import asyncio
import threading
from datetime import timedelta
from typing import ClassVar, Optional
from unittest.mock import AsyncMock

import pytest
from structlog.testing import capture_logs

from medicaledu.core.application.behaviors import (
    CacheInvalidationBehavior,
    CachingBehavior,
    LoggingBehavior,
    PerformanceMetricsBehavior,
    TransactionBehavior,
    ValidationBehavior,
)
from medicaledu.core.application.caching import cache_invalidation
from medicaledu.core.application.exceptions import (
    CacheInvalidationConfigurationError,
    HandlerNotFoundError,
    RequestValidationError,
)
from medicaledu.core.application.mediator import Handler, Mediator, handles
from medicaledu.core.application.requests import CacheableRequest, Command, Request
from medicaledu.core.application.result import ErrorType, Result
from medicaledu.core.application.validation import validates
from medicaledu.core.domain.exceptions import InvalidOperationError
from medicaledu.shared.config import AppEnv, Settings


# ---------------------------------------------------------------------------
# Requests used only by these tests
# ---------------------------------------------------------------------------


class EchoQuery(CacheableRequest):
    response_type: ClassVar = str
    cache_duration: ClassVar[timedelta] = timedelta(minutes=1)

    text: str = "hello"


class PlainQuery(Request):
    response_type: ClassVar = Optional[str]


@cache_invalidation(["GetAllCourses", "GetCourseById"], reason="Course changed")
class RenameCourseCommand(Command):
    response_type: ClassVar = Result[str]

    title: str = ""


class UndeclaredCommand(Command):
    response_type: ClassVar = bool


class StrictQuery(Request):
    response_type: ClassVar = str

    title: str = ""


class HandlerThreadQuery(Request):
    response_type: ClassVar = int


class UnhandledQuery(Request):
    pass


@validates(RenameCourseCommand)
def _validate_rename(request):
    if not request.title.strip():
        yield "Title is required."
    if len(request.title) > 10:
        yield "Title is too long."


@validates(StrictQuery)
def _validate_strict(request):
    if not request.title:
        yield "Title is required."


@handles(RenameCourseCommand)
class RenameCourseHandler(Handler):
    def handle(self, request):
        return Result.success(request.title.upper())


@handles(EchoQuery)
class EchoHandler(Handler):
    def handle(self, request):
        return request.text


@handles(HandlerThreadQuery)
class HandlerThreadHandler(Handler):
    def handle(self, request):
        return threading.get_ident()


def strict_settings():
    return Settings(_env_file=None, APP_ENV=AppEnv.DEVELOPMENT)


@pytest.mark.asyncio
class TestValidationBehavior:
    async def test_valid_request_reaches_handler(self):
        next_ = AsyncMock(return_value=Result.success("OK"))

        result = await ValidationBehavior().handle(RenameCourseCommand(title="Anatomy"), next_)

        assert result.is_success
        next_.assert_awaited_once()

    async def test_result_request_gets_validation_failure(self):
        """
        Scenario: A request answering with Result[...] breaks two rules.
        Expected: Every message comes back in a validation failure; the handler never runs.
        """
        # Arrange
        next_ = AsyncMock()

        # Act
        result = await ValidationBehavior().handle(RenameCourseCommand(title="   " * 4), next_)

        # Assert
        assert result.is_failure
        assert result.error_type == ErrorType.VALIDATION
        assert list(result.errors) == ["Title is required.", "Title is too long."]
        next_.assert_not_awaited()

    async def test_plain_request_raises(self):
        next_ = AsyncMock()

        with pytest.raises(RequestValidationError) as excinfo:
            await ValidationBehavior().handle(StrictQuery(), next_)

        assert excinfo.value.errors == ["Title is required."]
        next_.assert_not_awaited()


@pytest.mark.asyncio
class TestCachingBehavior:
    async def test_cacheable_query_served_from_cache(self, cache, test_settings):
        """
        Scenario: The same cacheable query is sent twice.
        Expected: The handler runs once; the second answer comes from the cache.
        """
        # Arrange
        behavior = CachingBehavior(cache, test_settings)
        next_ = AsyncMock(return_value="computed")

        # Act
        first = await behavior.handle(EchoQuery(), next_)
        second = await behavior.handle(EchoQuery(), next_)

        # Assert
        assert first == second == "computed"
        next_.assert_awaited_once()
        assert EchoQuery().resolve_cache_key() in cache

    async def test_different_parameters_are_cached_separately(self, cache, test_settings):
        behavior = CachingBehavior(cache, test_settings)
        next_ = AsyncMock(side_effect=["a", "b"])

        assert await behavior.handle(EchoQuery(text="a"), next_) == "a"
        assert await behavior.handle(EchoQuery(text="b"), next_) == "b"
        assert next_.await_count == 2

    async def test_non_cacheable_request_bypasses_cache(self, mock_cache, test_settings):
        behavior = CachingBehavior(mock_cache, test_settings)
        next_ = AsyncMock(return_value="fresh")

        assert await behavior.handle(PlainQuery(), next_) == "fresh"
        mock_cache.try_get.assert_not_called()
        mock_cache.get_or_create.assert_not_called()


@pytest.mark.asyncio
class TestTransactionBehavior:
    async def test_command_commits(self, mock_uow):
        next_ = AsyncMock(return_value=Result.success("OK"))

        result = await TransactionBehavior(mock_uow).handle(RenameCourseCommand(title="x"), next_)

        assert result.is_success
        mock_uow.begin.assert_called_once()
        mock_uow.save_changes.assert_called_once()
        mock_uow.commit.assert_called_once()
        mock_uow.rollback.assert_not_called()

    async def test_session_calls_leave_the_event_loop_thread(self, mock_uow):
        threads = []
        mock_uow.commit.side_effect = lambda: threads.append(threading.get_ident())
        next_ = AsyncMock(return_value=Result.success("OK"))

        await TransactionBehavior(mock_uow).handle(RenameCourseCommand(title="x"), next_)

        assert len(threads) == 1
        assert threads[0] != threading.get_ident()

    async def test_failed_result_still_commits(self, mock_uow):
        """A failed Result is an answer, not an error: staged changes are kept."""
        next_ = AsyncMock(return_value=Result.unauthorized("Invalid email or password."))

        result = await TransactionBehavior(mock_uow).handle(RenameCourseCommand(title="x"), next_)

        assert result.is_failure
        mock_uow.commit.assert_called_once()

    async def test_exception_rolls_back(self, mock_uow):
        """
        Scenario: The handler raises a domain error mid-transaction.
        Expected: The unit of work rolls back, never commits, and the error propagates.
        """
        # Arrange
        next_ = AsyncMock(side_effect=InvalidOperationError("Only pending bookings can be confirmed."))

        # Act & Assert
        with pytest.raises(InvalidOperationError):
            await TransactionBehavior(mock_uow).handle(RenameCourseCommand(title="x"), next_)

        mock_uow.rollback.assert_called_once()
        mock_uow.commit.assert_not_called()

    async def test_queries_run_without_transaction(self, mock_uow):
        next_ = AsyncMock(return_value="hello")

        assert await TransactionBehavior(mock_uow).handle(EchoQuery(), next_) == "hello"
        mock_uow.begin.assert_not_called()
        mock_uow.execute.assert_not_awaited()


@pytest.mark.asyncio
class TestCacheInvalidationBehavior:
    async def test_declared_prefixes_are_removed(self, mock_cache, test_settings):
        next_ = AsyncMock(return_value=Result.success("OK"))

        await CacheInvalidationBehavior(mock_cache, test_settings).handle(RenameCourseCommand(title="x"), next_)

        removed = [call.args[0] for call in mock_cache.remove_by_prefix.call_args_list]
        assert removed == ["GetAllCourses", "GetCourseById"]
        mock_cache.clear.assert_not_called()

    async def test_undeclared_command_clears_cache_when_lenient(self, mock_cache, test_settings):
        next_ = AsyncMock(return_value=True)

        await CacheInvalidationBehavior(mock_cache, test_settings).handle(UndeclaredCommand(), next_)

        mock_cache.clear.assert_called_once()

    async def test_undeclared_command_fails_in_strict_mode(self, mock_cache):
        """
        Scenario: Development environment with strict invalidation and a command without a declaration.
        Expected: A configuration error is raised instead of silently clearing the cache.
        """
        # Arrange
        behavior = CacheInvalidationBehavior(mock_cache, strict_settings())

        # Act & Assert
        with pytest.raises(CacheInvalidationConfigurationError):
            await behavior.handle(UndeclaredCommand(), AsyncMock(return_value=True))
        mock_cache.clear.assert_not_called()

    async def test_explicit_requirement_forces_strict_mode(self, mock_cache):
        settings = Settings(_env_file=None, APP_ENV=AppEnv.PRODUCTION, CACHE_REQUIRE_EXPLICIT_INVALIDATION=True)

        with pytest.raises(CacheInvalidationConfigurationError):
            await CacheInvalidationBehavior(mock_cache, settings).handle(UndeclaredCommand(), AsyncMock())

    async def test_queries_do_not_invalidate(self, mock_cache, test_settings):
        await CacheInvalidationBehavior(mock_cache, test_settings).handle(EchoQuery(), AsyncMock(return_value="x"))

        mock_cache.remove_by_prefix.assert_not_called()
        mock_cache.clear.assert_not_called()


@pytest.mark.asyncio
class TestPerformanceAndLogging:
    async def test_slow_request_logged_as_warning(self):
        settings = Settings(_env_file=None, SLOW_REQUEST_THRESHOLD_MS=5, MODERATE_REQUEST_THRESHOLD_MS=1)

        async def slow():
            await asyncio.sleep(0.02)
            return "done"

        with capture_logs() as logs:
            assert await PerformanceMetricsBehavior(settings).handle(EchoQuery(), slow) == "done"

        slow_entries = [entry for entry in logs if entry["event"] == "slow_request"]
        assert slow_entries and slow_entries[0]["log_level"] == "warning"
        assert slow_entries[0]["request_type"] == "EchoQuery"

    async def test_failure_is_logged_and_reraised(self, test_settings):
        with capture_logs() as logs:
            with pytest.raises(RuntimeError):
                await PerformanceMetricsBehavior(test_settings).handle(
                    EchoQuery(), AsyncMock(side_effect=RuntimeError("boom"))
                )

        assert any(entry["event"] == "request_failed" and entry["error"] == "boom" for entry in logs)

    async def test_logging_behavior_brackets_the_handler(self):
        with capture_logs() as logs:
            await LoggingBehavior().handle(EchoQuery(), AsyncMock(return_value="x"))

        assert [entry["event"] for entry in logs] == ["handling", "handled"]


@pytest.mark.asyncio
class TestMediator:
    async def test_default_pipeline_order(self, uow, cache, test_settings):
        mediator = Mediator(uow, cache, test_settings)

        assert [type(b) for b in mediator.pipeline()] == [
            ValidationBehavior,
            CachingBehavior,
            PerformanceMetricsBehavior,
            TransactionBehavior,
            CacheInvalidationBehavior,
            LoggingBehavior,
        ]

    async def test_behaviors_wrap_handler_outermost_first(self, uow, cache, test_settings):
        """
        Scenario: Two recording behaviors are configured.
        Expected: The first listed runs first and finishes last, around the handler.
        """
        # Arrange
        trace = []

        class Recorder:
            def __init__(self, name):
                self.name = name

            async def handle(self, request, next_):
                trace.append(f"{self.name}:in")
                response = await next_()
                trace.append(f"{self.name}:out")
                return response

        mediator = Mediator(uow, cache, test_settings, behaviors=[Recorder("outer"), Recorder("inner")])

        # Act
        response = await mediator.send(EchoQuery(text="hi"))

        # Assert
        assert response == "hi"
        assert trace == ["outer:in", "inner:in", "inner:out", "outer:out"]

    async def test_handler_runs_off_the_event_loop_thread(self, mediator):
        handler_thread = await mediator.send(HandlerThreadQuery())

        assert handler_thread != threading.get_ident()

    async def test_full_pipeline_round_trip(self, mediator, cache):
        result = await mediator.send(RenameCourseCommand(title="anatomy"))

        assert result.is_success
        assert result.value == "ANATOMY"

    async def test_validation_short_circuits_full_pipeline(self, mediator):
        result = await mediator.send(RenameCourseCommand(title=""))

        assert result.error_type == ErrorType.VALIDATION

    async def test_unregistered_request_raises(self, mediator):
        with pytest.raises(HandlerNotFoundError):
            await mediator.send(UnhandledQuery())

    async def test_second_handler_for_same_request_rejected(self):
        with pytest.raises(ValueError):

            @handles(EchoQuery)
            class _DuplicateHandler(Handler):
                pass


class TestContainer:
    def test_mediator_shares_the_process_cache(self, container, cache, session):
        """
        Scenario: Two mediators are built for two requests.
        Expected: Each gets its own unit of work, both share the overridden cache.
        """
        # Arrange
        uow_a = container.unit_of_work(session=session)
        uow_b = container.unit_of_work(session=session)

        # Act
        first = container.mediator(uow=uow_a)
        second = container.mediator(uow=uow_b)

        # Assert
        assert first is not second
        assert uow_a is not uow_b
        assert first._cache is cache
        assert second._cache is cache
        assert container.cache_service() is cache
