"""Tests for the fire-and-forget scenario."""

import gc

import pytest

from faultwatch.app import Application
from faultwatch.config import DETECTION_RECLAMATION, DETECTION_SWEEP
from faultwatch.models import FaultKind
from scenario import FireAndForgetScenario
from scenario.scenario import (
    FIRE_AND_FORGET,
    UNHANDLED_EXCEPTION_CAUGHT,
    UNOBSERVED_EXCEPTION_CAUGHT,
)


def output_lines(capsys) -> list[str]:
    return capsys.readouterr().out.splitlines()


class TestSweepMode:
    """Tests for the default, deterministic mode."""

    @pytest.mark.asyncio
    async def test_fire_and_forget_printed_first(self, capsys):
        """Test that the launch line comes before any report."""
        app = Application(sweep_interval=60)
        await app.start()
        await FireAndForgetScenario(app.reporter, app.supervisor).run()

        lines_before_stop = output_lines(capsys)
        await app.stop()

        assert lines_before_stop == [FIRE_AND_FORGET]

    @pytest.mark.asyncio
    async def test_unobserved_reporter_fires_once(self, capsys):
        """Test that stopping reports the single failure exactly once."""
        app = Application(sweep_interval=60)
        await app.start()
        await FireAndForgetScenario(
            app.reporter, app.supervisor, detection=DETECTION_SWEEP
        ).run()
        await app.stop()

        lines = output_lines(capsys)
        assert lines == [FIRE_AND_FORGET, UNOBSERVED_EXCEPTION_CAUGHT]
        assert UNHANDLED_EXCEPTION_CAUGHT not in lines

    @pytest.mark.asyncio
    async def test_fault_message_reaches_tracker(self, capsys):
        """Test that the original message survives to the delivered event."""
        app = Application(sweep_interval=60)
        await app.start()
        await FireAndForgetScenario(app.reporter, app.supervisor).run()
        await app.stop()

        events = app.tracker.events(FaultKind.UNOBSERVED_FAILURE)
        assert [e.message for e in events] == ["Hello World!"]
        assert events[0].exception_type == "Exception"
        assert app.tracker.events(FaultKind.FAULT) == []


class TestReclamationMode:
    """Tests for the garbage-collector driven mode."""

    @pytest.mark.asyncio
    async def test_reported_after_collection(self, capsys):
        """Test that a forced collection reports the dropped handle once."""
        app = Application(sweep_interval=60)
        await app.start()
        await FireAndForgetScenario(
            app.reporter, app.supervisor, detection=DETECTION_RECLAMATION
        ).run()
        await app.stop()

        gc.collect()
        gc.collect()

        lines = output_lines(capsys)
        assert lines[0] == FIRE_AND_FORGET
        assert lines.count(UNOBSERVED_EXCEPTION_CAUGHT) == 1
        assert UNHANDLED_EXCEPTION_CAUGHT not in lines


    @pytest.mark.asyncio
    async def test_launch_line_before_collection(self, reporter, supervisor, capsys):
        """Test that a failure finishing before the launch line stays silent
        until a collector pass."""
        gc.disable()
        try:
            await FireAndForgetScenario(
                reporter, supervisor, detection=DETECTION_RECLAMATION
            ).run()
            supervisor.shutdown()

            assert output_lines(capsys) == [FIRE_AND_FORGET]
        finally:
            gc.enable()

        gc.collect()

        assert output_lines(capsys) == [UNOBSERVED_EXCEPTION_CAUGHT]


class TestScenarioConfig:
    """Tests for scenario construction."""

    def test_unknown_detection_mode(self, reporter, supervisor):
        """Test that an unknown mode is rejected."""
        with pytest.raises(ValueError):
            FireAndForgetScenario(reporter, supervisor, detection="finalizer")

    @pytest.mark.asyncio
    async def test_registers_both_handlers(self, reporter, supervisor, capsys):
        """Test that run() subscribes one handler per kind."""
        await FireAndForgetScenario(reporter, supervisor).run()

        assert len(reporter.handlers(FaultKind.FAULT)) == 1
        assert len(reporter.handlers(FaultKind.UNOBSERVED_FAILURE)) == 1

        supervisor.shutdown()
        supervisor.sweep()
        assert capsys.readouterr().out.splitlines() == [
            FIRE_AND_FORGET,
            UNOBSERVED_EXCEPTION_CAUGHT,
        ]
