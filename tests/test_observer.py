"""
Tests for Observers, Configuration and Errors
"""

import gmpy2
import pytest
from ballbound import (
    BallboundError,
    BisectionConfig,
    CollectingObserver,
    Event,
    EventKind,
    InvalidIntervalError,
    Observer,
    PrintObserver,
)
from ballbound.config import default_rtol, eps, refine_rtol
from ballbound.observer import resolve_observer


class TestObservers:
    """Test progress observers."""

    def test_collecting(self):
        """Events are recorded in order."""
        observer = CollectingObserver()
        observer.round("src", 1, "first")
        observer.proof("src", "proved")
        observer.stop("src", "budget", 2)
        observer.info("src", "note")
        assert [e.kind for e in observer.events] == [
            EventKind.ROUND, EventKind.PROOF, EventKind.STOP, EventKind.INFO]
        assert observer.messages(EventKind.STOP) == ["budget"]
        assert observer.of_kind(EventKind.ROUND)[0].iteration == 1

    def test_print_round(self, capsys):
        """Round events print the message after the iteration."""
        PrintObserver().notify(Event(EventKind.ROUND, "src", "Intervals: 4", 1200))
        assert capsys.readouterr().out == "src | Iteration: 1,200 | Intervals: 4\n"

    def test_print_other(self, capsys):
        """Other events print their kind."""
        PrintObserver().info("src", "note")
        assert capsys.readouterr().out == "src | INFO: note\n"

    def test_base_observer_silent(self, capsys):
        """The base observer ignores events."""
        Observer().info("src", "note")
        assert capsys.readouterr().out == ""

    def test_resolve(self):
        """verbose installs a PrintObserver unless one is given."""
        given = CollectingObserver()
        assert resolve_observer(given, verbose=True) is given
        assert isinstance(resolve_observer(None, verbose=True), PrintObserver)
        assert type(resolve_observer()) is Observer


class TestConfig:
    """Test configuration defaults and presets."""

    def test_defaults(self):
        """Default budget."""
        config = BisectionConfig()
        assert config.depth == 20
        assert config.maxevals == 1000
        assert config.max_rounds == 20

    def test_max_rounds(self):
        """depth includes depth_start."""
        assert BisectionConfig(depth=5, depth_start=3).max_rounds == 2
        assert BisectionConfig(depth=2, depth_start=3).max_rounds == 0

    def test_presets(self):
        """Presets accept overrides."""
        assert BisectionConfig.quick().maxevals == 200
        assert BisectionConfig.thorough(threaded=True).threaded
        assert BisectionConfig.thorough().depth == 40

    def test_invalid(self):
        """Negative budgets are rejected."""
        with pytest.raises(ValueError):
            BisectionConfig(depth=-1)
        with pytest.raises(ValueError):
            BisectionConfig(maxevals=0)

    def test_tolerances(self):
        """Tolerances derived from the precision."""
        assert eps(64) == gmpy2.mpfr(2) ** -63
        assert refine_rtol(64) == 4 * eps(64)
        assert default_rtol(53) ** 2 == eps(53)


class TestErrors:
    """Test exception types."""

    def test_hierarchy(self):
        """InvalidIntervalError is a BallboundError and a ValueError."""
        err = InvalidIntervalError(2, 1, "lower endpoint above upper endpoint")
        assert isinstance(err, BallboundError)
        assert isinstance(err, ValueError)
        assert "[2, 1]" in str(err)
        assert err.lo == 2


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
