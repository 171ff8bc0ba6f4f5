"""
Unit tests for ordered fallback chains.
"""

import pytest

from verifierkit.core.fallback import FallbackChain, FallbackExhausted, first_success


class TestFallbackChain:
    """Test FallbackChain class."""

    def test_first_value_wins(self):
        """Test the first step producing a value wins."""
        chain = FallbackChain()
        chain.add("release", lambda: None)
        chain.add("rc", lambda: "rc-result")
        chain.add("eap", lambda: "eap-result")

        result = chain.run()

        assert result.name == "rc"
        assert result.value == "rc-result"
        assert [a.name for a in result.attempts] == ["release"]

    def test_later_steps_not_run(self):
        """Test steps after the winner are never called."""
        called = []

        def step(name, value):
            def run():
                called.append(name)
                return value

            return run

        first_success(
            [("a", step("a", None)), ("b", step("b", 1)), ("c", step("c", 2))]
        )

        assert called == ["a", "b"]

    def test_tolerated_exception_continues(self):
        """Test tolerated exceptions mark a step failed and continue."""

        def fail():
            raise IOError("boom")

        result = first_success([("release", fail), ("rc", lambda: 42)], tolerate=(IOError,))

        assert result.value == 42
        assert isinstance(result.attempts[0].error, IOError)

    def test_untolerated_exception_propagates(self):
        """Test other exceptions abort the chain."""

        def fail():
            raise KeyError("unexpected")

        with pytest.raises(KeyError):
            first_success([("release", fail), ("rc", lambda: 42)], tolerate=(IOError,))

    def test_exhausted(self):
        """Test FallbackExhausted lists every attempted step in order."""
        chain = FallbackChain()
        for name in ("release", "rc", "eap", "beta"):
            chain.add(name, lambda: None)

        with pytest.raises(FallbackExhausted) as exc_info:
            chain.run()

        assert exc_info.value.attempted == ["release", "rc", "eap", "beta"]
        assert chain.step_names == ["release", "rc", "eap", "beta"]

    def test_falsy_value_counts_as_success(self):
        """Test only None passes to the next step."""
        assert first_success([("a", lambda: 0), ("b", lambda: 1)]).value == 0
