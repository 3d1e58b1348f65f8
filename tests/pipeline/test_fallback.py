"""Tests for FallbackChain ordering and outcomes."""

from unittest.mock import MagicMock

import pytest

from podcaster.errors import LLMError
from podcaster.pipeline.fallback import FallbackChain, Strategy


class TestFallbackChain:
    def test_first_usable_value_wins(self):
        later = MagicMock(return_value="b")
        outcome = FallbackChain("t", [Strategy("a", lambda: "a"), Strategy("b", later)]).run()
        assert outcome.value == "a"
        assert outcome.used("a")
        later.assert_not_called()

    @pytest.mark.parametrize("empty", [None, "", "   "])
    def test_empty_values_fall_through(self, empty):
        outcome = FallbackChain(
            "t", [Strategy("empty", lambda: empty), Strategy("next", lambda: "ok")]
        ).run()
        assert outcome.strategy == "next"
        assert outcome.errors == []

    def test_domain_errors_recorded_and_skipped(self):
        def boom():
            raise LLMError("down")

        outcome = FallbackChain("t", [Strategy("boom", boom), Strategy("ok", lambda: 1)]).run()
        assert outcome.value == 1
        assert outcome.errors == ["boom: down"]

    def test_exhausted_chain(self):
        outcome = FallbackChain("t", [Strategy("none", lambda: None)]).run()
        assert outcome.ok is False
        assert outcome.value is None
        assert outcome.strategy is None

    @pytest.mark.parametrize(
        "exc", [PermissionError(13, "Permission denied"), TimeoutError("slow"), ConnectionError("reset")]
    )
    def test_foreign_errors_recorded_and_skipped(self, exc):
        def boom():
            raise exc

        outcome = FallbackChain("t", [Strategy("boom", boom), Strategy("ok", lambda: 1)]).run()
        assert outcome.value == 1
        assert outcome.used("ok")
        assert len(outcome.errors) == 1
        assert outcome.errors[0].startswith("boom: ")
