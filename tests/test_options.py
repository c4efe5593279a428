"""
Tests for EvaluationOptions.

These tests verify that:
1. Every option has its documented default
2. Mutable defaults are fresh per run
3. Misspelled options fail at construction
4. Options survive copy and pickle
"""

import copy
import io
import math
import pickle

import pytest

from stricthash import EvaluationOptions, UnknownKeyError
from stricthash.options import DEFAULT_REQUIRE


# =============================================================================
# DEFAULT TESTS
# =============================================================================

class TestDefaults:
    """Test the option set and its defaults."""

    def test_documented_defaults(self):
        """A fresh options record holds every documented default, in order."""
        options = EvaluationOptions()
        assert options.to_dict() == {
            "stdin": "",
            "timeout": 0,
            "load_path": [],
            "encoding": None,
            "filename": None,
            "require": [DEFAULT_REQUIRE],
            "debugger": None,
            "number_of_captures": math.inf,
            "evaluator": None,
            "annotate": None,
        }

    def test_list_options_are_fresh_per_instance(self):
        """load_path and require are never shared between runs."""
        first = EvaluationOptions()
        first.load_path.append("lib")
        first.require.append("json")

        second = EvaluationOptions()
        assert second.load_path == []
        assert second.require == [DEFAULT_REQUIRE]

    def test_misspelled_option_is_rejected(self):
        """A typo in an option name fails at construction."""
        with pytest.raises(UnknownKeyError, match="'time_out'"):
            EvaluationOptions(time_out=5)

    def test_repr(self):
        """Options render with their type name."""
        assert repr(EvaluationOptions()).startswith("#<StrictHash EvaluationOptions: {stdin: '', timeout: 0,")


# =============================================================================
# QUERY TESTS
# =============================================================================

class TestQueries:
    """Test predicate queries and helper checks."""

    def test_timeout(self):
        """is_timeout follows truthiness; has_timeout treats 0 as disabled."""
        options = EvaluationOptions()
        assert options.is_timeout() is True
        assert options.has_timeout() is False
        assert options.merge(timeout=2.5).has_timeout() is True

    def test_debugger(self):
        """is_debugger is False until a debugger is supplied."""
        assert EvaluationOptions().is_debugger() is False
        assert EvaluationOptions(debugger=object()).is_debugger() is True

    def test_capture_limit(self):
        """Only a finite number_of_captures counts as a limit."""
        assert EvaluationOptions().has_capture_limit() is False
        assert EvaluationOptions(number_of_captures=200).has_capture_limit() is True

    def test_non_predicate_options_have_no_query(self):
        """Plain options have no is_<name>() accessor."""
        with pytest.raises(AttributeError):
            EvaluationOptions().is_encoding()


# =============================================================================
# INPUT STREAM TESTS
# =============================================================================

class TestInputStream:
    """Test stdin handling."""

    def test_string_is_wrapped(self):
        """A string stdin is served through a readable stream."""
        stream = EvaluationOptions(stdin="line 1\nline 2\n").input_stream()
        assert stream.readline() == "line 1\n"
        assert stream.read() == "line 2\n"

    def test_stream_is_passed_through(self):
        """A stream stdin is returned as is."""
        given = io.StringIO("data")
        assert EvaluationOptions({"stdin": given}).input_stream() is given


# =============================================================================
# COPY TESTS
# =============================================================================

class TestCopying:
    """Options can be handed between collaborators as copies."""

    def test_deepcopy_isolates_load_path(self):
        """A deep copy has its own load_path list."""
        options = EvaluationOptions(load_path=["lib"])
        duplicate = copy.deepcopy(options)
        duplicate.load_path.append("spec")
        assert options.load_path == ["lib"]

    def test_pickle_round_trip(self):
        """Pickled options restore every value."""
        options = EvaluationOptions(timeout=5, filename="program.rb")
        restored = pickle.loads(pickle.dumps(options))
        assert restored == options
        assert restored.has_timeout() is True
