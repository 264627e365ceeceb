"""Tests for result objects and diagnostics."""

import dataclasses

import pytest

from xml_highlight_diff.shared.result import (
    AlignmentStatistics,
    ComparisonResult,
    DiagnosticEntry,
    DiagnosticSeverity,
)


class TestDiagnosticEntry:
    """Test suite for DiagnosticEntry."""

    def test_valid_entry(self):
        """Test creating a diagnostic entry."""
        entry = DiagnosticEntry(
            severity=DiagnosticSeverity.ERROR,
            message="broken",
            component="xml_comparer",
            details={"side": "left"},
        )

        assert entry.to_dict() == {
            "severity": "ERROR",
            "message": "broken",
            "component": "xml_comparer",
            "details": {"side": "left"},
        }
        assert entry.timestamp > 0

    def test_validation(self):
        """Test diagnostic entry validation."""
        with pytest.raises(ValueError, match="message cannot be empty"):
            DiagnosticEntry(DiagnosticSeverity.INFO, "", "component")

        with pytest.raises(ValueError, match="component cannot be empty"):
            DiagnosticEntry(DiagnosticSeverity.INFO, "message", "")


class TestAlignmentStatistics:
    """Test suite for AlignmentStatistics."""

    def test_defaults_have_no_differences(self):
        """Test that fresh statistics report no differences."""
        statistics = AlignmentStatistics()

        assert statistics.has_differences is False
        assert statistics.to_dict()["has_differences"] is False

    @pytest.mark.parametrize("field_name", [
        "highlighted_attributes_left",
        "highlighted_attributes_right",
        "unmatched_elements_left",
        "unmatched_elements_right",
    ])
    def test_any_highlight_counts_as_difference(self, field_name):
        """Test that each highlight counter marks a difference."""
        statistics = AlignmentStatistics(**{field_name: 1})

        assert statistics.has_differences is True

    def test_compared_counters_are_not_differences(self):
        """Test that comparison counters alone are not differences."""
        statistics = AlignmentStatistics(element_pairs_compared=3, attribute_pairs_compared=5)

        assert statistics.has_differences is False


class TestComparisonResult:
    """Test suite for ComparisonResult."""

    def test_unpacks_as_pair(self):
        """Test that a result unpacks into left and right."""
        left, right = ComparisonResult(left="L", right="R")

        assert (left, right) == ("L", "R")

    def test_is_immutable(self):
        """Test that the result cannot be modified."""
        result = ComparisonResult(left="L", right="R")

        with pytest.raises(dataclasses.FrozenInstanceError):
            result.left = "changed"

    def test_has_errors(self):
        """Test error detection from diagnostics."""
        warning = DiagnosticEntry(DiagnosticSeverity.WARNING, "careful", "test")
        error = DiagnosticEntry(DiagnosticSeverity.ERROR, "broken", "test")

        assert ComparisonResult("L", "R", diagnostics=(warning,)).has_errors() is False
        assert ComparisonResult("L", "R", diagnostics=(warning, error)).has_errors() is True

    def test_to_dict(self):
        """Test dictionary conversion."""
        result = ComparisonResult(
            left="L",
            right="R",
            statistics=AlignmentStatistics(highlighted_attributes_left=1),
            correlation_id="req-7",
        )

        data = result.to_dict()
        assert data["left"] == "L"
        assert data["right"] == "R"
        assert data["statistics"]["highlighted_attributes_left"] == 1
        assert data["statistics"]["has_differences"] is True
        assert data["diagnostics"] == []
        assert data["correlation_id"] == "req-7"
