"""Tests for the bolt size / count design space search."""

from dataclasses import replace

import pytest

from flange_engine import SEARCH_BOLT_COUNTS, evaluate, optimize


def _feasible(result):
    return result.margin_percent >= 0 and result.spacing_ok


class TestOptimize:
    def test_fixed_size_finds_minimum_count(self, inputs, tables):
        outcome = optimize(replace(inputs, bolt_count=8), tables, fixed_size_only=True)
        assert outcome.found
        assert (outcome.bolt_size, outcome.bolt_count) == (0.75, 48)
        assert outcome.candidates_evaluated == len(SEARCH_BOLT_COUNTS)
        assert _feasible(outcome.result)

    def test_all_sizes_tie_keeps_smallest_size(self, inputs, tables):
        # 7/8" and larger reach the same gasket load; the first size searched wins
        outcome = optimize(inputs, tables)
        assert (outcome.bolt_size, outcome.bolt_count) == (0.75, 48)
        assert outcome.candidates_evaluated == len(tables.bolt_sizes(0.75)) * len(SEARCH_BOLT_COUNTS)

    def test_search_skips_sizes_below_three_quarter(self, inputs, tables):
        outcome = optimize(replace(inputs, bolt_size=0.5), tables)
        assert outcome.bolt_size >= 0.75

    def test_not_found(self, inputs, tables):
        outcome = optimize(replace(inputs, design_pressure=100.0), tables, fixed_size_only=True)
        assert not outcome.found
        assert outcome.bolt_size is None
        assert outcome.result is None
        assert outcome.candidates_evaluated == len(SEARCH_BOLT_COUNTS)

    def test_fixed_size_missing_from_table_reports_default_size(self, inputs, tables):
        outcome = optimize(replace(inputs, bolt_size=0.8, inside_diameter=300), tables, fixed_size_only=True)
        assert outcome.found
        assert outcome.bolt_size == tables.bolt_specs[0].size
        assert outcome.result.single_bolt_area == tables.bolt_specs[0].tensile_area
        assert 'bolt_spec' not in outcome.result.defaults_used

    def test_manual_override_stripped(self, inputs, tables):
        manual = replace(inputs, use_manual_override=True, actual_bcd=5000, manual_seating_od=2000)
        outcome = optimize(manual, tables, fixed_size_only=True)
        assert outcome.bolt_count == 48
        assert outcome.result.final_bcd == 1107

    def test_inputs_untouched(self, inputs, tables):
        before = replace(inputs)
        optimize(inputs, tables, fixed_size_only=True)
        assert inputs == before

    @pytest.mark.parametrize("changes", [
        {'inside_diameter': 600, 'design_pressure': 2.0},
        {'inside_diameter': 1500, 'design_pressure': 1.5, 'design_temperature': 300.0},
        {'design_pressure': 25.0, 'pressure_unit': 'Bar', 'facing_sketch': '5: Raised Face'},
    ])
    def test_no_earlier_candidate_has_lower_load(self, inputs, tables, changes):
        base = replace(inputs, **changes)
        outcome = optimize(base, tables)
        assert outcome.found
        assert _feasible(outcome.result)
        for size in tables.bolt_sizes(0.75):
            for count in SEARCH_BOLT_COUNTS:
                if (size, count) == (outcome.bolt_size, outcome.bolt_count):
                    return
                r = evaluate(replace(base, bolt_size=size, bolt_count=count), tables)
                if _feasible(r):
                    assert r.required_load >= outcome.result.required_load
