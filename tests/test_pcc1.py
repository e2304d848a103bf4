"""Tests for the PCC-1 / API-660 assembly bolt stress check."""

import math
from dataclasses import replace

import pytest

from flange_engine import evaluate
from flange_pcc1 import check_pcc1, pcc1_defaults


@pytest.fixture
def result(inputs, tables):
    return evaluate(inputs, tables)


class TestCheckPcc1:
    def test_areas(self, inputs, result):
        pcc1 = check_pcc1(inputs, result)
        assert pcc1.total_root_area == pytest.approx(194.8 * 48)
        assert pcc1.ring_area == pytest.approx(math.pi / 4 * (1052 ** 2 - 1022 ** 2))
        assert pcc1.reduced_pass_area == 0
        assert pcc1.gasket_area == pytest.approx(pcc1.ring_area)

    def test_reduced_pass_partition_area(self, inputs, result):
        partitioned = replace(inputs, pass_partition_width=10, pass_partition_length=900)
        pcc1 = check_pcc1(partitioned, result)
        assert pcc1.reduced_pass_area == pytest.approx(4500)

    def test_thresholds(self, inputs, result):
        pcc1 = check_pcc1(replace(inputs, sg_max=380), result)
        ratio = pcc1.gasket_area / pcc1.total_root_area
        assert pcc1.sb_sel_calc == pytest.approx(200 * ratio)
        assert pcc1.step5_threshold == pytest.approx(140 * ratio)
        assert pcc1.step6_threshold == pytest.approx(
            (97 * pcc1.gasket_area + math.pi / 4 * 1.0 * 1022 ** 2) / (0.7 * pcc1.total_root_area))
        assert pcc1.step7_threshold == pytest.approx(380 * ratio)
        assert pcc1.step8_threshold == pytest.approx(150 * 1 / 0.32)

    def test_clamp_sequence(self, inputs, result):
        pcc1 = check_pcc1(inputs, result)
        assert pcc1.sb_sel_after_max == 507.5
        assert pcc1.sb_sel_after_min == 507.5
        assert pcc1.sb_sel_final == 150

    @pytest.mark.parametrize("sg_t", [1.0, 20.0, 60.0, 80.0, 200.0, 2000.0])
    def test_selected_stress_within_limits(self, inputs, result, sg_t):
        limits = replace(inputs, sg_t=sg_t, sb_min=290, sb_max=507.5, sf_max=600)
        pcc1 = check_pcc1(limits, result)
        assert 290 <= pcc1.sb_sel_final <= 507.5

    def test_sb_min_above_sb_max_is_kept(self, inputs, result):
        pcc1 = check_pcc1(replace(inputs, sb_max=300, sb_min=400, sf_max=1000), result)
        assert pcc1.sb_sel_final == 400

    def test_zero_limits_are_unbounded(self, inputs, result):
        pcc1 = check_pcc1(replace(inputs, sb_max=0, sb_min=0, sf_max=0), result)
        assert pcc1.sb_sel_final == pytest.approx(pcc1.sb_sel_calc)

    def test_step7_unspecified_always_passes(self, inputs, result):
        pcc1 = check_pcc1(replace(inputs, sg_max=0, sg_t=1e6, sb_max=0, sf_max=0), result)
        assert pcc1.step7_ok

    def test_step7_fails_above_limit(self, inputs, result):
        pcc1 = check_pcc1(replace(inputs, sg_max=10, sf_max=1000), result)
        assert pcc1.sb_sel_final > pcc1.step7_threshold
        assert not pcc1.step7_ok
        assert not pcc1.passed

    def test_step8_unspecified(self, inputs, result):
        pcc1 = check_pcc1(replace(inputs, phi_f_max=0), result)
        assert pcc1.step8_threshold == math.inf
        assert pcc1.step8_ok

    def test_tolerance(self, inputs, result):
        pcc1 = check_pcc1(inputs, result)
        at_limit = replace(inputs, sf_max=pcc1.step5_threshold - 0.0005, sb_max=0)
        assert check_pcc1(at_limit, result).step5_ok

    def test_compliant_assembly(self, inputs, result):
        compliant = replace(inputs, sg_min_s=50, sg_min_o=40, sf_max=1000)
        pcc1 = check_pcc1(compliant, result)
        assert pcc1.sb_sel_final == 507.5
        assert pcc1.step5_ok and pcc1.step6_ok and pcc1.step7_ok and pcc1.step8_ok
        assert pcc1.passed

    def test_zero_root_area(self, inputs, result):
        pcc1 = check_pcc1(inputs, replace(result, single_bolt_area=0))
        assert pcc1.sb_sel_calc == 0
        assert pcc1.step5_threshold == 0
        assert pcc1.step6_threshold == 0
        assert pcc1.step7_threshold == math.inf
        assert pcc1.sb_sel_final == 150


class TestPcc1Defaults:
    @pytest.mark.parametrize("gasket,expected", [
        ('Grooved metal (Stainless steel)', (380, 140, 97)),
        ('Corrugated metal (Stainless steel)', (275, 140, 97)),
        ('Spiral-wound (Carbon)', (0, 140, 97)),
    ])
    def test_gasket_limits(self, inputs, tables, gasket, expected):
        updated = pcc1_defaults(replace(inputs, gasket_type=gasket, sg_max=1, sg_min_s=1, sg_min_o=1), tables)
        assert (updated.sg_max, updated.sg_min_s, updated.sg_min_o) == expected

    def test_other_gasket_unchanged(self, inputs, tables):
        odd = replace(inputs, gasket_type='Elastomers without fabric (75A or higher)', sg_max=123)
        assert pcc1_defaults(odd, tables).sg_max == 123

    def test_bolt_yield_limits(self, inputs, tables):
        updated = pcc1_defaults(replace(inputs, sb_max=0, sb_min=0), tables)
        assert updated.sb_max == 507.5
        assert updated.sb_min == 290.0

    def test_unknown_bolt_material_keeps_limits(self, inputs, tables):
        updated = pcc1_defaults(replace(inputs, bolt_material='SA-999', sb_max=1, sb_min=2), tables)
        assert (updated.sb_max, updated.sb_min) == (1, 2)
