"""PCC-1 Appendix O / API-660 assembly bolt stress check (steps 5-8)."""
import math
from dataclasses import replace

from flange_engine import FlangeCalculator
from flange_models import Pcc1Result

TOLERANCE = 0.001  # MPa

# Gasket stress limits (SgMax, SgMinS, SgMinO) by gasket construction, MPa
GASKET_STRESS_LIMITS = (
    ('grooved', (380, 140, 97)),
    ('corruga', (275, 140, 97)),
    ('spiral', (0, 140, 97)),
)


def check_pcc1(inputs, result):
    """Select the assembly bolt stress and check it against steps 5-8."""
    root_area = result.single_bolt_area * inputs.bolt_count
    ring_area = math.pi / 4 * (result.seating_od ** 2 - result.seating_id ** 2)
    pass_area = (inputs.pass_part_area_reduction / 100
                 * inputs.pass_partition_width * inputs.pass_partition_length)
    ag = ring_area + pass_area
    p_mpa = FlangeCalculator.pressure_to_mpa(inputs.design_pressure, inputs.pressure_unit)

    # Zero limits mean "not specified"; clamp order is SbMax, SbMin, SfMax
    sb_calc = inputs.sg_t * ag / root_area if root_area > 0 else 0
    after_max = min(sb_calc, inputs.sb_max or math.inf)
    after_min = max(after_max, inputs.sb_min or 0)
    sb_sel = min(after_min, inputs.sf_max or math.inf)

    if root_area > 0:
        step5 = inputs.sg_min_s * ag / root_area
        step6 = ((inputs.sg_min_o * ag + math.pi / 4 * p_mpa * result.seating_id ** 2)
                 / ((inputs.pcc_g or 1) * root_area))
        step7 = inputs.sg_max * ag / root_area
    else:
        step5 = step6 = 0
        step7 = math.inf
    if inputs.phi_f_max > 0:
        step8 = inputs.sf_max * (inputs.phi_g_max or 1) / inputs.phi_f_max
    else:
        step8 = math.inf

    return Pcc1Result(
        total_root_area=root_area,
        ring_area=ring_area,
        reduced_pass_area=pass_area,
        gasket_area=ag,
        sb_sel_calc=sb_calc,
        sb_sel_after_max=after_max,
        sb_sel_after_min=after_min,
        sb_sel_final=sb_sel,
        step5_threshold=step5,
        step6_threshold=step6,
        step7_threshold=step7,
        step8_threshold=step8,
        step5_ok=sb_sel >= step5 - TOLERANCE,
        step6_ok=sb_sel >= step6 - TOLERANCE,
        step7_ok=inputs.sg_max == 0 or sb_sel <= step7 + TOLERANCE,
        step8_ok=inputs.phi_f_max == 0 or sb_sel <= step8 + TOLERANCE,
    )


def pcc1_defaults(inputs, tables):
    """Return inputs with gasket and bolt-yield dependent PCC-1 limits filled in."""
    changes = {}
    gasket_type = inputs.gasket_type.lower()
    for keyword, (sg_max, sg_min_s, sg_min_o) in GASKET_STRESS_LIMITS:
        if keyword in gasket_type:
            changes.update(sg_max=sg_max, sg_min_s=sg_min_s, sg_min_o=sg_min_o)
            break
    # Only a known bolt material carries a yield to derive from
    material, used_default = tables.bolt_material(inputs.bolt_material)
    if not used_default and material.min_yield:
        changes['sb_max'] = round(material.min_yield * 0.7, 1)
        changes['sb_min'] = round(material.min_yield * 0.4, 1)
    return replace(inputs, **changes)
