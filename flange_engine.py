import logging
import math
from dataclasses import replace

from flange_models import CalculationResult, OptimizationResult
from flange_tables import AMBIENT_FALLBACK_STRESS, AMBIENT_STEP_C

logger = logging.getLogger(__name__)

INCH = 25.4
PSI_TO_MPA = 0.00689476
GASKET_EDGE = 1.5       # mm, gasket OD to hole clearance land
DEFAULT_CLEARANCE = 2.5  # mm
B0_LIMIT = 6.0          # mm

SEARCH_MIN_BOLT_SIZE = 0.75
SEARCH_BOLT_COUNTS = tuple(range(4, 81, 4))

PRESSURE_TO_MPA = {'MPa': 1.0, 'Bar': 0.1, 'PSI': 0.00689476, 'kg/cm²': 0.0980665}
FORCE_FROM_N = {'N': 1.0, 'kN': 0.001, 'lbf': 0.224809, 'kgf': 0.101972}


class FlangeCalculator:

    @staticmethod
    def pressure_to_mpa(value, unit):
        return value * PRESSURE_TO_MPA.get(unit, 1.0)

    @staticmethod
    def temperature_to_celsius(value, unit):
        if unit == '°F':
            return (value - 32) * 5 / 9
        if unit == 'K':
            return value - 273.15
        return value

    @staticmethod
    def convert_force(value_n, unit):
        return value_n * FORCE_FROM_N.get(unit, 1.0)

    @staticmethod
    def default_force_unit(pressure_unit):
        if pressure_unit == 'PSI':
            return 'lbf'
        if pressure_unit == 'kg/cm²':
            return 'kgf'
        return 'kN'

    @staticmethod
    def interpolate_stress(temp_c, curve, steps):
        """Piecewise-linear allowable stress; absent values read as 0."""
        clean = [s or 0 for s in curve]
        if temp_c <= steps[0]:
            return clean[0]
        if temp_c >= steps[-1]:
            defined = [s for s in curve if s]
            return defined[-1] if defined else 0
        for i in range(len(steps) - 1):
            t1, t2 = steps[i], steps[i + 1]
            if t1 <= temp_c <= t2:
                s1 = clean[i]
                s2 = clean[i + 1] or s1
                return s1 + (s2 - s1) * (temp_c - t1) / (t2 - t1)
        return clean[0]

    @staticmethod
    def ambient_stress(curve, steps):
        """Allowable stress at the 40 °C step, 138 MPa if unpublished."""
        if AMBIENT_STEP_C in steps:
            value = curve[list(steps).index(AMBIENT_STEP_C)]
            if value:
                return value
        return AMBIENT_FALLBACK_STRESS

    @staticmethod
    def shell_thickness_g0(p_mpa, inside_diameter, shell_stress, joint_efficiency, corrosion_allowance):
        """UG-27 circumferential stress - required shell thickness g0"""
        denom = shell_stress * joint_efficiency - 0.6 * p_mpa
        t = p_mpa * (inside_diameter / 2 + corrosion_allowance) / (denom if denom > 0 else 1)
        return math.ceil(t + corrosion_allowance)

    @staticmethod
    def hub_thickness_g1(g0):
        return math.ceil(g0 * 1.3 / 3 + g0)

    @staticmethod
    def effective_min_spacing(bolt, tensioning, use_hydraulic_tensioning):
        """Minimum bolt spacing (in), widened for hydraulic tensioning tools"""
        if use_hydraulic_tensioning and tensioning is not None:
            return max(bolt.B_min, tensioning.B_ten)
        return bolt.B_min

    @staticmethod
    def bcd_pitch_method(spacing_in, bolt_count):
        """Method 1 - BCD from minimum bolt pitch"""
        return math.ceil(spacing_in * INCH * bolt_count / math.pi)

    @staticmethod
    def bcd_radial_method(inside_diameter, g1, R_in):
        """Method 2 - BCD from hub thickness and radial wrench clearance R"""
        return math.ceil(inside_diameter + 2 * g1 + 2 * R_in * INCH)

    @staticmethod
    def bcd_gasket_method(gasket_od, clearance, hole_size):
        """Method 3 - BCD from gasket OD, land and hole clearance"""
        return gasket_od + 2 * GASKET_EDGE + 2 * clearance + hole_size

    @staticmethod
    def max_pitch(bolt):
        if bolt.max_pitch:
            return bolt.max_pitch
        return 2.5 * bolt.size * INCH + 12

    @staticmethod
    def basic_seating_divisor(facing_sketch):
        """ASME Table 2-5.2 - b0 = N / divisor by facing sketch"""
        sketch = facing_sketch.lower()
        if 'ring joint' in sketch:
            return 8
        if 'raised' in sketch or 'nubbin' in sketch:
            return 4
        return 2

    @staticmethod
    def effective_seating_width(b0):
        if b0 <= B0_LIMIT:
            return b0
        return 0.5 * INCH * math.sqrt(b0 / INCH)

    @staticmethod
    def gasket_mean_diameter(seating_id, seating_od, b0, b):
        if b0 <= B0_LIMIT:
            return (seating_id + seating_od) / 2
        return seating_od - 2 * b

    @staticmethod
    def hydrostatic_end_force(G, p_mpa):
        return 0.785 * G ** 2 * p_mpa

    @staticmethod
    def gasket_reaction(b, G, m, p_mpa, pass_width, pass_length, pass_m):
        return 2 * p_mpa * (b * math.pi * G * m + pass_width * pass_length * pass_m)

    @staticmethod
    def seating_load(b, G, y_psi, pass_width, pass_length, pass_y_psi):
        return (math.pi * b * G * (y_psi * PSI_TO_MPA)
                + pass_width * pass_length * (pass_y_psi * PSI_TO_MPA))


def _override(inputs, manual_value, auto_value):
    if inputs.use_manual_override and manual_value != 0:
        return manual_value
    return auto_value


def evaluate(inputs, tables):
    """Resolve flange geometry and bolt loads for one set of inputs."""
    calc = FlangeCalculator
    defaults_used = []

    def lookup(name, found):
        entry, used_default = found
        if used_default:
            defaults_used.append(name)
        return entry

    bolt = lookup('bolt_spec', tables.bolt_spec(inputs.bolt_size))
    bolt_mat = lookup('bolt_material', tables.bolt_material(inputs.bolt_material))
    shell_mat = lookup('shell_material', tables.plate_material(inputs.shell_material))
    gasket = lookup('gasket_type', tables.gasket(inputs.gasket_type))
    pass_gasket = lookup('pass_gasket_type', tables.gasket(inputs.pass_gasket_type))
    ring = lookup('ring_standard', tables.ring_standard(inputs.inside_diameter))
    tensioning = tables.tensioning_spec(inputs.bolt_size)

    p_mpa = calc.pressure_to_mpa(inputs.design_pressure, inputs.pressure_unit)
    temp_c = calc.temperature_to_celsius(inputs.design_temperature, inputs.temperature_unit)

    # Shell and hub
    shell_stress = calc.interpolate_stress(temp_c, shell_mat.stresses, tables.plate_temp_steps)
    g0_required = calc.shell_thickness_g0(p_mpa, inputs.inside_diameter, shell_stress,
                                          inputs.joint_efficiency, inputs.corrosion_allowance)
    g0 = inputs.g0 or g0_required
    g1 = inputs.g1 or calc.hub_thickness_g1(g0)

    # Bolt circle, methods 1 and 2
    b_min = calc.effective_min_spacing(bolt, tensioning, inputs.use_hydraulic_tensioning)
    hole = math.ceil(bolt.hole_size)
    c = inputs.clearance or DEFAULT_CLEARANCE
    bcd1 = calc.bcd_pitch_method(b_min, inputs.bolt_count)
    bcd2 = calc.bcd_radial_method(inputs.inside_diameter, g1, bolt.R)

    # Gasket seating geometry
    ir = (inputs.inner_ring_width_manual or ring.ir_min) if inputs.has_inner_ring else 0
    outer = (inputs.outer_ring_width_manual or ring.or_min) if inputs.has_outer_ring else 0
    w = inputs.gasket_seating_width
    od_by_bcd = max(bcd1, bcd2) - hole - 2 * c - 2 * GASKET_EDGE - 2 * outer
    od_by_shell = inputs.inside_diameter + 2 * inputs.shell_gap_a + 2 * ir + 2 * w
    auto_seating_od = max(od_by_bcd, od_by_shell)
    seating_od = _override(inputs, inputs.manual_seating_od, auto_seating_od)
    seating_id = _override(inputs, inputs.manual_seating_id, auto_seating_od - 2 * w)
    gasket_od = seating_od + 2 * outer
    gasket_id = seating_id - 2 * ir

    # Method 3 and final selection
    bcd3 = calc.bcd_gasket_method(gasket_od, c, hole)
    bcd_max = max(bcd1, bcd2, bcd3)
    source = 1 if bcd_max == bcd1 else 2 if bcd_max == bcd2 else 3
    final_bcd = _override(inputs, inputs.actual_bcd, bcd_max)
    final_od = _override(inputs, inputs.actual_od, math.ceil(final_bcd + 2 * bolt.E * INCH))
    bcd_tema = max(bcd1, bcd2)

    # Pitch
    spacing_min = b_min * INCH
    spacing_max = calc.max_pitch(bolt)
    pitch = math.pi * final_bcd / inputs.bolt_count if inputs.bolt_count > 0 else 0
    if pitch < spacing_min:
        pitch_status = 'PITCH TOO SMALL'
    elif pitch > spacing_max:
        pitch_status = 'PITCH TOO LARGE'
    else:
        pitch_status = 'PITCH OK'

    # Gasket factors
    m = _override(inputs, inputs.manual_m, gasket.m)
    y = _override(inputs, inputs.manual_y, gasket.y)
    pass_m = _override(inputs, inputs.manual_pass_m, pass_gasket.m)
    pass_y = _override(inputs, inputs.manual_pass_y, pass_gasket.y)

    # Loads
    n = (seating_od - seating_id) / 2
    b0 = n / calc.basic_seating_divisor(inputs.facing_sketch)
    b = calc.effective_seating_width(b0)
    G = calc.gasket_mean_diameter(seating_id, seating_od, b0, b)
    pw, pl = inputs.pass_partition_width, inputs.pass_partition_length
    h = calc.hydrostatic_end_force(G, p_mpa)
    hp = calc.gasket_reaction(b, G, m, p_mpa, pw, pl, pass_m)
    wm1 = h + hp
    wm2 = calc.seating_load(b, G, y, pw, pl, pass_y)

    # Bolt areas
    sa = calc.ambient_stress(bolt_mat.stresses, tables.bolt_temp_steps)
    sb = calc.interpolate_stress(temp_c, bolt_mat.stresses, tables.bolt_temp_steps)
    total_area = bolt.tensile_area * inputs.bolt_count
    required_area = max(wm1 / sb if sb > 0 else 0, wm2 / sa if sa > 0 else 0)
    available = total_area * sb
    required = max(wm1, wm2)
    margin = (available - required) / (required if required > 0 else 1) * 100

    return CalculationResult(
        bcd_method1=bcd1,
        bcd_method2=bcd2,
        bcd_method3=bcd3,
        selected_bcd_source=source,
        bcd_tema=bcd_tema,
        od_tema=math.ceil(bcd_tema + 2 * bolt.E * INCH),
        final_bcd=final_bcd,
        final_od=final_od,
        effective_b_min=b_min,
        tensioning_active=bool(inputs.use_hydraulic_tensioning and tensioning is not None
                               and tensioning.B_ten >= bolt.B_min),
        bolt_spacing_min=spacing_min,
        max_bolt_spacing=spacing_max,
        geometric_pitch=pitch,
        spacing_ok=pitch_status == 'PITCH OK',
        pitch_status=pitch_status,
        radial_distance=bolt.R * INCH,
        edge_distance=bolt.E * INCH,
        bolt_hole_size=hole,
        effective_c=c,
        shell_gap_a=inputs.shell_gap_a,
        gasket_seating_width=w,
        inner_ring_width=ir,
        outer_ring_width=outer,
        seating_id=seating_id,
        seating_od=seating_od,
        gasket_id=gasket_id,
        gasket_od=gasket_od,
        max_raised_face=final_bcd - hole - 2 * c,
        gasket_m=m,
        gasket_y=y,
        pass_m=pass_m,
        pass_y=pass_y,
        n_width=n,
        b0_width=b0,
        b_width=b,
        g_mean_dia=G,
        h_force=h,
        hp_force=hp,
        wm1=wm1,
        wm2=wm2,
        single_bolt_area=bolt.tensile_area,
        total_bolt_area=total_area,
        required_bolt_area=required_area,
        ambient_allowable_stress=sa,
        design_allowable_stress=sb,
        total_bolt_load_ambient=total_area * sa,
        total_bolt_load_design=total_area * sb,
        available_load=available,
        required_load=required,
        margin_percent=margin,
        is_safe=available >= required,
        pressure_mpa=p_mpa,
        temperature_c=temp_c,
        shell_stress=shell_stress,
        g0_required=g0_required,
        g0=g0,
        g1=g1,
        defaults_used=tuple(defaults_used),
    )


def optimize(inputs, tables, fixed_size_only=False,
             min_size=SEARCH_MIN_BOLT_SIZE, bolt_counts=SEARCH_BOLT_COUNTS):
    """Search bolt size x count for the feasible layout with the lowest required load.

    Sizes ascend, then counts ascend; the first candidate reaching the
    minimum load wins a tie.
    """
    if fixed_size_only:
        # A size missing from the table evaluates as the default spec; report that size
        bolt, _ = tables.bolt_spec(inputs.bolt_size)
        sizes = [bolt.size]
    else:
        sizes = tables.bolt_sizes(min_size)
    best = None
    evaluated = 0
    for size in sizes:
        for count in bolt_counts:
            candidate = replace(inputs, bolt_size=size, bolt_count=count, use_manual_override=False)
            result = evaluate(candidate, tables)
            evaluated += 1
            if result.margin_percent < 0 or not result.spacing_ok:
                continue
            if best is None or result.required_load < best[2].required_load:
                best = (size, count, result)
    logger.debug("optimizer evaluated %d candidates over %d sizes", evaluated, len(sizes))
    if best is None:
        return OptimizationResult(found=False, candidates_evaluated=evaluated)
    size, count, result = best
    return OptimizationResult(found=True, bolt_size=size, bolt_count=count,
                              result=result, candidates_evaluated=evaluated)
