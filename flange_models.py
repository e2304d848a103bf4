from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class FlangeDesignInputs:
    item_no: str = 'GEN-001'
    part_name: str = 'CHANNEL SIDE'
    # Bolting
    bolt_size: float = 0.75            # in
    bolt_count: int = 48
    bolt_material: str = 'SA-193 B7 (<= 64)'
    # Shell / hub
    inside_diameter: float = 1000.0    # mm
    g0: float = 5.0                    # mm, 0 = use required shell thickness
    g1: float = 7.0                    # mm, 0 = derive from g0
    shell_material: str = 'SA-516-70'
    joint_efficiency: float = 1.0
    corrosion_allowance: float = 0.0   # mm
    # Design conditions
    design_pressure: float = 1.0
    pressure_unit: str = 'MPa'
    design_temperature: float = 100.0
    temperature_unit: str = '°C'
    # Gasket geometry
    clearance: float = 2.5             # mm, C
    shell_gap_a: float = 3.0           # mm, A
    gasket_seating_width: float = 15.0 # mm
    has_inner_ring: bool = True
    has_outer_ring: bool = True
    inner_ring_width_manual: float = 0.0
    outer_ring_width_manual: float = 0.0
    gasket_type: str = 'Spiral-wound (Stainless steel, Monel, and Ni-base alloy)'
    pass_gasket_type: str = 'Spiral-wound (Stainless steel, Monel, and Ni-base alloy)'
    facing_sketch: str = '1a: Flat Face / Groove'
    pass_partition_length: float = 0.0 # mm
    pass_partition_width: float = 0.0  # mm
    # Manual override
    use_manual_override: bool = False
    actual_bcd: float = 0.0
    actual_od: float = 0.0
    manual_seating_id: float = 0.0
    manual_seating_od: float = 0.0
    manual_m: float = 0.0
    manual_y: float = 0.0
    manual_pass_m: float = 0.0
    manual_pass_y: float = 0.0
    use_hydraulic_tensioning: bool = False
    # PCC-1 / API-660 assembly bolt stress
    use_pcc1_check: bool = False
    sg_t: float = 200.0
    sg_min_s: float = 140.0
    sg_min_o: float = 97.0
    sg_max: float = 0.0                # 0 = not specified
    sb_max: float = 507.5
    sb_min: float = 290.0
    sf_max: float = 150.0
    phi_f_max: float = 0.32            # 0 = not specified
    phi_g_max: float = 1.0
    pcc_g: float = 0.7
    pass_part_area_reduction: float = 50.0  # %


@dataclass(frozen=True)
class MaterialStressCurve:
    id: str
    min_tensile: float                 # MPa
    min_yield: float                   # MPa
    stresses: Tuple[Optional[float], ...]  # one per temperature step, None = no published value


@dataclass(frozen=True)
class BoltSpec:
    """TEMA Table D-5 row. R, B_min and E are in inches."""
    size: float
    R: float
    B_min: float
    E: float
    hole_size: float                   # mm
    tensile_area: float                # mm^2
    max_pitch: Optional[float] = None  # mm, WHC max pitch


@dataclass(frozen=True)
class TensioningSpec:
    size: float
    B_ten: float                       # in


@dataclass(frozen=True)
class GasketFactorSpec:
    id: str
    m: float
    y: float                           # psi
    sketches: str = ''


@dataclass(frozen=True)
class RingStandardSpec:
    min: float                         # shell ID, mm
    max: float
    ir_min: float                      # mm
    or_min: float


@dataclass(frozen=True)
class CalculationResult:
    # Bolt circle
    bcd_method1: float
    bcd_method2: float
    bcd_method3: float
    selected_bcd_source: int
    bcd_tema: float
    od_tema: float
    final_bcd: float
    final_od: float
    # Bolt spacing
    effective_b_min: float             # in
    tensioning_active: bool
    bolt_spacing_min: float            # mm
    max_bolt_spacing: float            # mm
    geometric_pitch: float             # mm
    spacing_ok: bool
    pitch_status: str
    radial_distance: float             # mm
    edge_distance: float               # mm
    bolt_hole_size: float              # mm
    # Gasket
    effective_c: float
    shell_gap_a: float
    gasket_seating_width: float
    inner_ring_width: float
    outer_ring_width: float
    seating_id: float
    seating_od: float
    gasket_id: float
    gasket_od: float
    max_raised_face: float
    gasket_m: float
    gasket_y: float
    pass_m: float
    pass_y: float
    # Loads
    n_width: float
    b0_width: float
    b_width: float
    g_mean_dia: float
    h_force: float
    hp_force: float
    wm1: float
    wm2: float
    # Bolt areas / stresses
    single_bolt_area: float
    total_bolt_area: float
    required_bolt_area: float
    ambient_allowable_stress: float
    design_allowable_stress: float
    total_bolt_load_ambient: float
    total_bolt_load_design: float
    available_load: float
    required_load: float
    margin_percent: float
    is_safe: bool
    # Shell
    pressure_mpa: float
    temperature_c: float
    shell_stress: float
    g0_required: float
    g0: float
    g1: float
    defaults_used: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class OptimizationResult:
    found: bool
    bolt_size: Optional[float] = None
    bolt_count: Optional[int] = None
    result: Optional[CalculationResult] = None
    candidates_evaluated: int = 0


@dataclass(frozen=True)
class Pcc1Result:
    total_root_area: float
    ring_area: float
    reduced_pass_area: float
    gasket_area: float
    sb_sel_calc: float
    sb_sel_after_max: float
    sb_sel_after_min: float
    sb_sel_final: float
    step5_threshold: float
    step6_threshold: float
    step7_threshold: float
    step8_threshold: float
    step5_ok: bool
    step6_ok: bool
    step7_ok: bool
    step8_ok: bool

    @property
    def passed(self):
        return self.step5_ok and self.step6_ok and self.step7_ok and self.step8_ok
