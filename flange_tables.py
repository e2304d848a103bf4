import logging
from dataclasses import dataclass
from typing import Tuple

from flange_models import (
    BoltSpec,
    GasketFactorSpec,
    MaterialStressCurve,
    RingStandardSpec,
    TensioningSpec,
)

logger = logging.getLogger(__name__)

# ASME II-D allowable stress temperature steps (°C)
BOLT_TEMP_STEPS = (40, 65, 100, 125, 150, 200, 250, 300, 325, 350, 375, 400, 425, 450, 475, 500)
PLATE_TEMP_STEPS = (40, 65, 100, 125, 150, 200, 250, 300, 325, 350, 375, 400, 425, 450, 475, 500, 525, 550)

AMBIENT_STEP_C = 40
AMBIENT_FALLBACK_STRESS = 138.0  # MPa

ASME_BOLT_MATERIALS = (
    MaterialStressCurve('SA-193 B7 (<= 64)', 860, 725,
                        (172,) * 11 + (156, 131, 107, 83, 59)),
    MaterialStressCurve('SA-193 B7 (> 64 <= 100)', 795, 655,
                        (159,) * 11 + (144, 121, 99, 77, 55)),
    MaterialStressCurve('SA-193 B16 (<= 64)', 860, 725,
                        (172,) * 12 + (166, 147, 121, 92)),
    # No published values above 375 °C
    MaterialStressCurve('SA-320 L7 (<= 64)', 860, 725,
                        (172,) * 11 + (None,) * 5),
    MaterialStressCurve('SA-193 B8 Cl.1', 515, 205,
                        (129, 129, 129, 125, 121, 115, 111, 107, 105, 103, 101, 99, 97, 95, 93, 91)),
)

ASME_SHELL_MATERIALS = (
    MaterialStressCurve('SA-516-70', 485, 260,
                        (138,) * 9 + (134, 121, 101, 83, 66, 51, 38, 27, None)),
    MaterialStressCurve('SA-516-60', 415, 220,
                        (118,) * 9 + (117, 108, 92, 77, 63, 51, 38, 27, None)),
    MaterialStressCurve('SA-105', 485, 250,
                        (138,) * 9 + (134, 121, 101, 83, 66, 51, 38, 27, None)),
    MaterialStressCurve('SA-240 316L', 485, 170,
                        (115, 115, 115, 112, 108, 101, 95, 90, 88, 86, 85, 83, 82, 81, 80, 78, 76, 74)),
)

# TEMA Table D-5; hole = d + 1/8", root area from TEMA, WHC max pitch where published
TEMA_BOLT_DATA = (
    BoltSpec(0.5, 0.8125, 1.25, 0.625, 15.9, 81.3, 75),
    BoltSpec(0.625, 0.9375, 1.5, 0.75, 19.1, 130.3, 90),
    BoltSpec(0.75, 1.125, 1.75, 0.8125, 22.2, 194.8, 105),
    BoltSpec(0.875, 1.25, 2.0625, 0.9375, 25.4, 270.3, 115),
    BoltSpec(1.0, 1.375, 2.25, 1.0625, 28.6, 355.5, 125),
    BoltSpec(1.125, 1.5, 2.5, 1.125, 31.8, 469.7, 135),
    BoltSpec(1.25, 1.75, 2.8125, 1.25, 34.9, 599.4, 145),
    BoltSpec(1.375, 1.875, 3.0625, 1.375, 38.1, 745.2, 155),
    BoltSpec(1.5, 2.0, 3.25, 1.5, 41.3, 906.5, 165),
    BoltSpec(1.625, 2.125, 3.5, 1.625, 44.5, 1083.9, 175),
    BoltSpec(1.75, 2.25, 3.75, 1.75, 47.6, 1277.4, 185),
    BoltSpec(1.875, 2.375, 4.0, 1.875, 50.8, 1486.5, 195),
    BoltSpec(2.0, 2.5, 4.25, 2.0, 54.0, 1711.0, 205),
    BoltSpec(2.25, 2.75, 4.75, 2.25, 60.3, 2208.4),
    BoltSpec(2.5, 3.0625, 5.25, 2.375, 66.7, 2769.0),
    BoltSpec(2.75, 3.375, 5.75, 2.625, 73.0, 3392.9),
    BoltSpec(3.0, 3.625, 6.25, 2.875, 79.4, 4080.2),
)

# Minimum spacing for hydraulic tensioning tool clearance
HYDRAULIC_TENSIONING_DATA = (
    TensioningSpec(1.0, 2.75),
    TensioningSpec(1.125, 3.0),
    TensioningSpec(1.25, 3.25),
    TensioningSpec(1.375, 3.5),
    TensioningSpec(1.5, 3.75),
    TensioningSpec(1.625, 4.0),
    TensioningSpec(1.75, 4.25),
    TensioningSpec(1.875, 4.5),
    TensioningSpec(2.0, 4.75),
    TensioningSpec(2.25, 5.25),
    TensioningSpec(2.5, 5.75),
    TensioningSpec(2.75, 6.25),
    TensioningSpec(3.0, 6.75),
)

# ASME VIII Div.1 Table 2-5.1 gasket factors (y in psi)
GASKET_TYPES = (
    GasketFactorSpec('Spiral-wound (Stainless steel, Monel, and Ni-base alloy)', 3.0, 10000, '1a, 1b'),
    GasketFactorSpec('Spiral-wound (Carbon)', 2.5, 10000, '1a, 1b'),
    GasketFactorSpec('Grooved metal (Stainless steel)', 4.25, 10100, '1a, 1b, 1c, 1d, 2'),
    GasketFactorSpec('Corrugated metal (Stainless steel)', 3.75, 9000, '1a, 1b'),
    GasketFactorSpec('Flat metal jacketed (Stainless steel)', 3.75, 9000, '1a, 1b, 1c, 1d, 2'),
    GasketFactorSpec('Solid flat metal (Stainless steel)', 6.5, 26000, '1a, 1b, 1c, 1d, 2'),
    GasketFactorSpec('Ring joint (Stainless steel)', 6.5, 26000, '6'),
    GasketFactorSpec('Elastomers without fabric (75A or higher)', 1.0, 200, '1a, 1b, 1c, 1d, 4, 5'),
)

FACING_SKETCHES = (
    '1a: Flat Face / Groove',
    '1b: Tongue & Groove',
    '2: Raised Nubbin',
    '5: Raised Face',
    '6: Ring Joint',
)

# Spiral-wound inner / outer retaining ring minimum widths by shell ID (mm)
GASKET_RING_TABLE = (
    RingStandardSpec(0, 300, 5, 8),
    RingStandardSpec(301, 600, 6, 10),
    RingStandardSpec(601, 1200, 8, 12),
    RingStandardSpec(1201, 2000, 10, 15),
    RingStandardSpec(2001, 100000, 12, 18),
)


@dataclass(frozen=True)
class ReferenceTables:
    """Read-only snapshot of every table an evaluation looks up.

    Lookups never raise: a miss returns the first entry of the table
    (ring standards: the last, largest range) together with a flag so
    callers can report that a default was used.
    """
    bolt_materials: Tuple[MaterialStressCurve, ...] = ASME_BOLT_MATERIALS
    plate_materials: Tuple[MaterialStressCurve, ...] = ASME_SHELL_MATERIALS
    bolt_specs: Tuple[BoltSpec, ...] = TEMA_BOLT_DATA
    tensioning_specs: Tuple[TensioningSpec, ...] = HYDRAULIC_TENSIONING_DATA
    gasket_types: Tuple[GasketFactorSpec, ...] = GASKET_TYPES
    ring_standards: Tuple[RingStandardSpec, ...] = GASKET_RING_TABLE
    bolt_temp_steps: Tuple[float, ...] = BOLT_TEMP_STEPS
    plate_temp_steps: Tuple[float, ...] = PLATE_TEMP_STEPS

    @staticmethod
    def _first_match(table, name, predicate):
        for entry in table:
            if predicate(entry):
                return entry, False
        logger.debug("%s lookup missed, using first entry", name)
        return table[0], True

    def bolt_material(self, material_id):
        return self._first_match(self.bolt_materials, 'bolt_materials', lambda m: m.id == material_id)

    def plate_material(self, material_id):
        return self._first_match(self.plate_materials, 'plate_materials', lambda m: m.id == material_id)

    def bolt_spec(self, size):
        return self._first_match(self.bolt_specs, 'bolt_specs', lambda b: b.size == size)

    def gasket(self, gasket_id):
        return self._first_match(self.gasket_types, 'gasket_types', lambda g: g.id == gasket_id)

    def tensioning_spec(self, size):
        """Optional table: a miss is None, not a default."""
        for spec in self.tensioning_specs:
            if spec.size == size:
                return spec
        return None

    def ring_standard(self, inside_diameter):
        for ring in self.ring_standards:
            if ring.min <= inside_diameter <= ring.max:
                return ring, False
        logger.debug("no ring standard covers ID %s, using last range", inside_diameter)
        return self.ring_standards[-1], True

    def bolt_sizes(self, min_size=0.0):
        return sorted(b.size for b in self.bolt_specs if b.size >= min_size)


def default_tables():
    return ReferenceTables()
