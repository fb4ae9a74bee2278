"""Protocol constants.

Centralizes basis-point math and gas parameters shared across modules.
"""

# Basis points denominator (10000 bps = 100%)
BIPS_BASE = 10_000

# Gas margin added on top of node estimates (1000 bps = 10%)
GAS_MARGIN_BPS = 1_000

# Tolerance when checking that breakdown percentages add up to 100
BREAKDOWN_PERCENTAGE_TOLERANCE = "0.5"
