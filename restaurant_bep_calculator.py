"""
Compatibility wrapper module so you can `import restaurant_bep_calculator as rbc`.
This simply exposes the main API from `bep_engine.py`.
"""

import bep_engine as _impl
from bep_models import BepSnapshot, snapshot_from_dict

# Re-expose the commonly used symbols
CONFIG = _impl.CONFIG
run_full_bep_analysis = _impl.run_full_bep_analysis
calculate_bep = _impl.calculate_bep
calculate_monthly_analysis = _impl.calculate_monthly_analysis
calculate_menu_analysis = _impl.calculate_menu_analysis

# Convenience: expose the whole implementation module as an attribute
bep_engine = _impl

__all__ = [
    "CONFIG",
    "BepSnapshot",
    "snapshot_from_dict",
    "run_full_bep_analysis",
    "calculate_bep",
    "calculate_monthly_analysis",
    "calculate_menu_analysis",
    "bep_engine",
]
