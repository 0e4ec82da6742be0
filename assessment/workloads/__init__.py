"""
Workload generators for espresso scheduler evaluation.

Provides scenarios for testing queue discipline characteristics:
- Random Population: The classic office setup
- Priority Surge: Starvation of normal engineers under steady promotion
- All Normal: Pure FIFO sanity check
- Late Promotion: Overtaking after a window opens mid-run
"""

from .scenarios import (
    NEVER_BUSY,
    Workload,
    generate_all_normal,
    generate_late_promotion,
    generate_priority_surge,
    generate_random_population,
)

__all__ = [
    "Workload",
    "NEVER_BUSY",
    "generate_random_population",
    "generate_priority_surge",
    "generate_all_normal",
    "generate_late_promotion",
]
