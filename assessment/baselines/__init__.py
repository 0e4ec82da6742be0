"""
Baseline schedulers for espresso scheduler evaluation.

Provides comparison schedulers to demonstrate the effect of lazy promotion:
- StaticPriorityScheduler: Priority fixed at admission (shows missed promotions)
- FIFOScheduler: No priority (lower bound baseline)
"""

from .fifo_scheduler import FIFOScheduler
from .static_priority_scheduler import StaticPriorityScheduler

__all__ = [
    "StaticPriorityScheduler",
    "FIFOScheduler",
]
