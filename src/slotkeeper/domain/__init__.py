"""Domain layer for SLOTKEEPER.

Pure value objects and algorithms: time normalization, the rolling calendar
window, slot generation, duplicate detection, and the day/slot views. Nothing
here performs I/O or imports from other `slotkeeper.*` layers.
"""
