"""
MediConnect - healthcare marketplace client orchestration.

Doctor search and booking, pharmacy and lab-test catalogs, and the
wearable-band health metrics dashboard.
"""

__version__ = "0.1.0"
