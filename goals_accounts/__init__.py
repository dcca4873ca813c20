"""
Goals & Accounts - Source Package

A local-first record store for personal goals and money owed
to / by other people.

DESIGN PRINCIPLES:
1. One document, one storage slot
2. Reading never fails - corrupt or missing data means an empty dataset
3. Every mutation re-reads before it writes
4. Restore replaces, never merges
5. Storage medium is swappable
"""

__version__ = "1.0.0"
__author__ = "Goals & Accounts Team"
