"""Services Layer — imperative shell around the pure core.

Invariants:
    - Services call core validators, then repositories; never the other way round
    - Expected outcomes (invalid input, missing record) are raised as typed RosterErrors

Design Decisions:
    - Routes stay thin: every decision about a student lives in StudentService
"""
