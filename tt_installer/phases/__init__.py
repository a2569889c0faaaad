"""
Phase bodies of the install plan.

Each phase is a plain function taking a PhaseContext and returning a
PhaseOutcome. Failures are returned, not raised; the sequencer applies the
phase's failure policy.
"""
