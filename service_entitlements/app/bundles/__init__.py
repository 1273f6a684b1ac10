"""
Bundle entitlement engine.

Defines the bundle catalog model, the evaluator that turns an
organization's SKUs and the caller's account number into per-bundle
verdicts, and the mapping of failed upstream lookups to dependency errors.

Modules of interest:
- models: Bundle definitions, catalog, lookup results, API models.
- catalog: YAML loading and atomic publication of the catalog.
- evaluator: Pure per-bundle entitlement algorithm.
- dependency_errors: Failed lookup -> structured 500 payload.
"""
