"""
Explainability: turn a scored account's attributions into a display-ready
explanation.

Modules
-------
formatting    : Browser-compatible number/date/text rendering primitives.
resolver      : FeatureResolver capability + TableFeatureResolver.
decomposition : reconstruct() — base value + attributions → probability.
factors       : display_sort(), keep_largest(), select_top_factors().
explanation   : build_explanation() — end-to-end for one account.
"""
