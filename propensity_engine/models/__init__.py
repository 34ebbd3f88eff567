"""
Frozen pydantic domain models.

Modules
-------
account     : FeatureRecord, Attribution, BackendPrediction, ScoredResult.
explanation : Decomposition, ResolvedFactor, FactorPanel, Explanation.
"""
