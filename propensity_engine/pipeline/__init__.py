"""
Scoring session — the committed collection and its latest run.

Modules
-------
session : ScoringSession, ScoringRun, PredictionBackend protocol.
"""
