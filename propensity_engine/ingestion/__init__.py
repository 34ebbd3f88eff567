"""
Account sources and prediction backends.

Modules
-------
client          : PredictionClient (httpx) + BackendError for live backends.
fixture         : FixtureBackend — deterministic offline healthcare scorer.
sample_accounts : generate_sample_accounts() — seeded healthcare test data.
"""
