"""
Propensity Engine — prediction post-processing and explainability for
account-scoring backends (healthcare collectability, right-party contact,
utility payment propensity).
"""

__version__ = "0.1.0"
