"""
Terminal reporting for scoring runs and explanations.

Modules
-------
formatters : ASCII table/explanation formatters returning plain strings.
"""
