"""
Scoring post-processing: pure functions over already-scored batches.

Modules
-------
classifier : CategoryClassifier — threshold and pass-through policies.
tiering    : assign_priorities() — min–max banding within each category.
ranker     : rank_results() — stable (category, band, magnitude) ordering.
merge      : merge_results() — overlay partial results onto the collection.
"""
