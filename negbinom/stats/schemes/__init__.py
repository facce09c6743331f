"""
Model implementations built on the common numerical layer.

Available schemes:
- `negative_binomial`: failures before the r-th success, with confidence
  bounds on the success fraction and trial-count planning
"""
