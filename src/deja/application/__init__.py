"""Application layer orchestrating the feature slices."""
