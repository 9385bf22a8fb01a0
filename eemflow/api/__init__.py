"""HTTP surface for the correlation and flow engine."""
