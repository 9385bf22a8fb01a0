"""Application services built on the correlation and flow engine."""
