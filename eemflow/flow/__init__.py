"""Flow graphs: building from events and relations, analysis and export."""
