"""HTTP surface for the funnel editor."""
