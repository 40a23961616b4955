"""MagicApp guideline viewer: catalog, recommendations, sections, render, export."""
