"""Data access and domain rules for Spot Feed."""
