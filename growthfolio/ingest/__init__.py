"""Import of investment entries from CSV reports."""
