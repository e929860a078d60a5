"""Pure projection math: future value, invested totals, returns."""
