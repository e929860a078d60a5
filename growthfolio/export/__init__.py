"""CSV and JSON exports of portfolio state and projections."""
