"""Portfolio state: investment entries and return rates per product."""
