"""HTTP API for the care payroll engine."""
