"""Optional plotting of simulation results (requires matplotlib)."""
