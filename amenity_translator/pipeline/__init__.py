"""Run orchestration and call scheduling."""
