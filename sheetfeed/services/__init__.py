"""Run-level services: orchestration, progress display, summary rendering."""
