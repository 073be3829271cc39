"""Application services: orchestration over repositories and units of work."""
