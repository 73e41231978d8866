"""Actions - What deploy-doctor does with a finished (or running) battery."""
