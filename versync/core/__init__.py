"""Core building blocks: results, exit codes, configuration, project detection."""
