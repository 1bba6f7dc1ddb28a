"""Input readers, configuration, CLI and experiment runner."""
