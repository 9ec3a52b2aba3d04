"""Processing pipelines built on top of the provider services."""
