"""Library layer shared by the CLI: command model, configuration and helpers."""
