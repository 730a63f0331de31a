"""CLI entrypoint and scenario runner."""
