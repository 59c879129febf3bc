"""Core collaborators: path resolution, platform capabilities, settings."""
