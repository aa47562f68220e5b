"""Runtime configuration for deck image generation."""
