"""Domain layer - sheet management on top of the core infrastructure."""
