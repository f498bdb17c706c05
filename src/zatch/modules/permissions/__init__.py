"""Role permission grid administration."""
