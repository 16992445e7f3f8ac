"""sln providers."""
