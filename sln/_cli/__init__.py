"""sln CLI."""
