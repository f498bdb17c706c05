"""User accounts. Users are global; tenant access goes through memberships."""
