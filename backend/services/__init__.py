"""Business logic for projects, membership, invite links and tasks."""
