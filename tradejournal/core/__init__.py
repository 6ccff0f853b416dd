"""Core HTTP plumbing: response envelope, JWT verification and dependencies."""
