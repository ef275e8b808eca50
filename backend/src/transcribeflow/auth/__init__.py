"""Authentication: password hashing, JWT access tokens, login sessions."""
