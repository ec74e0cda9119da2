"""
Authentication layer.

Responsibilities:
- Register users by email and verify bcrypt password hashes.
- Resolve the logged-in user from the session and enforce the admin role.
- Track each user's liked and recently viewed courses.
"""
