"""RBAC authorization core: roles, user-role assignments, permission checks."""
