"""
Use Cases

Organized into domain folders:
- verification/: Intake, review pipeline, documents, history
- organizations/: Organization invites and the invite fast path
- rbac/: Role assignment and permission lookup
"""
