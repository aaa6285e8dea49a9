"""
Use Cases

Organized into domain folders:
- auth/: Signup, email confirmation and login
- organizations/: Organizations, projects and memberships
- invitations/: Invitation lifecycle
- notifications/: In-app notifications and housekeeping
- preferences/: Notification preferences, settings and push subscriptions
- delivery/: Email/push queue draining and retries
- work/: Tasks, forms, assignments and approvals

Import from subdirectories.
"""
