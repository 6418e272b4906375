"""
Storage collaborators for profiles, swipes and matches.

Responsibilities:
- Define the profile/swipe store contracts the discovery engine consumes.
- Provide an in-memory store for local runs and tests.
- Provide a Supabase-backed store for production.
"""
