# Firebase Auth
# Identity is owned by Firebase; this backend never stores passwords or sessions.
# Clients sign in with the Firebase SDK and send the resulting ID token as a
# Bearer token. The token's uid is the key used for user_profiles.firebase_uid.

"""
Decoded Firebase ID token fields used here:
- uid: str - stable user identifier
- email: str (nullable)
- name: str (nullable) - display name set at signup
- picture: str (nullable) - avatar URL

Profiles are kept in Supabase (see app/modules/profiles/models.py) and are
created or refreshed from these fields on POST /auth/session.
"""
