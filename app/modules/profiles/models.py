# Supabase table: user_profiles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Full DDL (RLS policies, indexes, triggers) lives in sql/schema.sql

"""
Expected Supabase table structure:
- id: bigserial (primary key)
- firebase_uid: text (unique, not null) - uid from Firebase Auth
- display_name: text (not null) - also stored raw as partner_user_id on Together posts
- photo_url: text (nullable)
- email: text (nullable)
- created_at: timestamptz (default: now())
- updated_at: timestamptz (default: now(), maintained by trigger)
"""
