# Supabase table: water_fetch_posts
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: bigserial (primary key)
- firebase_uid: text (not null, references user_profiles.firebase_uid on delete cascade) - poster
- message: text (not null)
- fetch_type: text (not null) - 'Single' | 'Together'
- partner_user_id: text (nullable) - partner's display name, Together posts only
- points: numeric(5,2) (not null, >= 0) - points each participant earns once verified
- verification_status: text (not null, default 'pending') - 'pending' | 'verified' | 'rejected'
- verified_by: text[] (default '{}') - display names, insertion ordered, no duplicates
- rejected_by: text[] (default '{}') - display names, disjoint from verified_by
- created_at: timestamptz (default: now())
- updated_at: timestamptz (default: now(), maintained by trigger) - used as the
  version column for conditional verify/reject writes
"""
