# Supabase table: invite_codes
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- church_id: uuid (foreign key to churches.id, on delete cascade)
- campus_id: uuid (foreign key to campuses.id, nullable) - members joining with this code land on this campus
- code: text (not null, unique) - URL-safe, INVITE_CODE_LENGTH characters
- created_by: text (not null) - auth user id
- max_uses: integer (nullable) - null means unlimited
- current_uses: integer (not null, default: 0)
- expires_at: timestamp (nullable) - null means no expiry
- is_active: boolean (not null, default: true)
- created_at: timestamp (default: now())
"""
