# Supabase tables: church_members, member_departures
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

church_members:
- id: uuid (primary key)
- church_id: uuid (foreign key to churches.id, on delete cascade)
- campus_id: uuid (foreign key to campuses.id, nullable)
- user_id: text (not null, unique) - a user belongs to at most one church
- role: text (not null) - values: owner, overseer, moderator, member
- user_name: text (nullable)
- user_email: text (nullable)
- joined_at: timestamp (default: now())
- updated_at: timestamp (nullable)

member_departures:
- id: uuid (primary key)
- church_id: uuid (foreign key to churches.id, on delete cascade)
- user_id: text (not null)
- user_name: text (nullable)
- role: text (not null) - role held when leaving
- reason: text (nullable)
- departure_type: text (not null) - values: left, removed
- removed_by: text (nullable) - user id of the remover for departure_type = removed
- departed_at: timestamp (default: now())
"""
