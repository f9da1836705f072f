# Supabase tables: churches, campuses, campus_overseers
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

churches:
- id: uuid (primary key)
- name: text (not null)
- description: text (nullable)
- location: text (nullable)
- owner_id: text (not null) - auth user id of the current owner
- is_public: boolean (default: true) - listed in church search
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

campuses:
- id: uuid (primary key)
- church_id: uuid (foreign key to churches.id, on delete cascade)
- name: text (not null)
- location: text (nullable)
- address: text (nullable)
- created_at: timestamp (default: now())

campus_overseers:
- id: uuid (primary key)
- church_member_id: uuid (foreign key to church_members.id, on delete cascade)
- campus_id: uuid (foreign key to campuses.id, on delete cascade)
- assigned_at: timestamp (default: now())
- unique constraint on (church_member_id, campus_id)
"""
