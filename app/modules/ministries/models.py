# Supabase tables: ministries, ministry_volunteers
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# ministry_schedules is documented in app/modules/scheduling/models.py

"""
Expected Supabase table structure:

ministries:
- id: uuid (primary key)
- church_id: uuid (foreign key to churches.id, on delete cascade)
- campus_id: uuid (foreign key to campuses.id, nullable)
- name: text (not null, unique per church)
- category: text (not null)
- description: text (nullable)
- leader_user_id: text (nullable)
- contact_email: text (nullable)
- contact_phone: text (nullable)
- meeting_info: text (nullable)
- is_active: boolean (default: true)
- created_by: text (not null)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

ministry_volunteers:
- id: uuid (primary key)
- ministry_id: uuid (foreign key to ministries.id, on delete cascade)
- user_id: text (not null, unique per ministry)
- role_id: uuid (nullable)
- availability_notes: text (nullable)
- background_check_date: date (nullable)
- training_completed: boolean (default: false)
- is_active: boolean (default: true) - inactive volunteers cannot be scheduled
- joined_at: timestamp (default: now())
- updated_at: timestamp (nullable)
"""
