# Supabase tables: safety_team_members, incident_reports
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# safety_schedules is documented in app/modules/scheduling/models.py

"""
Expected Supabase table structure:

safety_team_members:
- id: uuid (primary key)
- church_id: uuid (foreign key to churches.id, on delete cascade)
- user_id: text (not null, unique per church)
- team_role: text (default: 'member')
- specialty: text (default: 'general')
- certifications: text (nullable)
- phone: text (nullable)
- availability_notes: text (nullable)
- is_active: boolean (default: true) - inactive members cannot be scheduled
- joined_at: timestamp (default: now())
- updated_at: timestamp (nullable)
"""

"""
incident_reports (owners, overseers and moderators only):
- id: uuid (primary key)
- church_id: uuid (foreign key to churches.id, on delete cascade)
- campus_id: uuid (nullable, foreign key to campuses.id)
- reported_by: text (not null) - auth user id
- incident_type: text (medical | security | accident | fire | weather | other)
- severity: text (low | medium | high | critical)
- title: text (not null)
- description: text (not null)
- location: text (nullable)
- occurred_at: timestamptz (not null)
- people_involved: text (nullable)
- witnesses: text (nullable)
- actions_taken: text (not null)
- follow_up_needed: boolean (default: false)
- follow_up_notes: text (nullable)
- status: text (open | under_review | resolved | closed, default: 'open')
- resolved_at: timestamptz (nullable) - set when the report is first resolved or closed, cleared on reopen
- resolved_by: text (nullable)
- created_at: timestamptz (default: now())
- updated_at: timestamptz (nullable)
"""
