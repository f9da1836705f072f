# Supabase tables: ministry_schedules, safety_schedules
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

ministry_schedules:
- id: uuid (primary key)
- ministry_id: uuid (foreign key to ministries.id, on delete cascade)
- volunteer_id: uuid (foreign key to ministry_volunteers.id, on delete cascade)
- scheduled_date: date (not null)
- start_time: time (not null)
- end_time: time (not null, check end_time > start_time)
- service_type: text (default: 'other')
- service_name: text (nullable)
- role_assignment: text (nullable)
- campus_id: uuid (foreign key to campuses.id, nullable)
- status: text (default: 'scheduled') - values: scheduled, completed, cancelled, no_show
- notes: text (nullable)
- created_by: text (not null)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

safety_schedules:
- id: uuid (primary key)
- church_id: uuid (foreign key to churches.id, on delete cascade)
- safety_member_id: uuid (foreign key to safety_team_members.id, on delete cascade)
- scheduled_date: date (not null)
- start_time: time (not null)
- end_time: time (not null, check end_time > start_time)
- event_type: text (default: 'service')
- event_name: text (nullable)
- campus_id: uuid (foreign key to campuses.id, nullable)
- status: text (default: 'scheduled') - values: scheduled, completed, cancelled
- notes: text (nullable)
- created_by: text (not null)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

Overlap backstop for concurrent writers. The service checks for conflicts
before writing; these constraints reject the losing insert/update of a race
with SQLSTATE 23P01, which the service reports as 409 like any other conflict.

create extension if not exists btree_gist;

alter table ministry_schedules add constraint ministry_schedules_no_overlap
    exclude using gist (
        volunteer_id with =,
        tsrange(scheduled_date + start_time, scheduled_date + end_time, '[)') with &&
    ) where (status in ('scheduled', 'completed'));

alter table safety_schedules add constraint safety_schedules_no_overlap
    exclude using gist (
        safety_member_id with =,
        tsrange(scheduled_date + start_time, scheduled_date + end_time, '[)') with &&
    ) where (status in ('scheduled', 'completed'));
"""
