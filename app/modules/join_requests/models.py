# Supabase tables: join_requests, join_request_denials
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

join_requests:
- id: uuid (primary key)
- church_id: uuid (foreign key to churches.id, on delete cascade)
- campus_id: uuid (foreign key to campuses.id, nullable) - campus the requester wants to join
- user_id: text (not null)
- user_name: text (nullable)
- user_email: text (nullable)
- personal_note: text (nullable)
- status: text (not null, default: 'pending') - values: pending, approved, denied
- reviewed_by: text (nullable)
- reviewed_at: timestamp (nullable)
- review_note: text (nullable)
- created_at: timestamp (default: now())

join_request_denials:
- id: uuid (primary key)
- church_id: uuid (foreign key to churches.id, on delete cascade)
- user_id: text (not null)
- join_request_id: uuid (foreign key to join_requests.id, nullable)
- denied_at: timestamp (default: now())

Anti-spam: JOIN_REQUEST_DENIAL_LIMIT denials within JOIN_REQUEST_DENIAL_WINDOW_DAYS
block new requests to that church; JOIN_REQUEST_WEEKLY_LIMIT caps requests per user per week.
"""
