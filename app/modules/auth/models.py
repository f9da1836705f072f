# Supabase Auth
# Accounts live in Supabase's auth.users table; this module keeps no tables of its own

"""
Identity vs. membership:

- auth.users.id is the user_id used everywhere else (church_members.user_id,
  join_requests.user_id, invite_codes.created_by, *_schedules.created_by).
- user_metadata.full_name, set at registration, becomes church_members.user_name
  and join_requests.user_name when the user joins a church.
- Roles are never stored on the auth user. A user's role is the role column of
  their single church_members row; see app/config/permissions_config.py.
"""
