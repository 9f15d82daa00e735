# Supabase tables: themes, theme_members
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

themes:
- id: uuid (primary key, default: gen_random_uuid())
- name: text (not null, max 200 chars)
- description: text (not null)
- project_id: uuid (foreign key to projects.id, nullable)
- theme_head_id: uuid (foreign key to team_members.id, nullable)
- created_by: uuid (foreign key to auth.users.id, not null) - creating admin
- image_path: text (nullable)
- primary_color: text (nullable, hex)
- secondary_color: text (nullable, hex)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

theme_members:
- id: uuid (primary key)
- theme_id: uuid (foreign key to themes.id, not null)
- team_member_id: uuid (foreign key to team_members.id, not null)
- created_at: timestamp (default: now())
- unique constraint on (theme_id, team_member_id)

Rules enforced in service.py:
- theme_head_id, when set, has a matching theme_members row
- deleting a theme deletes its theme_members rows first
- removing a member clears theme_head_id when it pointed at that member
- assigning a head re-checks membership after the update and clears the head
  again if the member was removed in between

Optional hardening in the database: a composite foreign key
(id, theme_head_id) -> theme_members(theme_id, team_member_id), with
ON DELETE SET NULL (theme_head_id) (PostgreSQL 15+), rejects a non-member head outright.
"""
