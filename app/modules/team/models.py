# Supabase table: team_members
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

team_members:
- id: uuid (primary key, default: gen_random_uuid())
- name: text (not null, max 100 chars)
- role: text (not null, max 100 chars)
- work_detail: text (not null)
- image_path: text (nullable) - /uploads/<file> or S3 URL
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

A team member is not owned by any theme; membership lives in theme_members
(see app/modules/themes/models.py). Deleting a team member removes its
theme_members rows and clears themes.theme_head_id where it pointed at it.
"""
