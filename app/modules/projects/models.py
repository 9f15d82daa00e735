# Supabase table: projects
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

projects:
- id: uuid (primary key, default: gen_random_uuid())
- name: text (not null, max 200 chars)
- description: text (not null)
- status: text (not null, default: 'ongoing') - values: ongoing, completed
- image_path: text (nullable) - /uploads/<file> or S3 URL
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

Deleting a project deletes, in order: theme_members rows of its themes,
its themes, then the project row (see ProjectService.delete_project).
"""
