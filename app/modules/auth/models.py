# Supabase Auth
# Admin accounts live in Supabase's auth.users table; no custom tables are required.

"""
Supabase Auth provides:
- auth.admin.create_user() - Create admin accounts (service role key)
- auth.sign_in_with_password() - Authenticate admins and issue JWTs
- auth.get_user() - Resolve a JWT to its user

Account shape used by this API:
- user_metadata.name: display name
- app_metadata.role: "admin" (set server-side only, cannot be changed by users)
"""
