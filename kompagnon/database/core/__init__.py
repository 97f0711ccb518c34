"""
Core operations connecting the routers with the database.

Contents
--------
- funcs: register_user, authenticate_user, activate_user, create_user,
  request_password_reset, reset_password
- schema: create_schema, drop_schema
- seeds: sample data loader (`python -m kompagnon.database.core.seeds`)
"""
