"""Authentication and authorization.

Learn: Two authentication paths:
1. Browsers → username/password → signed session cookie
2. Integrations → API key in the X-API-Key header, limited to the
   allow-list in policy.py

Both resolve to one AuthContext (dependencies.py) that routes use for
ownership checks.
"""
