"""
Shared pytest setup.

config.Settings is instantiated at import time and requires every secret,
so placeholder values are exported before any application module loads.
No test talks to Supabase, Google or FCM.
"""

import os

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.setdefault("CLIENT_EMAIL", "reminders@test-project.iam.gserviceaccount.com")
os.environ.setdefault("FIREBASE_PRIVATE_KEY", "test-private-key")
os.environ.setdefault("PROJECT_ID", "test-project")
os.environ.setdefault("CRON_API_KEY", "test-cron-key")
os.environ.setdefault("ENABLE_SCHEDULER", "false")
