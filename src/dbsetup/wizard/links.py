import re

DASHBOARD_URL = "https://supabase.com/dashboard/project"
_PROJECT_REF = re.compile(r"https://([^.]+)\.supabase\.co")

def project_id_from_url(endpoint: str) -> str:
    """Project ref from https://<ref>.supabase.co, "_" (dashboard wildcard) otherwise."""
    match = _PROJECT_REF.match(endpoint.strip()) if endpoint else None
    return match.group(1) if match else "_"

def sql_editor_url(endpoint: str) -> str:
    return f"{DASHBOARD_URL}/{project_id_from_url(endpoint)}/sql/new"

def api_settings_url(endpoint: str) -> str:
    return f"{DASHBOARD_URL}/{project_id_from_url(endpoint)}/settings/api"
