"""
Main URL configuration for the async arena API.
"""

# Django Imports
from django.urls import include, path

# -----------------------------------------------------------------
# API URL Patterns
# Grouping API endpoints here makes versioning (e.g., v2) clean.
# -----------------------------------------------------------------
api_v1_patterns = [
    path("heroes", include("apps.heroes.urls")),
    path("battles", include("apps.battles.urls")),
    path("players", include("apps.players.urls")),
]

# -----------------------------------------------------------------
# Main URL Patterns
# -----------------------------------------------------------------
urlpatterns = [
    # --- API Versioning ---
    path("api/v1/", include(api_v1_patterns)),
]

# --- Global Error Handlers for API ---
# Any unhandled URL or server error returns a consistent JSON response
# instead of an HTML page.
handler404 = "common.views_utils.json_404_handler"
handler500 = "common.views_utils.json_500_handler"
