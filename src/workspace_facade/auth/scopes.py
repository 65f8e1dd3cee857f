"""
Google OAuth Scopes for the Workspace facade.

This module defines the OAuth scopes used by the Drive, Calendar and
Apps Script facades and by the sign-in (OAuth2 service) flow.
"""

from typing import List

# Sign-in scopes used by create_oauth2_service
EMAIL_SCOPE = "email"
PROFILE_SCOPE = "profile"
OPENID_SCOPE = "openid"

SIGN_IN_SCOPES = [EMAIL_SCOPE, PROFILE_SCOPE, OPENID_SCOPE]

# Google Drive scopes
DRIVE_SCOPE = "https://www.googleapis.com/auth/drive"

# Google Calendar scopes
CALENDAR_SCOPE = "https://www.googleapis.com/auth/calendar"

# Apps Script scopes
SCRIPT_PROJECTS_SCOPE = "https://www.googleapis.com/auth/script.projects"

# Spreadsheets are what most executed scripts touch
SPREADSHEETS_SCOPE = "https://www.googleapis.com/auth/spreadsheets"

DEFAULT_SCOPES = [DRIVE_SCOPE]


def get_scopes(*groups: List[str]) -> List[str]:
    """
    Merge scope groups, keeping first-seen order and dropping duplicates.

    Returns:
        DEFAULT_SCOPES when no group is given.
    """
    if not groups:
        return list(DEFAULT_SCOPES)
    merged: List[str] = []
    for group in groups:
        for scope in group:
            if scope not in merged:
                merged.append(scope)
    return merged
