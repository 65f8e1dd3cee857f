"""Centralized constants for the Workspace facade."""

# MIME Types - Google Apps
GOOGLE_MIME_TYPES = {
    'doc': 'application/vnd.google-apps.document',
    'sheet': 'application/vnd.google-apps.spreadsheet',
    'folder': 'application/vnd.google-apps.folder',
    'shortcut': 'application/vnd.google-apps.shortcut',
    'presentation': 'application/vnd.google-apps.presentation',
    'pdf': 'application/pdf',
}

FOLDER_MIME_TYPE = GOOGLE_MIME_TYPES['folder']
SHORTCUT_MIME_TYPE = GOOGLE_MIME_TYPES['shortcut']
GOOGLE_DOC_MIME_TYPE = GOOGLE_MIME_TYPES['doc']
PDF_MIME_TYPE = GOOGLE_MIME_TYPES['pdf']
DEFAULT_UPLOAD_MIME_TYPE = 'application/octet-stream'

# Field projections
SOURCE_FIELDS = 'id, name, mimeType, trashed, capabilities(canCopy), shortcutDetails(targetId, targetMimeType)'
DESTINATION_FIELDS = 'id, name, mimeType, trashed, capabilities(canAddChildren), shortcutDetails(targetId, targetMimeType)'
TRASH_STATE_FIELDS = 'id, name, mimeType, trashed, shortcutDetails(targetId)'
DEFAULT_LIST_FIELDS = 'id, name, mimeType, webViewLink, modifiedTime, parents'

# Default Values
DEFAULT_PAGE_SIZE = 100
DEFAULT_UPLOAD_FIELD = 'upload'
DEFAULT_TIME_ZONE = 'Europe/Brussels'
EVENT_DATETIME_FORMAT = '%Y-%m-%dT%H:%M:%S'

# Access Roles
ROLE_READER = 'reader'
ROLE_COMMENTER = 'commenter'
ROLE_WRITER = 'writer'
VALID_ROLES = (ROLE_READER, ROLE_COMMENTER, ROLE_WRITER, 'fileOrganizer', 'organizer', 'owner')

# Permission Types
PERM_TYPE_USER = 'user'
PERM_TYPE_ANYONE = 'anyone'
