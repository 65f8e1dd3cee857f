"""Drive MCP tools."""
import json
import os
from typing import Optional

from googleapiclient.errors import HttpError

from .main import mcp, require_token
from ..client import DriveFacade
from ..models import PostedFile
from ..utils.constants import DEFAULT_UPLOAD_FIELD
from ..utils.errors import handle_http_error, format_error, WorkspaceFacadeError


def get_drive() -> DriveFacade:
    return DriveFacade(require_token())


@mcp.tool()
def upload_drive_files(
    local_paths: str,
    folder_id: str,
    file_name: str = "",
    permission: str = "reader",
    user_account: Optional[str] = None,
) -> str:
    """
    Upload one or more local files to a Drive folder and share them.
    Args:
        local_paths: JSON array of local file paths.
        folder_id: ID of the destination folder.
        file_name: Optional base name. With several files they become 00_name, 01_name, ...
        permission: Role to grant - 'reader', 'commenter' or 'writer'.
        user_account: Email to share with. Leave empty for anyone with the link.
    """
    try:
        paths = json.loads(local_paths)
        missing = [p for p in paths if not os.path.exists(p)]
        if missing:
            return f"Upload failed: Local file not found: {', '.join(missing)}"

        posted = [PostedFile(DEFAULT_UPLOAD_FIELD, p, os.path.basename(p)) for p in paths]
        links = get_drive().upload_posted_files(
            posted, folder_id, permission, DEFAULT_UPLOAD_FIELD, file_name, user_account or None
        )
        if not links:
            return "No files to upload."
        return "\n".join(f"{link.file_name}: {link.web_link}" for link in links)
    except json.JSONDecodeError:
        return "Upload failed: Invalid JSON array format."
    except HttpError as e:
        return format_error("Upload", handle_http_error(e))
    except WorkspaceFacadeError as e:
        return format_error("Upload", e)
    except Exception as e:
        return f"Upload failed: Unexpected error ({type(e).__name__}: {e})"


@mcp.tool()
def copy_drive_file(
    template_id: str,
    file_name: str,
    folder_id: str,
    user_account: Optional[str] = None,
    permission: str = "reader",
) -> str:
    """
    Copy a file (e.g. a template document) into a folder and share the copy.
    Args:
        template_id: ID of the file to copy. Shortcuts are followed.
        file_name: Name of the copy.
        folder_id: ID of the destination folder.
        user_account: Email to share with. Leave empty for anyone with the link.
        permission: Role to grant.
    """
    try:
        link = get_drive().copy_file(
            template_id, file_name, folder_id, user_account or None, permission=permission
        )
        return f"Copied to {link}"
    except HttpError as e:
        return format_error("Copy file", handle_http_error(e, template_id))
    except WorkspaceFacadeError as e:
        return format_error("Copy file", e)
    except Exception as e:
        return f"Copy file failed: Unexpected error ({type(e).__name__}: {e})"


@mcp.tool()
def delete_drive_file(file_id: str) -> str:
    """
    Delete a file. Files are moved to the trash; files already in the trash are deleted permanently.
    Args:
        file_id: ID of the file. Shortcuts act on their target.
    """
    try:
        return get_drive().delete_file(file_id)
    except HttpError as e:
        return format_error("Delete", handle_http_error(e, file_id))
    except WorkspaceFacadeError as e:
        return format_error("Delete", e)
    except Exception as e:
        return f"Delete failed: Unexpected error ({type(e).__name__}: {e})"


@mcp.tool()
def export_drive_pdf(
    file_id: str,
    folder_id: str,
    user_account: Optional[str] = None,
    permission: str = "reader",
) -> str:
    """
    Export a Google Doc, Sheet or Slides file as PDF into a folder and share it.
    Args:
        file_id: ID of the Google file.
        folder_id: ID of the folder receiving the PDF.
        user_account: Email to share with. Leave empty for anyone with the link.
        permission: Role to grant.
    """
    try:
        link = get_drive().export_pdf(file_id, folder_id, user_account or None, permission)
        return f"PDF created: {link}"
    except HttpError as e:
        return format_error("Export PDF", handle_http_error(e, file_id))
    except WorkspaceFacadeError as e:
        return format_error("Export PDF", e)
    except Exception as e:
        return f"Export PDF failed: Unexpected error ({type(e).__name__}: {e})"


@mcp.tool()
def list_drive_files(
    folder_id: Optional[str] = None,
    query: Optional[str] = None,
    include_folders: bool = False,
) -> str:
    """
    List the files of a folder (or the whole Drive), across all result pages.
    Args:
        folder_id: Optional folder ID.
        query: Optional Drive query clause, e.g. "name contains 'invoice'".
        include_folders: Also list sub-folders.
    """
    try:
        files = get_drive().list_files(folder_id, query, include_folders=include_folders)
        if not files:
            return "No files found."
        output = [f"Found {len(files)} files:"]
        for f in files:
            output.append(f"- {f.get('name')} (ID: {f.get('id')}) {f.get('webViewLink', '')}".rstrip())
        return "\n".join(output)
    except HttpError as e:
        return format_error("List files", handle_http_error(e, folder_id))
    except WorkspaceFacadeError as e:
        return format_error("List files", e)
    except Exception as e:
        return f"List files failed: Unexpected error ({type(e).__name__}: {e})"
