"""File management mixin for DriveFacade."""
import io
import logging
from typing import Any, Iterable, Optional

from googleapiclient.errors import HttpError
from googleapiclient.http import MediaFileUpload, MediaIoBaseUpload

from ..models import PostedFile, UploadedLink
from ..utils.constants import (
    DEFAULT_LIST_FIELDS,
    DEFAULT_PAGE_SIZE,
    DEFAULT_UPLOAD_FIELD,
    DESTINATION_FIELDS,
    FOLDER_MIME_TYPE,
    GOOGLE_DOC_MIME_TYPE,
    PDF_MIME_TYPE,
    ROLE_READER,
    SHORTCUT_MIME_TYPE,
    SOURCE_FIELDS,
    TRASH_STATE_FIELDS,
)
from ..utils.errors import (
    InvalidDestinationError,
    NotCopyableError,
    ShortcutTargetMissingError,
    TrashedSourceError,
)
from .sharing import build_permission

logger = logging.getLogger(__name__)


class FilesMixin:
    """Mixin providing file management operations."""

    def get_file_metadata(
        self,
        file_id: str,
        fields: str = 'id, name, mimeType, size, createdTime, modifiedTime, parents, trashed, webViewLink',
    ) -> dict[str, Any]:
        """Get metadata about a file.

        Args:
            file_id: The file ID.
            fields: Field projection.

        Returns:
            Dictionary with file metadata.
        """
        return self._service().files().get(
            fileId=file_id, fields=fields, supportsAllDrives=True
        ).execute()

    def upload_posted_files(
        self,
        files: Iterable[PostedFile],
        folder_id: str,
        permission: str = ROLE_READER,
        field_name: str = DEFAULT_UPLOAD_FIELD,
        file_name: str = '',
        user_account: Optional[str] = None,
    ) -> Optional[list[UploadedLink]]:
        """Upload the files posted under one form field.

        Each file is uploaded on its own; a failure on one file leaves the
        files uploaded before it in place.

        Args:
            files: Files received from the form.
            folder_id: Destination folder ID.
            permission: Role granted on every uploaded file.
            field_name: Form field whose files are uploaded.
            file_name: Base name for the uploads. With several files each one
                is prefixed with its two-digit position ("00_invoice.pdf").
                Empty keeps the original filenames.
            user_account: Account to share with; anyone with the link if None.

        Returns:
            One UploadedLink per uploaded file, or None if nothing was posted.
        """
        selected = [f for f in files if f.field_name == field_name]
        numbered = bool(file_name) and sum(1 for f in selected if f.tmp_path) > 1

        links: list[UploadedLink] = []
        for index, posted in enumerate(selected):
            if not posted.tmp_path:
                continue
            if not file_name:
                name = posted.original_name
            elif numbered:
                name = f"{index:02d}_{file_name}"
            else:
                name = file_name

            web_link = self.upload_file(
                name, folder_id, posted.tmp_path, posted.resolved_mime_type,
                permission, user_account,
            )
            links.append(UploadedLink(name, web_link))

        return links or None

    def upload_file(
        self,
        file_name: str,
        folder_id: str,
        local_path: str,
        mime_type: str,
        permission: str = ROLE_READER,
        user_account: Optional[str] = None,
    ) -> str:
        """Upload a local file to a Drive folder and share it.

        Returns:
            The webViewLink of the new file.
        """
        build_permission(permission, user_account)
        service = self._service()

        file_metadata = {'name': file_name, 'parents': [folder_id], 'mimeType': mime_type}
        media = MediaFileUpload(local_path, mimetype=mime_type, resumable=True)

        file = service.files().create(
            body=file_metadata,
            media_body=media,
            fields='id',
            supportsAllDrives=True,
        ).execute()
        logger.info("Uploaded %s to folder %s as %s", file_name, folder_id, file['id'])

        self._grant_permission(service, file['id'], permission, user_account)
        return self._web_view_link(service, file['id'])

    def copy_file(
        self,
        template_id: str,
        file_name: str,
        folder_id: str,
        user_account: Optional[str] = None,
        mime_type: str = GOOGLE_DOC_MIME_TYPE,
        permission: str = ROLE_READER,
    ) -> str:
        """Copy a file into a folder and share the copy.

        Source and destination are checked before anything is created:
        shortcuts are resolved, the source must not be trashed and must be
        copyable, the destination must be an existing folder outside the
        trash that accepts new children.

        Returns:
            The webViewLink of the copy.
        """
        build_permission(permission, user_account)
        service = self._service()

        source = service.files().get(
            fileId=template_id, fields=SOURCE_FIELDS, supportsAllDrives=True
        ).execute()
        source = self._resolve_shortcut(service, source, SOURCE_FIELDS)

        if source.get('trashed'):
            raise TrashedSourceError(source['id'])
        if not source.get('capabilities', {}).get('canCopy'):
            raise NotCopyableError(source['id'])

        folder = self._validate_destination(service, folder_id)

        body = {'name': file_name, 'parents': [folder['id']], 'mimeType': mime_type}
        copy = service.files().copy(
            fileId=source['id'],
            body=body,
            fields='id',
            supportsAllDrives=True,
        ).execute()
        logger.info("Copied %s to %s in folder %s", source['id'], copy['id'], folder['id'])

        self._grant_permission(service, copy['id'], permission, user_account)
        return self._web_view_link(service, copy['id'])

    def delete_file(self, file_id: str) -> str:
        """Delete a file.

        A file that is already in the trash is deleted permanently; any
        other file is moved to the trash. Shortcuts act on their target.

        Returns:
            Success message.
        """
        service = self._service()
        file = service.files().get(
            fileId=file_id, fields=TRASH_STATE_FIELDS, supportsAllDrives=True
        ).execute()
        file = self._resolve_shortcut(service, file, TRASH_STATE_FIELDS)

        if file.get('trashed'):
            service.files().delete(fileId=file['id'], supportsAllDrives=True).execute()
            logger.info("Permanently deleted %s", file['id'])
            return "Permanently deleted"

        service.files().update(
            fileId=file['id'],
            body={'trashed': True},
            supportsAllDrives=True,
        ).execute()
        logger.info("Moved %s to trash", file['id'])
        return "Moved to trash (recoverable via Drive UI)"

    def export_pdf(
        self,
        file_id: str,
        folder_id: str,
        user_account: Optional[str] = None,
        permission: str = ROLE_READER,
        file_name: Optional[str] = None,
    ) -> str:
        """Export a Google document as PDF into a folder and share it.

        Args:
            file_id: The Google Docs/Sheets/Slides file to export.
            folder_id: Folder receiving the PDF.
            user_account: Account to share with; anyone with the link if None.
            permission: Role granted on the PDF.
            file_name: Name of the PDF; defaults to the source's name.

        Returns:
            The webViewLink of the PDF.
        """
        build_permission(permission, user_account)
        service = self._service()

        if not file_name:
            source = service.files().get(
                fileId=file_id, fields='name', supportsAllDrives=True
            ).execute()
            file_name = source['name']

        content = service.files().export(fileId=file_id, mimeType=PDF_MIME_TYPE).execute()
        media = MediaIoBaseUpload(io.BytesIO(content), mimetype=PDF_MIME_TYPE, resumable=True)

        file = service.files().create(
            body={'name': file_name, 'parents': [folder_id], 'mimeType': PDF_MIME_TYPE},
            media_body=media,
            fields='id',
            supportsAllDrives=True,
        ).execute()
        logger.info("Exported %s as PDF %s", file_id, file['id'])

        self._grant_permission(service, file['id'], permission, user_account)
        return self._web_view_link(service, file['id'])

    def list_files(
        self,
        folder_id: Optional[str] = None,
        query: Optional[str] = None,
        fields: str = DEFAULT_LIST_FIELDS,
        include_folders: bool = False,
        include_shortcuts: bool = False,
        include_trashed: bool = False,
        page_size: int = DEFAULT_PAGE_SIZE,
        order_by: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        """List files, following pagination until the last page.

        Args:
            folder_id: Only list children of this folder.
            query: Extra Drive query clause, ANDed with the others.
            fields: Per-file field projection.
            include_folders: Keep folder entries.
            include_shortcuts: Keep shortcut entries.
            include_trashed: Also list trashed files.
            page_size: Files per page.
            order_by: Drive sort expression, e.g. 'name'.

        Returns:
            List of file metadata dictionaries.
        """
        query_parts = []
        if folder_id:
            query_parts.append(f"'{folder_id}' in parents")
        if query:
            query_parts.append(f"({query})")
        if not include_trashed:
            query_parts.append("trashed = false")

        if 'mimeType' not in fields:
            fields = f"{fields}, mimeType"

        params: dict[str, Any] = {
            'pageSize': page_size,
            'fields': f"nextPageToken, files({fields})",
            'supportsAllDrives': True,
            'includeItemsFromAllDrives': True,
        }
        if query_parts:
            params['q'] = ' and '.join(query_parts)
        if order_by:
            params['orderBy'] = order_by

        service = self._service()
        all_files = []
        page_token = None

        while True:
            results = service.files().list(pageToken=page_token, **params).execute()
            all_files.extend(results.get('files', []))
            page_token = results.get('nextPageToken')
            if not page_token:
                break

        excluded = set()
        if not include_folders:
            excluded.add(FOLDER_MIME_TYPE)
        if not include_shortcuts:
            excluded.add(SHORTCUT_MIME_TYPE)
        return [f for f in all_files if f.get('mimeType') not in excluded]

    def _resolve_shortcut(self, service: Any, file: dict[str, Any], fields: str) -> dict[str, Any]:
        """Return the target's metadata if the file is a shortcut, else the file."""
        if file.get('mimeType') != SHORTCUT_MIME_TYPE:
            return file
        target_id = file.get('shortcutDetails', {}).get('targetId')
        if not target_id:
            raise ShortcutTargetMissingError(file.get('id', ''))
        logger.debug("Resolved shortcut %s to %s", file.get('id'), target_id)
        return service.files().get(
            fileId=target_id, fields=fields, supportsAllDrives=True
        ).execute()

    def _validate_destination(self, service: Any, folder_id: str) -> dict[str, Any]:
        try:
            folder = service.files().get(
                fileId=folder_id, fields=DESTINATION_FIELDS, supportsAllDrives=True
            ).execute()
        except HttpError as e:
            if e.resp.status == 404:
                raise InvalidDestinationError("Destination folder not found", folder_id) from e
            raise
        folder = self._resolve_shortcut(service, folder, DESTINATION_FIELDS)

        if folder.get('mimeType') != FOLDER_MIME_TYPE:
            raise InvalidDestinationError("Destination is not a folder", folder_id)
        if folder.get('trashed'):
            raise InvalidDestinationError("Destination folder is in the trash", folder_id)
        if not folder.get('capabilities', {}).get('canAddChildren'):
            raise InvalidDestinationError("Cannot add files to the destination folder", folder_id)
        return folder
