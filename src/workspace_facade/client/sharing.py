"""Sharing and permissions mixin for DriveFacade."""
import logging
from typing import Any, Optional

from ..utils.constants import PERM_TYPE_ANYONE, PERM_TYPE_USER, ROLE_READER, VALID_ROLES
from ..utils.errors import InvalidRoleError

logger = logging.getLogger(__name__)


def build_permission(role: str = ROLE_READER, user_account: Optional[str] = None) -> dict[str, str]:
    """Permission body: anyone with the link, or one named account.

    Raises:
        InvalidRoleError: If the role is not a Drive permission role.
    """
    if role not in VALID_ROLES:
        raise InvalidRoleError(role, VALID_ROLES)
    if user_account is None:
        return {'type': PERM_TYPE_ANYONE, 'role': role}
    return {'type': PERM_TYPE_USER, 'role': role, 'emailAddress': user_account}


class SharingMixin:
    """Mixin providing sharing and permission operations."""

    def grant_permission(
        self, file_id: str, role: str = ROLE_READER, user_account: Optional[str] = None
    ) -> str:
        """Grant access to a file.

        Args:
            file_id: The file ID.
            role: 'reader', 'commenter', 'writer', ...
            user_account: Email of the account to share with. Without it the
                file is shared with anyone who has the link.

        Returns:
            The ID of the created permission.
        """
        return self._grant_permission(self._service(), file_id, role, user_account)

    def get_web_view_link(self, file_id: str) -> str:
        """Return the browser link of a file."""
        return self._web_view_link(self._service(), file_id)

    def _grant_permission(
        self, service: Any, file_id: str, role: str, user_account: Optional[str]
    ) -> str:
        permission = build_permission(role, user_account)
        result = service.permissions().create(
            fileId=file_id,
            body=permission,
            fields='id',
            supportsAllDrives=True,
        ).execute()
        logger.info("Granted %s access to %s on %s", role, user_account or 'anyone', file_id)
        return result.get('id', '')

    def _web_view_link(self, service: Any, file_id: str) -> str:
        file_meta = service.files().get(
            fileId=file_id,
            fields='webViewLink',
            supportsAllDrives=True,
        ).execute()
        return file_meta.get('webViewLink', '')
