"""
User Group Routes
=================

HTTP endpoints for the user-group export/import workflow:

- ``GET /api/user-groups``: every group the user owns (friends, followers, lists)
- ``GET /api/user-groups/export?path=...``: a group's members as an editable
  JSON snapshot
- ``POST /api/user-groups/import``: converge a list on an edited snapshot

Paths default to the signed-in user as owner, so ``my-list`` and
``@me/my-list`` address the same list.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from auth.middleware import get_user_service
from twitter_client import RemoteAPIError
from user_groups import PATH_PATTERN, TwitterUserService, UserGroupError, parse, unparse

from .errors import http_error_for

# Set up logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/user-groups", tags=["user-groups"])

class ImportRequest(BaseModel):
    """Request model for importing a membership snapshot."""
    path: str
    source: str

@router.get("")
async def list_user_groups(service: TwitterUserService = Depends(get_user_service)):
    """List the groups owned by the signed-in user."""
    try:
        user_groups = await service.all_user_groups()
    except (UserGroupError, RemoteAPIError) as e:
        raise http_error_for(e, "list user groups")
    except Exception as e:
        logger.error(f"Error listing user groups: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")

    return {
        "userGroups": [
            {
                "path": user_group.path,
                "slug": user_group.group_key.slug,
                "type": user_group.group_key.type.value
            }
            for user_group in user_groups
        ]
    }

@router.get("/export")
async def export_user_group(
    path: str = Query(..., description="Group path, e.g. @john/my-list or _friends"),
    service: TwitterUserService = Depends(get_user_service)
):
    """Export a group's members as a JSON snapshot."""
    try:
        group_path = unparse(parse(path, service.screen_name))
        source = await service.export_user_group(path)
    except (UserGroupError, RemoteAPIError) as e:
        raise http_error_for(e, "export user group")
    except Exception as e:
        logger.error(f"Error exporting user group {path}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")

    return {
        "path": group_path,
        "pattern": PATH_PATTERN,
        "source": source
    }

@router.post("/import")
async def import_user_group(
    import_request: ImportRequest,
    service: TwitterUserService = Depends(get_user_service)
):
    """Apply an edited snapshot to a list."""
    try:
        diff = await service.import_user_group(import_request.path, import_request.source)
    except (UserGroupError, RemoteAPIError) as e:
        raise http_error_for(e, "import user group")
    except Exception as e:
        logger.error(f"Error importing user group {import_request.path}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")

    return {
        "status": "success",
        "added": len(diff.added),
        "removed": len(diff.removed)
    }
