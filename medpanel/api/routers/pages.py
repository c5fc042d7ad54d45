"""
Browser entry point - the upload page.
"""
from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from medpanel.core.dependencies import get_dashboard_service
from medpanel.services.dashboard import DashboardService

router = APIRouter(tags=["Pages"])


@router.get(
    "/",
    response_class=HTMLResponse,
    summary="Upload page",
    description="File picker and drag-and-drop zone. Uploads go to a new session, then "
                "the browser is sent to that session's dashboard.",
)
async def upload_page(dashboard_service: DashboardService = Depends(get_dashboard_service)):
    return HTMLResponse(content=dashboard_service.render_upload_page())
