from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from minigit.repository import display_name
from minigit.server._context import Context

router = APIRouter(include_in_schema=False)
templates = Jinja2Templates(Path(__file__).parent / "_templates")


@router.get("/", response_class=HTMLResponse)
def get_index(request: Request, context: Context) -> HTMLResponse:
    repositories = [
        {
            "name": name,
            "display_name": display_name(name),
            "clone_url": context.clone_url(request, name),
        }
        for name in context.storage.list_repositories()
    ]
    return templates.TemplateResponse(
        request=request,
        name="index.html",
        context={"repositories": repositories},
    )
