from __future__ import annotations

from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from ..search.errors import InvalidCategory, NoResultsFound, QueryRequired
from ..service import SearchService
from ..settings import get_settings


def _get_service(request: Request) -> SearchService:
    service = request.app.state.service
    if service is None:
        service = SearchService(get_settings())
        request.app.state.service = service
    return service


def create_app(service: Optional[SearchService] = None) -> FastAPI:
    app = FastAPI(title="fedsearch")
    app.state.service = service

    @app.on_event("shutdown")
    async def shutdown() -> None:
        svc: Optional[SearchService] = app.state.service
        if svc is not None:
            await svc.aclose()

    @app.get("/search")
    @app.get("/api/search")
    async def search(
        q: Optional[str] = None,
        category: str = "general",
        safe: str = "false",
        service: SearchService = Depends(_get_service),
    ):
        try:
            result = await service.search(q, category or "general", safe.lower() == "true")
        except QueryRequired:
            return JSONResponse({"error": "Query is required"}, status_code=400)
        except InvalidCategory:
            return JSONResponse({"error": "Invalid category"}, status_code=400)
        except NoResultsFound:
            return JSONResponse({"error": "No results found. Please try a different query."}, status_code=404)
        return JSONResponse(result.to_dict())

    @app.get("/api/health")
    async def health(service: SearchService = Depends(_get_service)):
        return JSONResponse(service.health())

    return app


app = create_app()


def run():
    settings = get_settings()
    uvicorn.run("fedsearch.webapp.main:app", host=settings.host, port=settings.port, reload=False)
