# newsboard/api/endpoints.py
from typing import Dict

from fastapi import APIRouter, Request

router = APIRouter(prefix="/api", tags=["meta"])


@router.get("", summary="Describe every available endpoint")
async def api_endpoints(request: Request) -> Dict[str, str]:
    # read the generated OpenAPI document; app.routes may hold unexpanded routers
    paths = request.app.openapi().get("paths", {})
    endpoints: Dict[str, str] = {}
    for path, operations in paths.items():
        if not path.startswith("/api"):
            continue
        for method, operation in sorted(operations.items()):
            endpoints[f"{method.upper()} {path}"] = operation.get("summary") or ""
    return endpoints
