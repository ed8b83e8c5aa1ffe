"""
Router: GET /functions
Lista funkcji dostępnych w wyrażeniach (z FunctionRegistry).
"""
from fastapi import APIRouter, Depends

from api.dependencies import get_function_registry
from api.schemas import FunctionsResponse

router = APIRouter(prefix="/functions", tags=["functions"])


@router.get("", response_model=FunctionsResponse)
async def list_functions(registry=Depends(get_function_registry)) -> FunctionsResponse:
    return FunctionsResponse(names=registry.names())
