"""
JSON response helpers.

Models serialise with camelCase names and without null fields, matching
the documents clients already consume.

Dependencies: fastapi, pydantic
System role: Response construction
"""

from typing import Iterable

from fastapi import status
from fastapi.responses import JSONResponse

from api_hub_applications.models.common import CamelModel


def json_response(model: CamelModel, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(content=model.to_json_dict(), status_code=status_code)


def json_list_response(models: Iterable[CamelModel], status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(content=[model.to_json_dict() for model in models], status_code=status_code)
