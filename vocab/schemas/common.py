from pydantic import BaseModel, ConfigDict


class ErrorDetail(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "field": "limit",
                "message": "Input should be a valid integer",
            }
        }
    )

    field: str
    message: str


class ErrorCode(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "code": "SERVICE_UNAVAILABLE",
                "message": "A backing datastore is unavailable",
                "details": None,
            }
        }
    )

    code: str
    message: str
    details: list[ErrorDetail] | None = None


class ErrorResponse(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": {
                    "code": "SERVICE_UNAVAILABLE",
                    "message": "A backing datastore is unavailable",
                    "details": None,
                }
            }
        }
    )

    error: ErrorCode
