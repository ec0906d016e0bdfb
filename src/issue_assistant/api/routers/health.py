from fastapi import APIRouter, Request

from issue_assistant.model.dtos import HealthResponseDto

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponseDto)
def health(request: Request):
    registry = getattr(request.app.state, "registry", None)
    return HealthResponseDto(status="ok", tools=len(registry) if registry is not None else 0)
