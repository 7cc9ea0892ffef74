from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health")
def health(request: Request) -> dict[str, object]:
    gateway = request.app.state.realtime_gateway
    return {"status": "ok", "connections": gateway.connection_count}
