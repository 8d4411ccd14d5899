# parla/api/v1/routers/chat.py
from fastapi import APIRouter, Depends
from parla.api.v1.deps import get_current_user, get_services
from parla.core.bootstrap import ServiceContainer
from parla.core.errors import InvalidInputError
from parla.models.user import User
from parla.schemas.session import ChatRequest, ChatResponse

router = APIRouter(prefix="/chat", tags=["chat"])

@router.post("", response_model=dict)
async def chat(
    body: ChatRequest,
    user: User = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services),
):
    """
    Produce the coach's next reply.

    Greeting turns ignore message/history and ask the coach to open the
    session. Other turns need a message; history is the conversation so far.

    Raises:
        400: Empty message on a non-greeting turn
        502: Text generation failed
    """
    if not body.isGreeting and not body.message.strip():
        raise InvalidInputError("No message provided")
    history = [{"role": h.role, "content": h.content} for h in body.history]
    reply = await services.coach.reply(user, body.message, history, is_greeting=body.isGreeting)
    return {"success": True, "data": ChatResponse(response=reply).model_dump()}
