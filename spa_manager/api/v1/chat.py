from fastapi import APIRouter, Depends

from spa_manager.api.v1.schemas import (
    ChatMessageRequestSchema,
    ChatReplySchema,
    CommandIntentSchema,
    InterpretRequestSchema,
)
from spa_manager.application.use_cases.handle_chat_message import HandleChatMessageUseCase
from spa_manager.application.use_cases.interpret_command import InterpretCommandUseCase
from spa_manager.domain.entities.intent import intent_to_wire
from spa_manager.wiring.dependencies import (
    get_handle_chat_message_use_case,
    get_interpret_command_use_case,
)

router = APIRouter(prefix="/api/chat")


@router.post("/interpret", response_model=CommandIntentSchema, response_model_exclude_none=True)
def interpret(
    req: InterpretRequestSchema,
    uc: InterpretCommandUseCase = Depends(get_interpret_command_use_case),
):
    intent = uc.execute(req.text, year_hint=req.year_hint)
    return CommandIntentSchema.model_validate(intent_to_wire(intent))


@router.post("/messages", response_model=ChatReplySchema)
def message(
    req: ChatMessageRequestSchema,
    uc: HandleChatMessageUseCase = Depends(get_handle_chat_message_use_case),
):
    reply = uc.handle(req.text, session_id=req.session_id, year_hint=req.year_hint)
    return ChatReplySchema(
        session_id=reply.session_id,
        action=reply.action,
        text=reply.text,
        intent=CommandIntentSchema.model_validate(reply.intent),
        meta=reply.meta,
    )
