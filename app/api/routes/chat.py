from fastapi import APIRouter, Depends, HTTPException

from app.adapters.llm.factory import active_model_name, get_llm_client
from app.core.auth import verify_api_key
from app.core.config import settings
from app.core.errors import ValidationAppError
from app.schemas.chat import (
    ChatRequest,
    ChatResponse,
    EvidenceRequest,
    EvidenceSource,
    IntentClassificationResult,
    IntentRequest,
)
from app.services.chat_service import ChatService
from app.services.response_composer import ResponseComposer

router = APIRouter(tags=["Chat"], dependencies=[Depends(verify_api_key)])


def get_chat_service() -> ChatService:
    """Build the chat service; the LLM client itself is created lazily on first answer."""
    composer = ResponseComposer(
        client_provider=get_llm_client,
        chat_settings=settings.chat,
        model_name=active_model_name(settings.llm),
        job_preview_chars=settings.app.job_description_preview_chars,
        provider="azure" if settings.llm.uses_azure else "openai",
    )
    return ChatService(composer=composer, app_settings=settings.app)


@router.post("/chat", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    service: ChatService = Depends(get_chat_service),
) -> ChatResponse:
    """Answer a recruiter question about a candidate.

    Classifies the question, pulls supporting sentences from the resume and
    asks the model for a grounded answer. Generation failures come back as a
    readable answer, not as an HTTP error.

    Raises:
        HTTPException: 400 if the query is blank or too long.
    """
    try:
        return await service.answer(request.query, request.context)
    except ValidationAppError as exc:
        raise HTTPException(status_code=400, detail=exc.message)


@router.post("/chat/intent", response_model=IntentClassificationResult)
async def classify(
    request: IntentRequest,
    service: ChatService = Depends(get_chat_service),
) -> IntentClassificationResult:
    """Classify a question without generating an answer.

    Raises:
        HTTPException: 400 if the query is blank or too long.
    """
    try:
        query = service.validate_query(request.query)
    except ValidationAppError as exc:
        raise HTTPException(status_code=400, detail=exc.message)
    return await service.classify_intent(query)


@router.post("/chat/evidence", response_model=list[EvidenceSource])
async def evidence(
    request: EvidenceRequest,
    service: ChatService = Depends(get_chat_service),
) -> list[EvidenceSource]:
    """Return the top-ranked resume sentences for a question.

    Raises:
        HTTPException: 400 if the query is blank or too long.
    """
    try:
        query = service.validate_query(request.query)
    except ValidationAppError as exc:
        raise HTTPException(status_code=400, detail=exc.message)
    return await service.search_resume(request.resume_text, query)
