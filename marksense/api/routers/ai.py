"""
Endpoints de IA (requieren Bearer token).

Los fallos del modelo ya vienen absorbidos por AIService; aquí sólo se
valida que llegue el texto obligatorio.
"""
from typing import Optional

from fastapi import APIRouter, Depends

from marksense.api.deps import get_ai_service, get_current_user
from marksense.api.schemas.ai import (
    AnalysisOut,
    AssistanceOut,
    ChatBody,
    ChatOut,
    ContentBody,
    HelpOut,
    MarkdownHelpBody,
    MarkdownSuggestionsBody,
    RephraseBody,
    RephraseOut,
    SmartSuggestionsBody,
    SuggestionsOut,
    SummaryOut,
    TagsOut,
    WritingAssistanceBody,
)
from marksense.core.exceptions import ValidationError
from marksense.services.ai_service import SYNTAX_TYPES, AIService

router = APIRouter(prefix="/ai", tags=["AI"], dependencies=[Depends(get_current_user)])


def _require(value: Optional[str], message: str) -> str:
    if not value:
        raise ValidationError(message)
    return value


@router.post("/generate-tags", response_model=TagsOut, summary="Generar tags")
async def generate_tags(payload: ContentBody, ai: AIService = Depends(get_ai_service)) -> TagsOut:
    content = _require(payload.content, "Content is required")
    return TagsOut(tags=await ai.generate_tags(content))


@router.post("/writing-assistance", response_model=AssistanceOut, summary="Asistencia de escritura")
async def writing_assistance(payload: WritingAssistanceBody, ai: AIService = Depends(get_ai_service)) -> AssistanceOut:
    content = _require(payload.content, "Content is required")
    text = await ai.writing_assistance(content, payload.cursor_position or 0, payload.user_query)
    return AssistanceOut(assistance=text)


@router.post("/markdown-suggestions", response_model=SuggestionsOut, summary="Sugerencias de sintaxis markdown")
async def markdown_suggestions(payload: MarkdownSuggestionsBody, ai: AIService = Depends(get_ai_service)) -> SuggestionsOut:
    if not payload.context or not payload.syntax_type:
        raise ValidationError("Context and syntax type are required")
    if payload.syntax_type not in SYNTAX_TYPES:
        raise ValidationError(f"syntaxType must be one of: {', '.join(SYNTAX_TYPES)}")
    return SuggestionsOut(suggestions=await ai.markdown_suggestions(payload.context, payload.syntax_type))


@router.post("/summarize", response_model=SummaryOut, summary="Resumir contenido")
async def summarize(payload: ContentBody, ai: AIService = Depends(get_ai_service)) -> SummaryOut:
    content = _require(payload.content, "Content is required")
    return SummaryOut(summary=await ai.summarize(content))


@router.post("/rephrase", response_model=RephraseOut, summary="Reescribir contenido")
async def rephrase(payload: RephraseBody, ai: AIService = Depends(get_ai_service)) -> RephraseOut:
    content = _require(payload.content, "Content is required")
    return RephraseOut(rephrased_content=await ai.rephrase(content, payload.style))


@router.post("/chat", response_model=ChatOut, summary="Chat con el asistente")
async def chat(payload: ChatBody, ai: AIService = Depends(get_ai_service)) -> ChatOut:
    message = _require(payload.message, "Message is required")
    return ChatOut(response=await ai.chat_assistant(message, payload.note_content))


@router.post("/analyze", response_model=AnalysisOut, summary="Analizar contenido")
async def analyze(payload: ContentBody, ai: AIService = Depends(get_ai_service)) -> AnalysisOut:
    content = _require(payload.content, "Content is required")
    return AnalysisOut(analysis=await ai.analyze_content(content))


@router.post("/markdown-help", response_model=HelpOut, summary="Ayuda markdown ligera")
async def markdown_help(payload: MarkdownHelpBody, ai: AIService = Depends(get_ai_service)) -> HelpOut:
    request_text = _require(payload.request, "Request is required")
    return HelpOut(help=await ai.markdown_help(request_text))


@router.post("/smart-suggestions", response_model=SuggestionsOut, summary="Sugerencias según el cursor")
async def smart_suggestions(payload: SmartSuggestionsBody, ai: AIService = Depends(get_ai_service)) -> SuggestionsOut:
    content = _require(payload.content, "Content is required")
    return SuggestionsOut(suggestions=await ai.smart_suggestions(content, payload.cursor_position or 0))
