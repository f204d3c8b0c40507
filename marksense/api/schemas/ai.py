"""
Esquemas Pydantic para los endpoints de IA.

Los nombres JSON siguen el cliente (camelCase); los atributos en snake_case.
Los textos obligatorios se validan en el router para responder 400 con el
mensaje esperado por el cliente.
"""
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class _AIBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ContentBody(_AIBody):
    content: Optional[str] = None


class WritingAssistanceBody(_AIBody):
    content: Optional[str] = None
    cursor_position: Optional[int] = Field(default=None, alias="cursorPosition")
    user_query: Optional[str] = Field(default=None, alias="userQuery")


class MarkdownSuggestionsBody(_AIBody):
    context: Optional[str] = None
    syntax_type: Optional[str] = Field(default=None, alias="syntaxType")


class RephraseBody(_AIBody):
    content: Optional[str] = None
    style: Optional[str] = None


class ChatBody(_AIBody):
    message: Optional[str] = None
    note_content: Optional[str] = Field(default=None, alias="noteContent")


class MarkdownHelpBody(_AIBody):
    request: Optional[str] = None


class SmartSuggestionsBody(_AIBody):
    content: Optional[str] = None
    cursor_position: Optional[int] = Field(default=None, alias="cursorPosition")


# === Response models ===

class TagsOut(BaseModel):
    tags: List[str]


class AssistanceOut(BaseModel):
    assistance: str


class SuggestionsOut(BaseModel):
    suggestions: str


class SummaryOut(BaseModel):
    summary: str


class RephraseOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    rephrased_content: str = Field(serialization_alias="rephrasedContent")


class ChatOut(BaseModel):
    response: str


class AnalysisOut(BaseModel):
    analysis: str


class HelpOut(BaseModel):
    help: str
