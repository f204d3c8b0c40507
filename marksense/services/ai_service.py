"""Orquestador de IA: intención → plantilla de prompt → modelo externo.

Cada operación arma un prompt determinista (system fijo + plantilla de usuario)
y lo envía con temperatura y tope de tokens propios. Ningún fallo del modelo
llega al llamador: se registra y se devuelve un valor por defecto.
"""
import logging
from typing import Any, List, Optional

from marksense.api.schemas.note import MAX_TAGS

SYNTAX_TYPES = ("table", "link", "code_block", "list", "heading", "blockquote")

# Orden de prioridad: gana la primera coincidencia ("table" antes que "link", etc.)
HELP_KEYWORDS = (
    (("table",), "table"),
    (("link",), "link"),
    (("code",), "code_block"),
    (("list",), "list"),
    (("header", "heading"), "heading"),
    (("quote",), "blockquote"),
)

MARKDOWN_CHEATSHEET = (
    "Here are some common markdown patterns:\n\n"
    "**Bold**: `**text**`\n"
    "*Italic*: `*text*`\n"
    "[Link](url): `[text](url)`\n"
    "# Header: `# text`\n"
    "- List: `- item`"
)

_log = logging.getLogger("marksense.ai")


def _first_content(resp: Any) -> str:
    """Extrae `choices[0].message.content`; "" si el contenido viene vacío.

    Sin `choices` la respuesta está mal formada y se lanza ValueError.
    """
    choices = getattr(resp, "choices", None)
    if not choices:
        raise ValueError("respuesta sin choices")
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    if content is None:
        return ""
    return str(content).strip()


def parse_tags(text: Optional[str]) -> List[str]:
    """'Go, Rust ,, systems' → ['go', 'rust', 'systems'] (sin duplicados, máx. 10)."""
    out: List[str] = []
    for raw in (text or "").split(","):
        tag = raw.strip().lower()
        if tag and tag not in out:
            out.append(tag)
    return out[:MAX_TAGS]


def detect_syntax_type(request: str) -> Optional[str]:
    lowered = (request or "").lower()
    for keywords, syntax_type in HELP_KEYWORDS:
        if any(k in lowered for k in keywords):
            return syntax_type
    return None


def detect_context(content: str, cursor: int) -> tuple[Optional[str], str]:
    """Mira la última línea de los 100 caracteres previos al cursor y sugiere un tipo de sintaxis."""
    before = content[max(0, cursor - 100):cursor]
    last_line = before.split("\n")[-1]
    if "|" in last_line and "||" not in last_line:
        return "table", "Creating a table"
    if last_line.startswith("#"):
        return "heading", "Creating a heading"
    if "[" in last_line and "]" not in last_line:
        return "link", "Creating a link"
    if "```" in last_line:
        return "code_block", "Creating a code block"
    return None, last_line


class AIService:
    def __init__(self, client: Any, model: str) -> None:
        # client: AsyncOpenAI (o None si no hay API key)
        self._client = client
        self._model = model

    async def _complete(
        self,
        op: str,
        *,
        system: str,
        prompt: str,
        temperature: float,
        max_tokens: int,
    ) -> Optional[str]:
        """Una llamada al modelo. Devuelve el texto o None; nunca lanza."""
        if self._client is None:
            _log.warning("IA no configurada; op=%s devuelve valor por defecto", op)
            return None
        try:
            resp = await self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": prompt},
                ],
                temperature=temperature,
                max_tokens=max_tokens,
            )
            return _first_content(resp)
        except Exception as e:
            _log.warning("Fallo del modelo op=%s: %s", op, e)
            return None

    async def _text(self, op: str, *, empty: str, fallback: str, **kwargs: Any) -> str:
        out = await self._complete(op, **kwargs)
        if out is None:
            return fallback
        return out or empty

    async def generate_tags(self, content: str) -> List[str]:
        prompt = (
            "Analyze the following markdown content and generate 3-7 relevant tags that describe "
            "the main topics, themes, or categories. Return only the tags as a comma-separated list, "
            f"no other text.\n\nContent:\n{content}\n\nTags:"
        )
        out = await self._complete(
            "generate_tags",
            system=(
                "You are an expert content analyzer. Generate concise, relevant tags for markdown "
                "content. Return only tags separated by commas."
            ),
            prompt=prompt,
            temperature=0.3,
            max_tokens=100,
        )
        return parse_tags(out)

    async def writing_assistance(self, content: str, cursor_position: int = 0, user_query: Optional[str] = None) -> str:
        cursor = min(max(int(cursor_position or 0), 0), len(content))
        before, after = content[:cursor], content[cursor:]
        prompt = (
            "You are an AI assistant helping with markdown writing. The user is currently writing:\n\n"
            f"Content before cursor:\n{before}\n\n"
            f"Content after cursor:\n{after}\n\n"
            "Current cursor position is between these sections."
        )
        if user_query:
            prompt += f"\n\nUser's specific request: {user_query}"
        else:
            prompt += (
                "\n\nProvide helpful suggestions for continuing the content, improving markdown "
                "syntax, or completing the current thought. Be concise and specific."
            )
        return await self._text(
            "writing_assistance",
            empty="No suggestions available.",
            fallback="Unable to provide assistance at the moment.",
            system=(
                "You are a markdown writing assistant. Provide helpful, actionable suggestions to "
                "improve writing and markdown formatting. Be concise."
            ),
            prompt=prompt,
            temperature=0.7,
            max_tokens=200,
        )

    async def markdown_suggestions(self, context: str, syntax_type: str) -> str:
        prompt = (
            f"Help the user create {syntax_type} in markdown format.\n\n"
            f"Context: {context}\n\n"
            "Provide the exact markdown syntax they need, with a brief explanation. "
            "Focus on proper formatting and best practices."
        )
        return await self._text(
            "markdown_suggestions",
            empty="No syntax suggestions available.",
            fallback="Unable to provide syntax suggestions.",
            system=(
                "You are a markdown syntax expert. Provide clear, accurate markdown formatting "
                "examples with brief explanations."
            ),
            prompt=prompt,
            temperature=0.3,
            max_tokens=300,
        )

    async def summarize(self, content: str) -> str:
        prompt = (
            "Summarize the following markdown content in 2-3 sentences. "
            f"Focus on key points and main ideas:\n\n{content}"
        )
        return await self._text(
            "summarize",
            empty="Unable to summarize content.",
            fallback="Unable to summarize content.",
            system=(
                "You are a content summarization expert. Create concise, informative summaries "
                "that capture the essence of the content."
            ),
            prompt=prompt,
            temperature=0.3,
            max_tokens=150,
        )

    async def rephrase(self, content: str, style: Optional[str] = None) -> str:
        style = style or "clear"
        prompt = (
            f"Rephrase the following content to make it {style} and more engaging while "
            f"maintaining the original meaning:\n\n{content}"
        )
        return await self._text(
            "rephrase",
            empty="Unable to rephrase content.",
            fallback="Unable to rephrase content.",
            system=(
                "You are a writing improvement assistant. Rephrase content to be clearer, more "
                "engaging, and better structured while preserving the original meaning."
            ),
            prompt=prompt,
            temperature=0.7,
            max_tokens=300,
        )

    async def chat_assistant(self, message: str, note_content: Optional[str] = None) -> str:
        prompt = message
        if note_content:
            prompt = (
                f"Based on the current note content below, please help with: {message}\n\n"
                f"Current note content:\n{note_content}"
            )
        apology = "I apologize, but I cannot provide assistance at the moment."
        return await self._text(
            "chat_assistant",
            empty=apology,
            fallback=apology,
            system=(
                "You are a helpful AI assistant specializing in markdown note-taking, writing "
                "assistance, and content organization. Provide clear, actionable advice."
            ),
            prompt=prompt,
            temperature=0.7,
            max_tokens=400,
        )

    async def analyze_content(self, content: str) -> str:
        prompt = (
            "Analyze this markdown content and provide brief feedback on:\n"
            "1. Writing quality and clarity\n"
            "2. Structure and organization\n"
            "3. Markdown formatting\n"
            "4. Suggestions for improvement\n\n"
            f"Content:\n{content}\n\n"
            "Keep feedback concise and actionable."
        )
        return await self._text(
            "analyze_content",
            empty="No analysis available.",
            fallback="Unable to analyze content.",
            system=(
                "You are a content analysis expert. Provide brief, actionable feedback on writing "
                "quality, structure, and formatting."
            ),
            prompt=prompt,
            temperature=0.5,
            max_tokens=250,
        )

    async def markdown_help(self, request: str) -> str:
        """Pedido libre: si menciona un tipo de sintaxis conocido, usa su plantilla."""
        syntax_type = detect_syntax_type(request)
        if syntax_type:
            return await self.markdown_suggestions(request, syntax_type)
        prompt = (
            f'Help with this markdown request: "{request}". Provide a concise, practical markdown '
            "example or solution. Focus on exact syntax."
        )
        return await self._text(
            "markdown_help",
            empty=MARKDOWN_CHEATSHEET,
            fallback=MARKDOWN_CHEATSHEET,
            system=(
                "You are a markdown syntax expert. Provide clear, concise markdown examples and "
                "syntax help. Be brief and practical."
            ),
            prompt=prompt,
            temperature=0.2,
            max_tokens=150,
        )

    async def smart_suggestions(self, content: str, cursor_position: int = 0) -> str:
        cursor = min(max(int(cursor_position or 0), 0), len(content))
        syntax_type, context = detect_context(content, cursor)
        if syntax_type:
            return await self.markdown_suggestions(context, syntax_type)
        return await self.writing_assistance(content, cursor)
