"""Sermon draft generation via LLM.

Sends the reference, scripture text and current main idea to an
OpenAI-compatible endpoint (OpenRouter by default) and returns a full
draft: a main idea plus text for every section. Only one generation may
be in flight at a time.
"""

import json
import os
import threading
from typing import Optional

import openai

from sprout.app.config import DEFAULT_API_BASE, DEFAULT_MODEL
from sprout.app.logging_config import get_logger
from sprout.app.models import GeneratedContent
from sprout.app.sections import SECTION_ORDER
from sprout.app.state import EditorStore

logger = get_logger(__name__)

API_KEY_ENV = "OPENROUTER_API_KEY"


class GenerationError(Exception):
    """Base error for draft generation."""


class EmptyInput(GenerationError):
    """Neither a reference nor scripture text was provided."""


class GenerationBusy(GenerationError):
    """Another generation is already in flight."""


class GenerationFailed(GenerationError):
    """The generation request failed or returned an unusable response."""


SYSTEM_PROMPT = (
    "You are an expert sermon writer following Andy Stanley's "
    '"Communicating for a Change" methodology. You answer with a single '
    "JSON object and nothing else."
)


def build_prompt(reference: str, verses: str, statement: str) -> str:
    """Build the generation prompt.

    Args:
        reference: Scripture reference
        verses: Scripture text
        statement: Current main idea (may be empty)

    Returns:
        Prompt string
    """
    keys = ", ".join(f'"{section_id.value}"' for section_id in SECTION_ORDER)
    return f"""Context:
Scripture Reference: "{reference}"
Scripture Text: "{verses}"
Current One Point (Main Idea): "{statement}"

Task:
1. If the "One Point" is empty, write a sticky, memorable Bottom Line based on the scripture.
2. If the "One Point" is provided, use it as the anchor.
3. Write content for ALL sections of the sermon framework (Intro, Me, We, God, You, We, Out).

Framework Guidance:
- INTRO: Hook the audience. Start with a story or question.
- ME: Build rapport. Share a personal struggle or perspective.
- WE (1): Build tension. How does this affect us all?
- GOD: Resolve tension. What does the text say? Exegete the scripture.
- YOU: Application. Specific challenge.
- WE (2): Inspiration. Vision of a better future if we apply this.
- OUT: Conclusion. Land the plane.

Tone: Conversational, engaging, spoken-word style.

Return a JSON object with the string keys "statement" (the bottom line) and {keys}.
All keys are required."""


def parse_response(content: str) -> GeneratedContent:
    """Parse the model output into a complete draft.

    Args:
        content: Raw message content

    Returns:
        GeneratedContent

    Raises:
        GenerationFailed: If the content is not JSON or misses a field
    """
    content = (content or "").strip()

    # Clean up markdown code blocks
    if content.startswith("```json"):
        content = content[7:]
    if content.startswith("```"):
        content = content[3:]
    if content.endswith("```"):
        content = content[:-3]
    content = content.strip()

    try:
        data = json.loads(content)
    except (json.JSONDecodeError, RecursionError) as e:
        raise GenerationFailed(f"LLM returned invalid JSON: {e}") from e

    generated = GeneratedContent.from_dict(data)
    if generated is None:
        raise GenerationFailed("LLM response is missing required fields")
    return generated


class GenerationBridge:
    """Generate complete sermon drafts with an LLM."""

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        api_key: Optional[str] = None,
        api_base: Optional[str] = None,
        timeout: float = 60.0,
    ):
        """Initialize the bridge.

        Args:
            model: LLM model identifier
            api_key: OpenRouter API key (if None, reads OPENROUTER_API_KEY)
            api_base: Custom API base URL (defaults to OpenRouter)
            timeout: Request timeout in seconds
        """
        self.model = model
        self.api_key = api_key
        self.api_base = api_base or DEFAULT_API_BASE
        self.timeout = timeout
        self._client = None
        self._busy = threading.Lock()

    @property
    def client(self):
        """Get or create the LLM client."""
        if self._client is None:
            key = self.api_key or os.environ.get(API_KEY_ENV)
            if not key:
                raise ValueError(
                    f"OpenRouter API key required. Set {API_KEY_ENV} environment variable "
                    "or pass api_key parameter."
                )
            self._client = openai.OpenAI(api_key=key, base_url=self.api_base, timeout=self.timeout)
        return self._client

    @property
    def is_busy(self) -> bool:
        """Whether a generation is in flight."""
        return self._busy.locked()

    def generate(self, reference: str, verses: str, statement: str) -> GeneratedContent:
        """Generate a full draft.

        Args:
            reference: Scripture reference
            verses: Scripture text
            statement: Current main idea (may be empty)

        Returns:
            GeneratedContent with every section filled

        Raises:
            EmptyInput: If both reference and verses are blank
            GenerationBusy: If another generation is in flight
            GenerationFailed: On any request or response failure
        """
        if not reference.strip() and not verses.strip():
            raise EmptyInput("Please provide a Book Reference or paste Verses.")

        if not self._busy.acquire(blocking=False):
            raise GenerationBusy("A generation is already in progress.")

        try:
            return self._request(reference, verses, statement)
        finally:
            self._busy.release()

    def _request(self, reference: str, verses: str, statement: str) -> GeneratedContent:
        logger.info(f"Generating draft for '{reference}' with {self.model}")
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": build_prompt(reference, verses, statement)},
                ],
                response_format={"type": "json_object"},
                temperature=0.7,
            )
            content = response.choices[0].message.content
        except ValueError as e:
            logger.error(f"Generation unavailable: {e}")
            raise GenerationFailed(str(e)) from e
        except openai.OpenAIError as e:
            logger.error(f"Generation request failed: {e}")
            raise GenerationFailed(f"Generation request failed: {e}") from e
        except (AttributeError, IndexError, TypeError) as e:
            logger.error(f"Unexpected generation response: {e}")
            raise GenerationFailed(f"Unexpected generation response: {e}") from e

        generated = parse_response(content)
        logger.info("Draft generated")
        return generated

    def generate_into(self, store: EditorStore) -> GeneratedContent:
        """Generate from the store's current input and apply the result.

        The store is only written when generation succeeds, and then all
        sections and the main idea are replaced together.

        Args:
            store: Editor store to read from and write into

        Returns:
            The applied draft

        Raises:
            EmptyInput, GenerationBusy, GenerationFailed: Store left unchanged
        """
        generated = self.generate(store.reference, store.verses, store.statement)
        store.apply_generated(generated)
        return generated
