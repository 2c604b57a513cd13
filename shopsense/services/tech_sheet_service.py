import json
import re
from datetime import datetime, timezone
from typing import List, Optional

from shopsense.logging_config import get_logger
from shopsense.models import Quote, TechSheet
from shopsense.repositories import ShopRepository
from shopsense.services.ids import new_id
from shopsense.services.llm import LLMProvider, prompt_messages

logger = get_logger("tech_sheet_service")

TECH_SHEET_TEMPERATURE = 0.7
TECH_SHEET_MAX_TOKENS = 1500

DIFFICULTIES = ("Easy", "Medium", "Hard")
DEFAULT_DIFFICULTY = "Medium"
DEFAULT_ESTIMATED_HOURS = 2.0

GENERATED_BY_AI = "ai"
GENERATED_BY_TEMPLATE = "template"
SOURCE_MANUAL = "manual"
SOURCE_QUOTE = "quote"

REQUIRED_KEYS = (
    "title",
    "estimated_time",
    "difficulty",
    "tools_required",
    "parts_needed",
    "safety_warnings",
    "step_by_step",
    "tips",
)

TECH_SHEET_SYSTEM_PROMPT = """You are an expert automotive technician creating detailed repair guides. Generate a comprehensive tech sheet for the given job description. Format your response as JSON with these exact fields:

{
  "title": "Brief descriptive title",
  "estimated_time": number (hours as decimal),
  "difficulty": "Easy|Medium|Hard",
  "tools_required": ["tool1", "tool2"],
  "parts_needed": ["part1", "part2"],
  "safety_warnings": ["warning1", "warning2"],
  "step_by_step": ["step1", "step2", "step3"],
  "tips": ["tip1", "tip2"]
}

Make the instructions detailed and professional for a working mechanic."""

_FENCE_PATTERN = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)


def template_content(job_description: str) -> dict:
    """Generic sheet used whenever the model output can't be used."""
    return {
        "title": job_description[:50] + "...",
        "estimated_time": DEFAULT_ESTIMATED_HOURS,
        "difficulty": DEFAULT_DIFFICULTY,
        "tools_required": ["Basic hand tools", "Socket set"],
        "parts_needed": ["As needed"],
        "safety_warnings": ["Wear safety glasses", "Use proper lifting techniques"],
        "step_by_step": ["Assess the issue", "Gather required tools", "Perform repair", "Test functionality"],
        "tips": ["Take photos before disassembly", "Keep parts organized"],
    }


def parse_tech_sheet_content(text: Optional[str]) -> Optional[dict]:
    """Decode the JSON contract, tolerating markdown fences. Returns None if any key is missing."""
    if not text:
        return None
    candidate = text.strip()
    fenced = _FENCE_PATTERN.search(candidate)
    if fenced:
        candidate = fenced.group(1).strip()
    try:
        data = json.loads(candidate)
    except ValueError:
        return None
    if not isinstance(data, dict) or any(key not in data for key in REQUIRED_KEYS):
        return None
    return data


def _string_list(value) -> List[str]:
    if isinstance(value, list):
        return [str(item) for item in value if item is not None]
    if value:
        return [str(value)]
    return []


def _hours(value) -> float:
    try:
        hours = float(value)
    except (TypeError, ValueError):
        return DEFAULT_ESTIMATED_HOURS
    return hours if hours > 0 else DEFAULT_ESTIMATED_HOURS


class TechSheetService:
    def __init__(self, repository: ShopRepository, provider: Optional[LLMProvider] = None):
        self.repository = repository
        self.provider = provider

    def list_tech_sheets(self) -> list[TechSheet]:
        return self.repository.list(TechSheet)

    async def _generate_content(self, prompt: str) -> Optional[dict]:
        if self.provider is None:
            logger.info("LLM not configured, using tech sheet template")
            return None
        try:
            response = await self.provider.generate(
                messages=prompt_messages(
                    TECH_SHEET_SYSTEM_PROMPT,
                    f"Generate a detailed tech sheet for this automotive repair job: {prompt}",
                ),
                temperature=TECH_SHEET_TEMPERATURE,
                max_tokens=TECH_SHEET_MAX_TOKENS,
            )
        except Exception as e:
            logger.warning(f"Tech sheet generation failed, using template: {e}")
            return None

        if response.is_empty:
            logger.warning("Tech sheet reply was empty, using template")
            return None

        content = parse_tech_sheet_content(response.content)
        if content is None:
            logger.warning("Tech sheet reply did not match the JSON contract, using template")
        return content

    async def generate(
        self,
        job_description: str,
        vehicle_info: Optional[str] = None,
        customer_name: Optional[str] = None,
        *,
        contact_id: Optional[str] = None,
        source_quote_id: Optional[str] = None,
    ) -> TechSheet:
        """Generate and store a tech sheet. Always succeeds, using the template as last resort."""
        prompt = f"{job_description} for {vehicle_info}" if vehicle_info else job_description
        content = await self._generate_content(prompt)
        generated_by = GENERATED_BY_AI
        if content is None:
            content = template_content(job_description)
            generated_by = GENERATED_BY_TEMPLATE

        difficulty = content.get("difficulty")
        if difficulty not in DIFFICULTIES:
            difficulty = DEFAULT_DIFFICULTY

        sheet = TechSheet(
            id=new_id(),
            contact_id=contact_id,
            title=str(content.get("title") or job_description[:50] + "..."),
            description=job_description,
            vehicle_info=vehicle_info,
            customer_name=customer_name,
            estimated_hours=_hours(content.get("estimated_time")),
            difficulty=difficulty,
            tools=_string_list(content.get("tools_required")),
            parts=_string_list(content.get("parts_needed")),
            safety_warnings=_string_list(content.get("safety_warnings")),
            steps=_string_list(content.get("step_by_step")),
            tips=_string_list(content.get("tips")),
            generated_by=generated_by,
            source=SOURCE_QUOTE if source_quote_id else SOURCE_MANUAL,
            source_quote_id=source_quote_id,
            created_at=datetime.now(timezone.utc),
        )
        self.repository.upsert(sheet)
        logger.info(
            "Tech sheet stored",
            extra={"context": {"tech_sheet_id": sheet.id, "generated_by": generated_by, "quote_id": source_quote_id}},
        )
        return sheet

    async def generate_from_quote(self, quote: Quote) -> TechSheet:
        """Tech sheet for the work described by an accepted quote."""
        job_description = quote.description or "General automotive service"
        if quote.labor_hours:
            job_description = f"{job_description} (estimated {quote.labor_hours} hours)"
        return await self.generate(
            job_description,
            quote.vehicle_info,
            quote.customer_name,
            contact_id=quote.contact_id,
            source_quote_id=quote.id,
        )
