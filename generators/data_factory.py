"""
LLM-powered demo data generator for the Breeding Timeline Engine.
STRATEGY: one batch request per fixture kind, strict pydantic validation per item.
Invalid items are skipped; a failed batch yields an empty result, never a crash.
"""

import os
import json
import logging
import re
import google.generativeai as genai
from collections import defaultdict
from typing import List, Tuple, Dict, Any, Type, Optional
from datetime import date
from pydantic import ValidationError, BaseModel, Field

from models import PlanRow, ReproEvent, Species

logger = logging.getLogger(__name__)


class PlanEvent(ReproEvent):
    """A generated history entry still carrying the plan it belongs to."""
    plan_id: str = Field(min_length=1)


class DataGenerator:
    MODEL_NAME = "gemini-2.5-flash-preview-09-2025"
    LIST_KEYS = ['plans', 'events', 'history', 'result']

    def __init__(self, api_key: Optional[str] = None):
        self.api_key = api_key or os.environ.get("GOOGLE_API_KEY")
        if not self.api_key:
            raise ValueError("GOOGLE_API_KEY not found. Please set it in environment.")

        genai.configure(api_key=self.api_key)
        self.model = genai.GenerativeModel(self.MODEL_NAME)
        self.total_cost = 0.0

    def _estimate_cost(self, prompt_tokens: int, response_tokens: int) -> float:
        return (prompt_tokens * 0.075 + response_tokens * 0.30) / 1_000_000

    def _robust_parse_json(self, raw_text: str) -> List[Any]:
        """
        Strips markdown fences, falls back to the first JSON array in the text,
        and unwraps {"plans": [...]}-style envelopes.
        """
        if not raw_text:
            return []

        # 1. Clean Markdown Code Blocks
        clean_text = re.sub(r"```json\s*|\s*```", "", raw_text).strip()

        try:
            data = json.loads(clean_text)
        except json.JSONDecodeError:
            match = re.search(r'(\[.*\])', clean_text, re.DOTALL)
            if not match:
                return []
            try:
                data = json.loads(match.group(1))
            except json.JSONDecodeError:
                return []

        # 2. Normalize Data Shape
        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            for key in self.LIST_KEYS:
                if key in data and isinstance(data[key], list):
                    return data[key]
            return [data]
        return []

    def _fetch_big_batch(self, prompt: str, model_class: Type[BaseModel]) -> Tuple[List[Any], float]:
        """
        Executes a generation request with robust parsing.
        """
        try:
            generation_config = genai.GenerationConfig(
                response_mime_type="application/json",
                max_output_tokens=16000,
                temperature=0.7
            )

            response = self.model.generate_content(prompt, generation_config=generation_config)

            cost = 0.0
            usage = getattr(response, 'usage_metadata', None)
            if usage is not None:
                cost = self._estimate_cost(usage.prompt_token_count, usage.candidates_token_count)
            self.total_cost += cost

            data_list = self._robust_parse_json(response.text)

            valid_items = []
            for i, item in enumerate(data_list):
                if not isinstance(item, dict):
                    logger.warning(f"Skipping non-object item {i} in batch")
                    continue
                try:
                    valid_items.append(model_class(**item))
                except ValidationError as e:
                    logger.warning(f"Skipping invalid item {i} in batch: {e.json()}")
                    continue

            return valid_items, cost

        except Exception as e:
            logger.error(f"Batch Generation Failed: {e}")
            return [], 0.0

    def generate_breeding_portfolio(self, count: int = 12, start_date: Optional[date] = None) -> Tuple[List[PlanRow], float]:
        """
        Generates breeding plans spread over the year after start_date.
        Plan ids are rewritten to a stable plan_NNN sequence.
        """
        if start_date is None:
            start_date = date.today()

        species_list = json.dumps([s.value for s in Species if s != Species.OTHER])
        prompt = f"""
        Generate {count} breeding plans for a small kennel/cattery/stable, planning from {start_date}.

        OUTPUT FORMAT:
        A single valid JSON Array containing {count} objects.

        STRICT SCHEMA RULES:
        1. VALID "species" VALUES: {species_list}
        2. ALL DATES are strings "YYYY-MM-DD" within 12 months after {start_date}.
        3. FIELDS:
           - "id" (string), "name" (string, e.g. "Luna x Atlas"), "species"
           - "locked_cycle_start" (date or null)
           - "earliest_cycle_start" and "latest_cycle_start" (dates or null; latest >= earliest, at most 14 days apart)
           - "expected_cycle_start" (date or null)
           - "expected_next_cycle_start" (date or null)
           - "locked_due_date" (date or null)
        4. MIX:
           - About half the plans have a "locked_cycle_start".
           - A few have only an earliest/latest range.
           - A few have NO cycle dates at all, only "expected_next_cycle_start".
        """

        logger.info(f"Requesting {count} breeding plans...")
        plans, cost = self._fetch_big_batch(prompt, PlanRow)

        renumbered = [p.model_copy(update={"id": f"plan_{i:03d}"}) for i, p in enumerate(plans)]
        logger.info(f"Generated {len(renumbered)} valid plans.")
        return renumbered, cost

    def generate_heat_histories(
        self,
        plan_ids: List[str],
        start_date: Optional[date] = None
    ) -> Tuple[Dict[str, List[ReproEvent]], float]:
        """
        Generates past heat-start histories for the dams behind the given plans.
        Events for unknown plan ids are dropped.
        """
        if start_date is None:
            start_date = date.today()
        if not plan_ids:
            return {}, 0.0

        prompt = f"""
        Generate past reproductive histories for these breeding plans: {json.dumps(plan_ids)}.

        OUTPUT FORMAT:
        A single valid JSON Array of event objects.

        STRICT SCHEMA RULES:
        - "plan_id": one of the ids above
        - "kind": one of ["heat_start", "ovulation", "insemination", "birth"]
        - "date": "YYYY-MM-DD", strictly before {start_date}
        - "note": short string or null
        - Give each plan between 0 and 5 "heat_start" events, realistically spaced for a dog (about 6 months).
        """

        logger.info(f"Requesting heat histories for {len(plan_ids)} plans...")
        events, cost = self._fetch_big_batch(prompt, PlanEvent)

        known = set(plan_ids)
        by_plan: Dict[str, List[ReproEvent]] = defaultdict(list)
        for ev in events:
            if ev.plan_id not in known:
                logger.warning(f"Dropping event for unknown plan {ev.plan_id}")
                continue
            by_plan[ev.plan_id].append(ReproEvent(kind=ev.kind, date=ev.date, note=ev.note))

        return dict(by_plan), cost
