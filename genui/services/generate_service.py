"""
Three-stage UI generation pipeline: plan -> code -> explain.
The planner's output is validated into a Plan before anything else runs;
generator and explainer both read that same Plan, so they may run
concurrently. Any stage failure fails the whole request.
"""

import asyncio
import time
from typing import AsyncGenerator, Optional

from genui.errors import GenerationError, InvalidInputError, MalformedPlanError, ModelUnavailableError
from genui.models.components import Plan
from genui.models.generate import GenerateResponse
from genui.services.model_client import ModelClient
from genui.services.plan_validator import check_code, check_explanation, parse_plan
from genui.services.prompt_service import (
    build_explainer_prompt,
    build_generator_prompt,
    build_planner_prompt,
)
from genui.utils.logger import logger


class GenerationPipeline:
    """Drives one request through the planner, generator and explainer prompts."""

    def __init__(self, model: ModelClient, parallel_stages: bool = False):
        self.model = model
        self.parallel_stages = parallel_stages

    @staticmethod
    def _require_message(message: Optional[str]) -> str:
        if message is None or not message.strip():
            raise InvalidInputError("message is empty")
        return message

    async def _call(self, stage: str, prompt: str) -> str:
        started = time.monotonic()
        try:
            text = await self.model.complete(prompt)
        except ModelUnavailableError as e:
            e.stage = stage
            logger.error(f"Model call failed at stage={stage}: {e}")
            raise
        elapsed_ms = int((time.monotonic() - started) * 1000)
        logger.info(f"Stage {stage} done in {elapsed_ms}ms ({len(text)} chars)")
        return text

    async def plan(self, message: str, previous_code: Optional[str] = None) -> Plan:
        raw = await self._call("plan", build_planner_prompt(message, previous_code))
        try:
            plan = parse_plan(raw)
        except MalformedPlanError as e:
            logger.error(
                f"Malformed plan ({e.reason}): {e.detail} | "
                f"raw_length={e.raw_length} excerpt={e.excerpt!r}"
            )
            raise
        logger.info(f"Plan accepted: type={plan.type}, components={plan.component_names()}")
        return plan

    async def generate_code(self, plan: Plan, previous_code: Optional[str] = None) -> str:
        return await self._call("generate", build_generator_prompt(plan, previous_code))

    async def explain(self, plan: Plan) -> str:
        return await self._call("explain", build_explainer_prompt(plan))

    async def _code_and_explanation(
        self, plan: Plan, previous_code: Optional[str]
    ) -> tuple[str, str]:
        if not self.parallel_stages:
            code = await self.generate_code(plan, previous_code)
            explanation = await self.explain(plan)
            return code, explanation

        tasks = [
            asyncio.ensure_future(self.generate_code(plan, previous_code)),
            asyncio.ensure_future(self.explain(plan)),
        ]
        try:
            code, explanation = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            raise
        return code, explanation

    @staticmethod
    def _assemble(
        plan: Plan, code: str, explanation: str, previous_code: Optional[str]
    ) -> GenerateResponse:
        warnings = check_code(code, plan, previous_code) + check_explanation(explanation)
        if warnings:
            logger.warning(f"Generation finished with {len(warnings)} warnings: {warnings}")
        return GenerateResponse(plan=plan, code=code, explanation=explanation, warnings=warnings)

    async def run(self, message: Optional[str], previous_code: Optional[str] = None) -> GenerateResponse:
        """Run all three stages. Raises a GenerationError subclass on failure."""
        message = self._require_message(message)
        plan = await self.plan(message, previous_code)
        code, explanation = await self._code_and_explanation(plan, previous_code)
        return self._assemble(plan, code, explanation, previous_code)

    async def run_stream(
        self, message: Optional[str], previous_code: Optional[str] = None
    ) -> AsyncGenerator[dict, None]:
        """
        Same pipeline as run(), reported as events: start, plan, code,
        explanation, complete. A failure yields a single error event and ends
        the stream.
        """
        yield {"type": "start", "message": "Planning components..."}

        try:
            message = self._require_message(message)
            plan = await self.plan(message, previous_code)
            yield {"type": "plan", "data": plan.model_dump(mode="json")}

            code = await self.generate_code(plan, previous_code)
            yield {"type": "code", "data": code}

            explanation = await self.explain(plan)
            yield {"type": "explanation", "data": explanation}

            result = self._assemble(plan, code, explanation, previous_code)
            yield {"type": "complete", "data": result.model_dump(mode="json")}
        except GenerationError as e:
            yield {"type": "error", **e.to_response()}
        except Exception as e:
            logger.error(f"Stream generation failed: {e}", exc_info=True)
            yield {"type": "error", **GenerationError().to_response()}
