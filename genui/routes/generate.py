import json

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from genui.errors import InvalidInputError
from genui.models.generate import GenerateRequest, GenerateResponse
from genui.services.generate_service import GenerationPipeline

router = APIRouter()


def get_pipeline(request: Request) -> GenerationPipeline:
    return request.app.state.pipeline


@router.post("/generate", response_model=GenerateResponse)
async def generate(
    req: GenerateRequest,
    pipeline: GenerationPipeline = Depends(get_pipeline),
):
    """Plan, generate and explain a UI for the user's message."""
    return await pipeline.run(req.message, req.previous_code)


@router.post("/generate/stream")
async def generate_stream(
    req: GenerateRequest,
    pipeline: GenerationPipeline = Depends(get_pipeline),
):
    """SSE stream of pipeline progress, one event per finished stage."""
    # Reject before the stream opens so the caller still gets a plain 400
    if not req.message or not req.message.strip():
        raise InvalidInputError("message is empty")

    async def event_generator():
        async for event in pipeline.run_stream(req.message, req.previous_code):
            yield f"data: {json.dumps(event)}\n\n"

    return StreamingResponse(event_generator(), media_type="text/event-stream")
