"""Pytest configuration and fixtures."""

import json
import os

# Set before genui is imported: Config reads the environment at import time
os.environ["GEMINI_API_KEY"] = ""  # never reach the real provider from tests
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["PARALLEL_STAGES"] = "false"

import pytest
from fastapi.testclient import TestClient

from genui.main import create_app


# ============================================================================
# Canned model output
# ============================================================================

PLAN = {
    "type": "create",
    "components": [
        {
            "name": "Navbar",
            "props": {"title": "Dashboard", "links": [{"label": "Home"}, {"label": "Users"}]},
        },
        {
            "name": "Card",
            "props": {
                "title": "Users",
                "content": "1,204",
                "description": "Active users this week",
            },
        },
        {
            "name": "Chart",
            "props": {
                "title": "Signups",
                "data": [{"label": "Mon", "value": 12}, {"label": "Tue", "value": 18}],
            },
        },
    ],
}

PLAN_JSON = json.dumps(PLAN)

CODE = """<>
  <Navbar title="Dashboard" links={[{label: "Home"}, {label: "Users"}]} />
  <Card title="Users" content="1,204" description="Active users this week" />
  <Chart title="Signups" data={[{label: "Mon", value: 12}, {label: "Tue", value: 18}]} />
</>"""

EXPLANATION = (
    "A navigation bar lets people move between the dashboard and the user list. "
    "A card highlights the headline number, and a chart shows how signups change over the week."
)


def stage_of(prompt: str) -> str:
    if prompt.startswith("You are a UI planner"):
        return "plan"
    if prompt.startswith("You are a UI code generator"):
        return "generate"
    if prompt.startswith("Explain in plain English"):
        return "explain"
    return "unknown"


class StubModel:
    """
    Call-recording stand-in for the model client.
    Each stage answers with a fixed string, or raises if given an exception.
    """

    def __init__(self, plan=PLAN_JSON, code=CODE, explanation=EXPLANATION):
        self.outputs = {"plan": plan, "generate": code, "explain": explanation}
        self.prompts: list[str] = []

    @property
    def calls(self) -> int:
        return len(self.prompts)

    @property
    def stages(self) -> list[str]:
        return [stage_of(p) for p in self.prompts]

    def prompt_for(self, stage: str) -> str:
        return next(p for p in self.prompts if stage_of(p) == stage)

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        output = self.outputs[stage_of(prompt)]
        if isinstance(output, BaseException):
            raise output
        return output


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def stub_model():
    return StubModel()


@pytest.fixture
def make_client():
    """Build a TestClient around a given stub model."""

    def _make(model, **kwargs):
        return TestClient(create_app(model=model), **kwargs)

    return _make


@pytest.fixture
def client(stub_model, make_client):
    return make_client(stub_model)
