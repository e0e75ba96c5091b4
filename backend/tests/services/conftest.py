"""Service test fixtures — FastAPI test client and a scripted field generator.

Invariants:
    - get_field_generator dependency overridden per test; no Anthropic calls
    - FakeGenerator records every prompt it receives

Design Decisions:
    - FakeGenerator at the FieldGenerator seam (not the HTTP client): route
      and loop tests exercise prompts and policy, not SDK plumbing
"""

import pytest
from httpx import ASGITransport, AsyncClient

from langpolicy.api.routes.generation import get_field_generator
from langpolicy.main import app


class FakeGenerator:
    """Returns queued GeneratedFields (or raises queued exceptions) in order."""

    def __init__(self, outputs):
        self._outputs = list(outputs)
        self.prompts = []

    async def generate(self, prompt):
        self.prompts.append(prompt)
        if not self._outputs:
            raise RuntimeError("FakeGenerator: no output configured")
        output = self._outputs.pop(0)
        if isinstance(output, Exception):
            raise output
        return output


@pytest.fixture
def fake_generator():
    """Factory: fake_generator(out1, out2, ...) -> FakeGenerator."""
    return lambda *outputs: FakeGenerator(outputs)


@pytest.fixture
async def client():
    """FastAPI test client; tests set app.dependency_overrides as needed."""
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
    app.dependency_overrides.pop(get_field_generator, None)
