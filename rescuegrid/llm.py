"""Move proposals and plan validation through an Ollama server."""

from __future__ import annotations

import json
import logging
import urllib.request
from dataclasses import dataclass
from typing import Callable, Mapping, Optional

OLLAMA_URL = "http://localhost:11434/api/generate"
PLANNER_MODEL = "gemma:3.4b"
VALIDATOR_MODEL = "deepseek-r1:1.5b"
INVALID_RESPONSE = "Invalid response from LLM."

_RESPONSE_MARKER = '"response":"'
_PROMPT_HEADER = (
    "You are a robotics assistant operating in a 8x8 grid (0-7). "
    'Respond ONLY with one movement command: "move north", "move south", '
    '"move east", "move west", or "stay".'
)

log = logging.getLogger(__name__)

Transport = Callable[[str, bytes, Mapping[str, str]], str]


@dataclass(frozen=True)
class ValidationResult:
    """Verdict on a plan together with the model's answer."""

    is_valid: bool
    reason: str


def _post(url: str, data: bytes, headers: Mapping[str, str]) -> str:
    request = urllib.request.Request(url, data=data, headers=dict(headers), method="POST")
    with urllib.request.urlopen(request) as response:
        return response.read().decode("utf-8", errors="replace")


class OllamaClient:
    """Sends generation requests to an Ollama server."""

    def __init__(self, url: str = OLLAMA_URL, transport: Optional[Transport] = None) -> None:
        self.url = url
        self._transport = transport if transport is not None else _post

    def generate(self, model: str, prompt: str, stream: Optional[bool] = None) -> str:
        """Return the raw response body; ``stream`` is sent only when given."""
        payload: dict[str, object] = {"model": model, "prompt": prompt}
        if stream is not None:
            payload["stream"] = stream
        data = json.dumps(payload).encode("utf-8")
        return self._transport(self.url, data, {"Content-Type": "application/json"})


def build_prompt(x: int, y: int, front: float, left: float, right: float) -> str:
    """Describe the robot's state and ask for one movement command."""
    return (
        f"{_PROMPT_HEADER}"
        f"\nLocation: ({x},{y})"
        f"\nSonar Front: {float(front):g}m"
        f"\nSonar Left: {float(left):g}m"
        f"\nSonar Right: {float(right):g}m"
        "\n\nWhat action should the robot take?"
    )


def extract_response(body: str) -> str:
    """Pull the text of the "response" field out of a reply body."""
    pos = body.find(_RESPONSE_MARKER)
    if pos == -1:
        return INVALID_RESPONSE
    start = pos + len(_RESPONSE_MARKER)
    end = body.find('"', start)
    return body[start:] if end == -1 else body[start:end]


def propose_action(
    client: OllamaClient, x: int, y: int, front: float, left: float, right: float
) -> str:
    """Ask the planner model which move to make next."""
    prompt = build_prompt(x, y, front, left, right)
    try:
        body = client.generate(PLANNER_MODEL, prompt, stream=False)
    except OSError as exc:
        log.error("generate request failed: %s", exc)
        body = ""
    return extract_response(body)


def validate_plan(client: OllamaClient, plan_steps: str) -> ValidationResult:
    """Ask the validator model about a plan; any non-empty answer counts as valid."""
    prompt = "Validate the following plan: " + plan_steps
    try:
        answer = client.generate(VALIDATOR_MODEL, prompt)
    except OSError as exc:
        log.error("generate request failed: %s", exc)
        answer = ""
    return ValidationResult(is_valid=bool(answer), reason=answer)