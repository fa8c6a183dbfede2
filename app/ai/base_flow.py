from abc import ABC
from typing import Any, Generic, List, Optional, Type, TypeVar
import json
import logging
import time

from pydantic import BaseModel, ValidationError

from app.core.config import settings
from app.core.exceptions import AIGenerationError

logger = logging.getLogger(__name__)

OutputT = TypeVar("OutputT", bound=BaseModel)


class BaseFlow(ABC, Generic[OutputT]):
    """
    Single-shot generation flow: fixed prompt in, schema-checked JSON out.

    Subclasses set the prompt, the output model and the message shown to the
    caller on failure. There is no retry; any transport, model or validation
    problem becomes an AIGenerationError carrying that message.
    """

    flow_name: str = "flow"
    system_prompt: str = ""
    output_model: Type[OutputT]
    failure_message: str = "Failed to generate content. Please try again."

    def __init__(self, client: Any, model: Optional[str] = None, temperature: Optional[float] = None):
        self.client = client
        self.model = model or settings.AI_MODEL
        self.temperature = settings.AI_TEMPERATURE if temperature is None else temperature

    def build_prompt(self, kpi_data: str) -> str:
        raise NotImplementedError

    def build_messages(self, kpi_data: str) -> List[dict]:
        return [
            {"role": "system", "content": self.system_prompt},
            {"role": "user", "content": self.build_prompt(kpi_data)},
        ]

    def parse_output(self, content: Optional[str]) -> OutputT:
        if not content:
            raise ValueError("empty response from model")
        return self.output_model.model_validate(json.loads(content))

    async def run(self, kpi_data: str) -> OutputT:
        if self.client is None:
            logger.error(f"{self.flow_name}: no AI client configured")
            raise AIGenerationError(self.failure_message)

        started = time.time()
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=self.build_messages(kpi_data),
                temperature=self.temperature,
                response_format={"type": "json_object"},
            )
            output = self.parse_output(response.choices[0].message.content)
        except (ValidationError, json.JSONDecodeError, ValueError) as e:
            logger.error(f"{self.flow_name}: model output rejected: {e}")
            raise AIGenerationError(self.failure_message)
        except Exception as e:
            logger.error(f"{self.flow_name}: generation failed ({type(e).__name__}): {e}")
            raise AIGenerationError(self.failure_message)

        logger.info(f"{self.flow_name}: completed in {time.time() - started:.2f}s with model {self.model}")
        return output
