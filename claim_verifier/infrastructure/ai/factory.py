"""Factory for creating and managing AI judges."""

import logging
import os
from typing import Callable, Dict, List, Optional, Type

from ...domain.ports.ai_judge import AIJudge
from .gemini_judge import GeminiJudge, GeminiJudgeConfig
from .huggingface_nli import HuggingFaceNLIConfig, HuggingFaceNLIJudge
from .openai_judge import OpenAIJudge, OpenAIJudgeConfig

logger = logging.getLogger(__name__)

# judge name -> builds the judge's config from the environment
CONFIG_BUILDERS: Dict[str, Callable[..., object]] = {
    "openai": lambda **kwargs: OpenAIJudgeConfig(api_key=os.getenv("OPENAI_API_KEY", ""), **kwargs),
    "gemini": lambda **kwargs: GeminiJudgeConfig(api_key=os.getenv("GEMINI_API_KEY", ""), **kwargs),
    "huggingface": lambda **kwargs: HuggingFaceNLIConfig(
        api_token=os.getenv("HUGGINGFACE_API_TOKEN", ""), **kwargs
    ),
}


class AIJudgeFactory:
    """Factory for creating and managing AI judges."""

    def __init__(self):
        """Initialize the factory."""
        self._judges: Dict[str, Type[AIJudge]] = {}
        self._instances: Dict[str, AIJudge] = {}

        # Register default judges
        self.register_judge("openai", OpenAIJudge)
        self.register_judge("gemini", GeminiJudge)
        self.register_judge("huggingface", HuggingFaceNLIJudge)

    def register_judge(self, name: str, judge_class: Type[AIJudge]) -> None:
        """Register a new AI judge.

        Args:
            name: Judge name
            judge_class: Judge class
        """
        self._judges[name] = judge_class

    async def create_judge(self, name: str, **kwargs) -> AIJudge:
        """Create and initialize a judge instance.

        Args:
            name: Judge name
            **kwargs: Judge-specific configuration

        Returns:
            Initialized judge instance

        Raises:
            ValueError: If judge not found
            ConnectionError: If the judge cannot be initialized
        """
        if name not in self._judges:
            raise ValueError(f"Judge '{name}' not found")

        if name not in self._instances:
            if name in CONFIG_BUILDERS:
                judge = self._judges[name](config=CONFIG_BUILDERS[name](**kwargs))
            else:
                judge = self._judges[name](**kwargs)
            await judge.initialize()
            self._instances[name] = judge

        return self._instances[name]

    async def create_available(self) -> List[AIJudge]:
        """Create every registered judge that can be initialized.

        Judges without credentials or that fail to start are skipped.
        """
        judges = []
        for name in self._judges:
            try:
                judges.append(await self.create_judge(name))
                logger.info(f"✅ AI judge {name} ready")
            except Exception as e:
                logger.warning(f"⚠️ AI judge {name} unavailable: {e}")
        return judges

    def get_judge(self, name: str) -> Optional[AIJudge]:
        """Get an existing judge instance.

        Args:
            name: Judge name

        Returns:
            Judge instance if exists, None otherwise
        """
        return self._instances.get(name)

    @property
    def available_judges(self) -> Dict[str, bool]:
        """Get dictionary of registered judges and their availability."""
        return {
            name: name in self._instances
            for name in self._judges
        }

    async def shutdown(self) -> None:
        """Shutdown all judge instances."""
        for judge in self._instances.values():
            await judge.shutdown()
        self._instances.clear()
