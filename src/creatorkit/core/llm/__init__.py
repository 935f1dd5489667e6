"""Generation capability, its LangChain adapter and the single-call invoker."""

from .deps import get_generation_capability, get_llm  # noqa: F401
from .generation import ChatModelGenerator, GenerationCapability  # noqa: F401
from .invoker import GenerationInvoker  # noqa: F401
