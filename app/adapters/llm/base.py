from abc import ABC, abstractmethod


class AbstractLLMClient(ABC):
	"""Interface for chat-completion clients that return plain text."""

	model: str

	@abstractmethod
	async def complete(
		self,
		system_message: str,
		user_message: str,
		*,
		temperature: float,
		top_p: float,
		max_tokens: int,
	) -> str:
		"""Generate a single reply for a system + user message pair.

		Args:
			system_message: Fixed instruction framing the assistant's role.
			user_message: Per-request message with context, query and evidence.
			temperature: Sampling temperature.
			top_p: Nucleus sampling mass.
			max_tokens: Upper bound on generated tokens.

		Returns:
			str: Generated text, or an empty string when the provider returned no content.

		Raises:
			Exception: Provider errors propagate unchanged so callers can classify them.
		"""
		...
