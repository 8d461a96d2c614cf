"""Prompt templates for RAG."""

from typing import Any

NOT_IN_CONTEXT_REPLY = "I don't have that specific information in my knowledge base."


class RAGPromptTemplate:
    """Prompt template for grounded answers.

    The system prompt restricts the model to the supplied context; the user
    turn carries the context followed by the question.
    """

    DEFAULT_SYSTEM_PROMPT = f"""You are a helpful support assistant. Answer the user's question using ONLY the information provided in the context below.

INSTRUCTIONS:
1. Read ALL the context documents carefully
2. Find the specific section that answers the question
3. Provide exact numbers, rates, and details from the context
4. If asked about rates or fees, include the specific ranges and any conditions

FORMATTING RULES:
- When comparing multiple products or options, use a MARKDOWN TABLE
- Use bullet points for: features, benefits, requirements, step-by-step processes
- Bold important numbers and key terms
- Keep responses concise but complete

If the information is not in the context, say "{NOT_IN_CONTEXT_REPLY}\""""

    DEFAULT_USER_TEMPLATE = """CONTEXT:
{context}

QUESTION: {question}

ANSWER (use specific numbers from the context):"""

    def __init__(
        self,
        system_prompt: str | None = None,
        user_template: str | None = None,
    ) -> None:
        """Initialize the RAG prompt template.

        Args:
            system_prompt: Custom system prompt.
            user_template: Custom user message template with {context} and {question}.
        """
        self.system_prompt = system_prompt or self.DEFAULT_SYSTEM_PROMPT
        self.user_template = user_template or self.DEFAULT_USER_TEMPLATE

    def format(self, **kwargs: Any) -> str:
        """Format the user template.

        Args:
            **kwargs: Must include 'context' and 'question'.

        Returns:
            Formatted user prompt.
        """
        return self.user_template.format(**kwargs)

    def build_prompt(self, question: str, context: str) -> tuple[str, str]:
        """Build the (system_prompt, user_prompt) pair for one question."""
        return self.system_prompt, self.format(context=context, question=question)
