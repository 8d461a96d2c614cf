#!/usr/bin/env python
"""Ask one question from the command line.

Usage:
    python -m scripts.ask "What is the APR on the rewards card?" --mode semantic
    python -m scripts.ask "And the annual fee?" --mode hybrid --session-id <id>

Runs the same pipelines as the API against the configured services, which
makes it a quick smoke test for OPENSEARCH_*, OPENAI_* and LANGFLOW_* settings.
"""

import argparse
import asyncio
import json
import sys

from ragchat.api.deps import ServiceContainer
from ragchat.config import get_settings
from ragchat.exceptions import RAGChatError
from ragchat.logging_config import get_logger, setup_logging
from ragchat.rag.models import Answer, Query, SearchType

logger = get_logger(__name__)


async def ask(question: str, mode: SearchType, session_id: str | None) -> Answer:
    """Run one question through the selected pipeline.

    Args:
        question: The question to answer.
        mode: semantic (direct) or hybrid (Langflow).
        session_id: Conversation identifier to continue, if any.

    Returns:
        The pipeline's answer.
    """
    container = ServiceContainer(get_settings())
    query = Query(question=question, session_id=session_id) if session_id else Query(question=question)
    try:
        if mode == SearchType.SEMANTIC:
            return await container.semantic_pipeline.query(query)
        return await container.hybrid_pipeline.query(query)
    finally:
        await container.close()


def print_answer(answer: Answer, show_debug: bool) -> None:
    """Print an answer and, optionally, its diagnostics."""
    print("\n" + "=" * 60)
    print(f"ANSWER ({answer.search_type.value})")
    print("=" * 60)
    print(answer.answer)
    print("=" * 60)
    print(f"Session: {answer.session_id}")

    if answer.retrieved_docs is not None:
        print(f"Documents retrieved: {answer.docs_retrieved}")
        for doc in answer.retrieved_docs:
            print(f"  #{doc.rank} score={doc.score:.4f} {doc.file_path}")

    if show_debug:
        print("\nSearch info:")
        print(json.dumps(answer.search_info, indent=2))


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Ask the RAG system a question",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("question", help="Question to ask")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in SearchType],
        default=SearchType.SEMANTIC.value,
        help="Search mode",
    )
    parser.add_argument(
        "--session-id",
        default=None,
        help="Conversation identifier to continue (hybrid mode)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print the search diagnostics",
    )

    args = parser.parse_args()
    setup_logging(level="WARNING")

    try:
        answer = asyncio.run(ask(args.question, SearchType(args.mode), args.session_id))
    except RAGChatError as e:
        logger.error(f"Query failed: {e.message}", extra={"error_code": e.code.value})
        print(f"\nERROR [{e.code.value}]: {e.message}", file=sys.stderr)
        sys.exit(1)

    print_answer(answer, show_debug=args.debug)


if __name__ == "__main__":
    main()
