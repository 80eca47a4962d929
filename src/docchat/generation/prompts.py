"""Prompt templates for grounded question answering."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from langchain_core.messages import HumanMessage, SystemMessage

if TYPE_CHECKING:
    from langchain_core.messages import BaseMessage

CONTEXT_SEPARATOR = "\n---\n"

ANSWER_SYSTEM = (
    "You are a helpful assistant answering questions about a document. "
    "Answer using only the given context."
)

ANSWER_USER_TEMPLATE = "Use the following context to answer the question:\n{context}\n\nQuestion: {question}"


def build_context(texts: Sequence[str]) -> str:
    """Join chunk texts, most relevant first."""
    return CONTEXT_SEPARATOR.join(texts)


def build_user_message(context: str, question: str) -> str:
    return ANSWER_USER_TEMPLATE.format(context=context, question=question)


def build_messages(system: str, user: str) -> list[BaseMessage]:
    return [SystemMessage(content=system), HumanMessage(content=user)]
