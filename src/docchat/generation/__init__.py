"""
Generation — chat-completion port, provider adapter and prompt templates.
"""
