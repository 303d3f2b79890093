"""
gq - ask an LLM about the data you pipe to it.

Package structure:
- core: config, logging, answer rendering
- llm: provider adapters (gemini, openai, azure_openai, bedrock) and dispatch
- cli: command-line entry point
"""

__version__ = "0.1.0"
