"""
LLM module - provider adapters.

Providers:
- gemini: Google Gemini (Generative Language REST API)
- openai: OpenAI chat completions
- azure_openai: Azure OpenAI deployments
- bedrock: AWS Bedrock Runtime (per-model JSON bodies)

The registry maps provider names to adapters one-to-one.
"""
