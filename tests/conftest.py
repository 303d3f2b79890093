"""Shared fixtures."""

import os
from pathlib import Path

import pytest

SAMPLE_CONFIG = """\
defaultProvider: gemini
gemini:
  apiKey: gemini-key
  modelName: gemini-pro
  temperature: 0.2
  maxOutputTokens: 256
openAI:
  apiKey: openai-key
  modelName: gpt-4
  temperature: 0.3
  maxOutputTokens: 128
azureOpenAI:
  apiKey: azure-key
  modelEndpoint: https://example.openai.azure.com/
  modelDeploymentID: my-deployment
  temperature: 0.4
  maxOutputTokens: 64
bedrock:
  modelName: amazon.titan-text-express-v1
  awsProfile: default
  awsRegion: us-east-1
"""


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep GQ_* variables from the developer's shell out of tests."""
    for key in list(os.environ):
        if key.startswith("GQ_"):
            monkeypatch.delenv(key)


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / ".gq.yaml"
    path.write_text(SAMPLE_CONFIG)
    return path
