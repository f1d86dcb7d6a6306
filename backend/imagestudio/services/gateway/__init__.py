"""
External generation gateway: AI backend and model-run provider clients.
"""

from .backend_client import AIBackendClient
from .gateway import GenerationGateway
from .model_run_client import ModelRunClient, ensure_image_input
from .outputs import ExternalOutput, Url, UrlBearing, UrlList, extract_url, parse_output
from .prompts import build_prompt

__all__ = [
    "AIBackendClient",
    "ModelRunClient",
    "GenerationGateway",
    "ensure_image_input",
    "ExternalOutput",
    "Url",
    "UrlList",
    "UrlBearing",
    "parse_output",
    "extract_url",
    "build_prompt",
]
