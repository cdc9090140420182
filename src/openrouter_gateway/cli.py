"""Command line entry point for ad-hoc generation and chat.

Usage:
    openrouter-gateway generate "Photosynthesis converts light to chemical energy."
    openrouter-gateway batch "Tekst źródłowy..." --language pl
    openrouter-gateway chat "What is the capital of France?" --system "Be concise."
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import Sequence

from .core.config import Settings, get_settings, setup_logging
from .core.exceptions import ConfigurationError, GatewayError
from .services import FlashcardGenerationService, OpenRouterService


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="openrouter-gateway", description="OpenRouter flashcard and chat gateway")
    parser.add_argument("--model", default=None, help="Model in provider/model form (default: from settings)")
    parser.add_argument("--mock", action="store_true", help="Answer locally without calling the API")
    sub = parser.add_subparsers(dest="command", required=True)

    generate = sub.add_parser("generate", help="Generate one flashcard proposal from text")
    generate.add_argument("text")

    batch = sub.add_parser("batch", help="Generate a batch of flashcards from text")
    batch.add_argument("text")
    batch.add_argument("--language", choices=["en", "pl"], default=None)

    chat = sub.add_parser("chat", help="Send a single chat message")
    chat.add_argument("message")
    chat.add_argument("--system", default=None, help="System message")
    return parser


async def _run(args: argparse.Namespace, settings: Settings) -> str:
    use_mock = args.mock or settings.USE_AI_MOCK
    overrides = {"model_name": args.model} if args.model else {}
    if use_mock and not settings.OPENROUTER_API_KEY:
        # placeholder, the mock client never sends it
        overrides["api_key"] = "mock"
    config = settings.gateway_config(**overrides)

    async with OpenRouterService(config, use_mock=use_mock) as service:
        if args.command == "generate":
            proposal = await service.generate_structured(args.text)
            return proposal.model_dump_json(indent=2)
        if args.command == "batch":
            result = await FlashcardGenerationService(service).generate_flashcards(args.text, language=args.language)
            return result.model_dump_json(indent=2)
        if args.system:
            service.set_system_message(args.system)
        response = await service.send_chat(args.message)
        return response.message_text if isinstance(response.message, str) else json.dumps(response.message, indent=2)


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point; returns the process exit code."""
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(settings.logging_config())

    try:
        output = asyncio.run(_run(args, settings))
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    except GatewayError as e:
        print(f"{e.kind.value} error: {e}", file=sys.stderr)
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
