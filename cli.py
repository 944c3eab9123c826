#!/usr/bin/env python3
"""Simple CLI for talking to the OKX DEX tool locally"""

import argparse
import asyncio
import json
import uuid
from typing import Any, Dict

from dexchat.core.dex import OKXDexTool, build_default_tool
from dexchat.logging_config import setup_logging


STATUS_ICONS = {"success": "✅", "quote_ready": "📝", "error": "❌"}


def print_envelope(envelope: Dict[str, Any], raw: bool = False) -> None:
    """Pretty print a tool response"""
    if raw:
        print(json.dumps(envelope, indent=2))
        return

    status = envelope.get("status", "error")
    print(f"{STATUS_ICONS.get(status, '•')} {status}")
    if envelope.get("message"):
        print(f"   {envelope['message']}")

    summary = envelope.get("summary")
    if isinstance(summary, dict):
        for key, value in summary.items():
            print(f"   {key}: {value}")
    elif summary:
        print(f"   {summary}")

    for i, token in enumerate(envelope.get("tokens") or [], 1):
        print(f"   {i:2d}. {str(token.get('symbol')):<10} {token.get('address')}")


def print_known_tokens() -> None:
    print("Known tokens:")
    print("-" * 50)
    for token in OKXDexTool.known_tokens():
        print(f"{token['symbol']:<6} {token['decimals']:>2} decimals  {token['address']}")


async def cli_run(text: str, raw: bool = False) -> None:
    tool = build_default_tool()
    try:
        envelope = json.loads(await tool.run(text))
    finally:
        await tool.close()
    print_envelope(envelope, raw=raw)


async def cli_chat(raw: bool = False) -> None:
    """Interactive mode: every line goes to the tool, quotes persist for the session"""
    tool = build_default_tool()
    conversation_id = f"cli-{uuid.uuid4().hex[:8]}"

    print("🔁 OKX DEX (Solana)")
    print("Type 'exit' to quit, 'help' for examples")
    print("-" * 40)

    while True:
        try:
            user_input = input("\n💬 You: ").strip()

            if user_input.lower() in ['exit', 'quit', 'q']:
                print("Goodbye! 👋")
                break
            elif user_input.lower() in ['help', 'h']:
                print("\nExamples:")
                print("  list available tokens")
                print("  show liquidity sources")
                print("  supported chains")
                print("  quote for 0.1 sol to usdc   (then: confirm swap)")
                print("  swap 5 usdc to sol          (executes immediately)")
                print('  {"operation": "getAllTokens"}')
                continue
            elif not user_input:
                continue

            envelope = json.loads(await tool.run(user_input, conversation_id=conversation_id))
            print_envelope(envelope, raw=raw)

        except (KeyboardInterrupt, EOFError):
            print("\nGoodbye! 👋")
            break

    await tool.close()


async def cli_swap(amount: str, from_token: str, to_token: str, raw: bool = False) -> bool:
    """Quote, ask for a yes/no, then confirm within one conversation. Returns True if the swap ran."""
    tool = build_default_tool()
    conversation_id = f"cli-{uuid.uuid4().hex[:8]}"
    try:
        print("🔍 Getting quote...")
        quote = json.loads(await tool.run(
            f"Get me a quote for swapping {amount} {from_token} to {to_token}",
            conversation_id=conversation_id,
        ))
        print_envelope(quote, raw=raw)
        if quote.get("status") != "quote_ready":
            return False

        answer = input("Do you want to proceed with this swap? (yes/no): ").strip().lower()
        if answer not in ("yes", "y"):
            print("Swap cancelled by user.")
            return False

        print("🚀 Executing swap...")
        result = json.loads(await tool.run("Confirm swap", conversation_id=conversation_id))
        print_envelope(result, raw=raw)
        return result.get("status") == "success"
    finally:
        await tool.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="dexchat CLI")
    parser.add_argument("--raw", action="store_true", help="Print raw JSON envelopes")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("chat", help="Interactive mode")

    run_parser = subparsers.add_parser("run", help="Send one input to the tool")
    run_parser.add_argument("text", help="JSON operation or natural-language request")

    swap_parser = subparsers.add_parser("swap", help="Quote a swap, ask, then confirm it")
    swap_parser.add_argument("amount", nargs="?", default="0.001", help="Amount of the source token")
    swap_parser.add_argument("from_token", nargs="?", default="sol", help="Source token symbol")
    swap_parser.add_argument("to_token", nargs="?", default="usdc", help="Destination token symbol")

    subparsers.add_parser("tokens", help="Show the static token table")

    return parser


async def main():
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    setup_logging(args.log_level)

    command = args.command.lower()
    if command == "chat":
        await cli_chat(raw=args.raw)
    elif command == "run":
        await cli_run(args.text, raw=args.raw)
    elif command == "swap":
        await cli_swap(args.amount, args.from_token, args.to_token, raw=args.raw)
    elif command == "tokens":
        print_known_tokens()
    else:
        print(f"❌ Unknown command: {command}")
        parser.print_help()


if __name__ == "__main__":
    asyncio.run(main())
