#!/usr/bin/env python3
"""
Interactive console for the Ingres chatbot.
Same conversation flow as the API, printed to the terminal.
"""

import asyncio
import logging
import textwrap

from ingres.config import BOT_NAME, LANGUAGES, find_language
from ingres.conversation import Conversation
from ingres.dataset import GroundwaterDataset


def format_entry(entry) -> str:
    """Terminal rendering of one bot transcript entry."""
    lines = [f"🤖 {BOT_NAME}: {entry.text}"]
    if entry.type in ("graph", "prediction"):
        lines.append("    Year  Recharge(MCM)  WaterLevel(m)  Rainfall(mm)  Status")
        for r in entry.district_data:
            lines.append(
                f"    {r.year}  {r.recharge_mcm:>13.1f}  {r.water_level_m:>13.1f}  {r.rainfall_mm:>12.1f}  {r.status}"
            )
    if entry.type == "prediction":
        p = entry.prediction
        lines.append(
            f"    {p.year}  {p.recharge_mcm:>13.1f}  {p.water_level_m:>13.1f}  {p.rainfall_mm:>12.1f}  (forecast)"
        )
        lines.append(textwrap.indent(f"Rationale: {p.rationale}", "    "))
    return "\n".join(lines)


def _print_bot_entry(entry):
    if entry.sender == "bot":
        print(format_entry(entry) + "\n")


def interactive_loop():
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")

    dataset = GroundwaterDataset()
    conversation = Conversation(dataset, on_entry=_print_bot_entry)

    print(f"Districts: {', '.join(dataset.districts)}")
    print(f"Languages: {', '.join(f'{l.code} ({l.name})' for l in LANGUAGES)}")
    print("Type ':lang <code>' to switch language, 'exit' to quit.\n")

    # one loop for the whole session; the Groq client keeps its connections on it
    loop = asyncio.new_event_loop()
    try:
        _chat(loop, conversation)
    finally:
        loop.close()


def _chat(loop, conversation):
    while True:
        q = input("🧠 You: ").strip()
        if not q:
            continue
        if q.lower() in ("exit", "quit"):
            print("👋 Bye.")
            break
        if q.startswith(":lang"):
            conversation.language = find_language(q[len(":lang"):].strip())
            print(f"Language set to {conversation.language.name}.\n")
            continue

        try:
            loop.run_until_complete(conversation.submit(q))
        except Exception as e:
            logging.exception("An error occurred while handling the question:")
            print(f"❌ Error: {e}")
            print("Try rephrasing the question.\n")


if __name__ == "__main__":
    interactive_loop()
