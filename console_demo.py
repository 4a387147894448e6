"""
Offline console demo — chat with the dialogue engine from a terminal.

Uses the real engine and session store with the in-memory clinic
backend by default, so no API or messaging gateway is needed. Replies
are printed the way a plain-text chat channel would show them.

Usage:
    python console_demo.py
    python console_demo.py --scenario booking
    python console_demo.py --backend http
"""

import argparse
import asyncio
import sys

from src.config import settings
from src.conversation.dialogue_engine import DialogueEngine
from src.prompts.reply_templates import render_reply_as_text
from src.tools.backend import HttpBackendClient
from src.tools.mock_backend import MockClinicBackend

BLUE = "\033[94m"
GREEN = "\033[92m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"

DEMO_USER = "59160012345"


class ConsoleSession:
    """Drives one chat user's conversation through the engine."""

    # Pre-scripted scenarios for --scenario flag
    SCENARIOS: dict[str, list[str]] = {
        "booking": ["hola", "1", "1234567", "limpieza", "5", "2026-02-01", "10:00"],
        "lookup": ["2", "1234567"],
        "register": ["3", "7654321", "Ana", "Rojas", "no", "1", "7654321", "menu"],
        "diagnosis": ["4", "Me duele mucho la muela del juicio"],
        "cancel": ["1", "1234567", "cancelar"],
    }

    MAX_INPUT_LENGTH = 1000

    def __init__(self, engine: DialogueEngine, user_id: str = DEMO_USER) -> None:
        self.engine = engine
        self.user_id = user_id

    def bot_say(self, text: str) -> None:
        print(f"{GREEN}{BOLD}[{settings.clinic.bot_title}]{RESET} {GREEN}{text}{RESET}")

    def system_log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    async def send(self, text: str) -> None:
        reply = await self.engine.process_turn(self.user_id, text)
        self.bot_say(render_reply_as_text(reply))
        session = self.engine.store.get(self.user_id)
        self.system_log(f"Reply: {reply.kind} | Step: {session.step.value}")

    async def run_scenario(self, scenario: str) -> None:
        """Auto-play a pre-scripted scenario for demo purposes."""
        steps = self.SCENARIOS.get(scenario)
        if not steps:
            print(f"{RED}Unknown scenario: {scenario}{RESET}")
            return

        self._banner(f"Scenario: {scenario}")
        for step in steps:
            print(f"\n{BLUE}[User] {RESET}{step}")
            await self.send(step)
        self._banner(f"Scenario '{scenario}' complete.")

    async def run(self) -> None:
        self._banner("Type 'quit' to exit")
        loop = asyncio.get_running_loop()
        while True:
            user_input = (await loop.run_in_executor(None, input, f"\n{BLUE}[User] {RESET}")).strip()
            if not user_input:
                continue
            if user_input.lower() in ("quit", "exit", "q"):
                print(f"\n{DIM}Session ended.{RESET}")
                return
            if len(user_input) > self.MAX_INPUT_LENGTH:
                self.bot_say("Tu mensaje es muy largo. ¿Puedes resumirlo?")
                continue
            await self.send(user_input)

    def _banner(self, subtitle: str) -> None:
        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  {settings.clinic.name.upper()} CHAT - Console Demo{RESET}")
        print(f"{BOLD}  {subtitle}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")


async def _main(args: argparse.Namespace) -> int:
    if args.backend == "http":
        backend = HttpBackendClient()
        if not await backend.check_connection():
            print(f"{RED}Backend at {backend.base_url} is not reachable.{RESET}")
            await backend.aclose()
            return 1
    else:
        backend = MockClinicBackend()

    session = ConsoleSession(DialogueEngine(backend=backend), user_id=args.user)
    try:
        if args.scenario:
            await session.run_scenario(args.scenario)
        else:
            await session.run()
    finally:
        if isinstance(backend, HttpBackendClient):
            await backend.aclose()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Chat with the clinic bot in the terminal")
    parser.add_argument(
        "--scenario", choices=sorted(ConsoleSession.SCENARIOS), help="auto-play a scripted chat",
    )
    parser.add_argument(
        "--backend", choices=("mock", "http"), default="mock",
        help="in-memory clinic data or the API at API_BASE_URL",
    )
    parser.add_argument("--user", default=DEMO_USER, help="chat user id (phone number)")
    return parser


def main(argv=None) -> int:
    return asyncio.run(_main(build_parser().parse_args(argv)))


if __name__ == "__main__":
    sys.exit(main())
