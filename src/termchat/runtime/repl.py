from typing import Callable

from termchat.runtime.runtime import ChatRuntime, TurnOutcome

EXIT_PHRASES = frozenset({"exit", "quit", "bye", "goodbye"})
FAREWELL = "\nGoodbye! Thanks for chatting!"
PROMPT = "\nYou: "


def is_exit_command(text: str) -> bool:
    return text.strip().lower() in EXIT_PHRASES


class ChatREPL:
    def __init__(
        self,
        runtime: ChatRuntime,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
    ):
        self.runtime = runtime
        self.input = input_fn
        self.output = output_fn

    def print_banner(self) -> None:
        self.output("  *** Terminal AI Chatbot ***")
        self.output(f"Connected to: {self.runtime.config.model}")
        self.output("Type 'exit', 'quit', 'bye', or 'goodbye' to end the conversation.")
        self.output("================================")

    def handle_line(self, line: str) -> TurnOutcome:
        text = line.strip()
        if is_exit_command(text):
            self.output(FAREWELL)
            return TurnOutcome.EXIT
        if not text:
            return TurnOutcome.SKIPPED
        return self.runtime.process_user_message(text)

    def run(self) -> None:
        self.print_banner()

        while True:
            try:
                if self.handle_line(self.input(PROMPT)) is TurnOutcome.EXIT:
                    break
            except (EOFError, KeyboardInterrupt):
                self.output(FAREWELL)
                break
