# ui.py
from typing import Optional


class ConsoleUI:
    """
    Prompts and dialogs on the terminal.
    Anything with the same three methods can drive the workflow instead.
    """

    def prompt(self, message: str) -> Optional[str]:
        """Returns the entered text, or None if the user cancelled (EOF)."""
        try:
            return input(f"{message}\n> ")
        except EOFError:
            return None

    def confirm(self, message: str) -> bool:
        try:
            answer = input(f"{message} [y/N] ")
        except EOFError:
            return False
        return answer.strip().lower() in ("y", "yes")

    def alert(self, message: str):
        print(message)
